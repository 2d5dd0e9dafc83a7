"""
Execution gate: turns a CommandAnalysis into run / ask / refuse.
"""

from enum import Enum
from typing import TYPE_CHECKING, Union

from ..types import CommandAnalysis, RiskLevel

if TYPE_CHECKING:
    from .configs import SafetySettings

THRESHOLDS = {
    "safe": RiskLevel.SAFE,
    "caution": RiskLevel.CAUTION,
    "dangerous": RiskLevel.DANGEROUS,
}


class GateDecision(Enum):
    """Decision for command execution."""
    ALLOW = "allow"       # Execute without confirmation
    CONFIRM = "confirm"   # Require user confirmation
    DENY = "deny"         # Block execution


class ExecutionGate:
    """Decides how a classified command may be executed."""

    def __init__(self, threshold: Union[str, RiskLevel] = "caution", require_confirmation: bool = True):
        """
        Args:
            threshold: Lowest tier that needs confirmation (safe, caution or dangerous)
            require_confirmation: When False every non-blocked command is allowed

        Raises:
            ValueError: If threshold is not recognized
        """
        self.threshold = self.load_threshold(threshold)
        self.require_confirmation = require_confirmation

    @classmethod
    def from_settings(cls, settings: "SafetySettings") -> "ExecutionGate":
        return cls(
            threshold=settings.confirm_threshold,
            require_confirmation=settings.require_confirmation,
        )

    @staticmethod
    def load_threshold(threshold: Union[str, RiskLevel]) -> RiskLevel:
        if isinstance(threshold, RiskLevel):
            name = threshold.name.lower()
        else:
            name = str(threshold).strip().lower()
        level = THRESHOLDS.get(name)
        if level is None:
            available = ", ".join(THRESHOLDS.keys())
            raise ValueError(
                f"Unknown confirm threshold: {threshold}. Available thresholds: {available}"
            )
        return level

    def decide(self, analysis: CommandAnalysis) -> GateDecision:
        """
        Decide for an analysis.

        Blocked commands are refused whatever the threshold; nothing else
        is ever refused, only held for confirmation.
        """
        if analysis.blocked:
            return GateDecision.DENY
        if not self.require_confirmation:
            return GateDecision.ALLOW
        if analysis.risk_level >= self.threshold:
            return GateDecision.CONFIRM
        return GateDecision.ALLOW
