"""
Merge matched patterns and structural signals into one CommandAnalysis.

Precedence is fixed: the verdict is the max of every tier seen, and the
reasons list leads with blocked-command hits, then pattern descriptions
from the highest tier down, then structural reasons in collector order.
"""

from typing import Iterable, List, Sequence

from ..collectors.base_collector import Evidence
from ..patterns.registry import DangerPattern
from ..types import CommandAnalysis, MatchedPattern, RiskLevel

# Pattern tiers in the order their descriptions are reported
_REPORTED_TIERS = (RiskLevel.CRITICAL, RiskLevel.DANGEROUS, RiskLevel.CAUTION)


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def aggregate(
    command: str,
    matched: Sequence[DangerPattern],
    evidence: Evidence,
) -> CommandAnalysis:
    """
    Build the final analysis for a command.

    Args:
        command: The raw command text, stored verbatim on the result
        matched: Patterns that fired, in registry order
        evidence: Signals, actions and paths gathered by the collectors

    Returns:
        A new, frozen CommandAnalysis
    """
    levels = [p.risk_level for p in matched] + [s.level for s in evidence.signals]
    risk_level = max(levels, default=RiskLevel.SAFE)

    reversible = not (
        risk_level >= RiskLevel.DANGEROUS
        or any(p.irreversible for p in matched)
        or any(s.irreversible for s in evidence.signals)
    )

    reasons: List[str] = [s.reason for s in evidence.signals if s.blocking]
    for tier in _REPORTED_TIERS:
        reasons.extend(p.description for p in matched if p.risk_level == tier)
    reasons.extend(s.reason for s in evidence.signals if not s.blocking)

    return CommandAnalysis(
        command=command,
        risk_level=risk_level,
        risk_reasons=tuple(_dedupe(reasons)),
        affected_paths=tuple(evidence.paths),
        actions=tuple(evidence.actions),
        reversible=reversible,
        requires_sudo=evidence.requires_sudo,
        patterns=tuple(
            MatchedPattern(
                pattern=p.pattern.pattern,
                description=p.description,
                risk_level=p.risk_level,
            )
            for p in matched
        ),
        blocked=any(s.blocking for s in evidence.signals),
    )
