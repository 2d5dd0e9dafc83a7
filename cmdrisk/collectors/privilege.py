"""Privilege escalation detection."""

from ..types import RiskLevel
from .base_collector import BaseCollector, Evidence


class PrivilegeCollector(BaseCollector):
    """Flags stages run through sudo."""

    def collect(self, evidence: Evidence) -> None:
        # Exact, case-sensitive match on the first word of each stage
        if any(stage.name == "sudo" for stage in evidence.stages()):
            evidence.requires_sudo = True
            self.signal(evidence, RiskLevel.CAUTION, "Command requires elevated privileges")
