"""Risk signals for output redirects."""

import re

from ..core.parser import RedirectMode
from ..types import RiskLevel
from .base_collector import NULL_SINKS, BaseCollector, Evidence

BLOCK_DEVICE = re.compile(r"^/dev/(?:sd[a-z]|nvme\d|disk\d|hd[a-z]|mmcblk\d|xvd[a-z]|vd[a-z])")


class RedirectCollector(BaseCollector):
    """Grades each redirect by where it writes."""

    def collect(self, evidence: Evidence) -> None:
        if evidence.pipeline is None:
            return

        for stage in evidence.pipeline:
            for redirect in stage.redirects:
                target = redirect.target
                if target in NULL_SINKS:
                    continue
                if BLOCK_DEVICE.match(target):
                    self.signal(
                        evidence, RiskLevel.CRITICAL,
                        f"Writes directly to block device {target}", irreversible=True,
                    )
                elif target == "/etc" or target.startswith("/etc/"):
                    self.signal(
                        evidence, RiskLevel.DANGEROUS,
                        f"Writes into system configuration: {target}",
                    )
                elif redirect.mode is RedirectMode.WRITE:
                    self.signal(evidence, RiskLevel.CAUTION, f"Overwrites file: {target}")
