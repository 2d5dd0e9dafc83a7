"""
Curated danger signatures.

Each row is (regex, description, tier, category, irreversible). Rows are
matched with re.search against the raw command, so a signature only anchors
where it says so itself. Order matters: within a tier, reasons are reported
in table order.
"""

import re

from ..types import RiskLevel
from .registry import DangerPattern, PatternRegistry

# Block devices that hold filesystems
_DEVICE = r"(?:sd[a-z]|nvme\d|disk\d|hd[a-z]|mmcblk\d|xvd[a-z]|vd[a-z])"
# Zero or more flag words, e.g. "-rf --verbose ". Each word splits one way only.
_FLAGS = r"(?:--?\w[\w-]*\s+|--\s+)*"
# A shell on the receiving end of a pipe
_SHELL = r"(?:sudo\s+)?(?:ba|z|da|k)?sh\b"
# End of a word as the shell sees it
_END = r"(?=\s|$|[;&|)])"

SIGNATURES = (
    # CRITICAL - system destruction
    (
        rf"\brm\s+{_FLAGS}(?:/|~|\$HOME|\$\{{HOME\}})/?\*?{_END}",
        "Delete from root or home directory",
        RiskLevel.CRITICAL, "filesystem", True,
    ),
    (
        r"\brm\s[^|;&]*--no-preserve-root\b",
        "Delete with root protection disabled",
        RiskLevel.CRITICAL, "filesystem", True,
    ),
    (
        rf"\bdd\s[^|;&]*\bof=/dev/{_DEVICE}",
        "Direct disk write - can destroy data",
        RiskLevel.CRITICAL, "disk", True,
    ),
    (
        r"\bmkfs(?:\.[a-z0-9]+)?\s+",
        "Format filesystem",
        RiskLevel.CRITICAL, "disk", True,
    ),
    (
        r":\s*\(\s*\)\s*\{\s*:\s*\|\s*:\s*&\s*\}\s*;\s*:",
        "Fork bomb - will crash system",
        RiskLevel.CRITICAL, "system", False,
    ),
    (
        rf">\s*/dev/{_DEVICE}",
        "Overwrite disk device",
        RiskLevel.CRITICAL, "disk", True,
    ),
    (
        rf"\bmv\s+{_FLAGS}(?:/|~)\s+",
        "Move root or home directory",
        RiskLevel.CRITICAL, "filesystem", False,
    ),
    (
        rf"\bchmod\s+{_FLAGS}0+\s+/{_END}",
        "Remove all permissions from root",
        RiskLevel.CRITICAL, "permissions", False,
    ),

    # DANGEROUS - major system changes
    (
        r"\bchmod\s+(?:(?:-[a-zA-Z]*R[a-zA-Z]*|--recursive)\s+(?:0?777|a\+rwx|ugo\+rwx)"
        r"|(?:0?777|a\+rwx|ugo\+rwx)\s+(?:-[a-zA-Z]*R[a-zA-Z]*|--recursive))(?=\s|$)",
        "Recursive world-writable permissions (security risk)",
        RiskLevel.DANGEROUS, "permissions", False,
    ),
    (
        r"\bchown\s+(?:-[a-zA-Z]*R[a-zA-Z]*|--recursive)\s+",
        "Recursive ownership change",
        RiskLevel.DANGEROUS, "permissions", False,
    ),
    (
        rf"\bcurl\b[^|]*\|\s*{_SHELL}",
        "Pipe URL to shell - potential malware",
        RiskLevel.DANGEROUS, "network", False,
    ),
    (
        r"\bwget\b[^|]*(?:-[a-zA-Z]*O\s*-|--output-document\s*=?\s*-)(?=\s|\|)"
        rf"[^|]*\|\s*{_SHELL}",
        "Download and execute - potential malware",
        RiskLevel.DANGEROUS, "network", False,
    ),
    (
        rf"\bsudo\s+{_FLAGS}rm\s+(?:-[a-zA-Z]+\s+)*-[a-zA-Z]*[rR]",
        "Privileged recursive deletion",
        RiskLevel.DANGEROUS, "filesystem", True,
    ),
    (
        r"(?<![\\\"'])>\s*/etc/",
        "Overwrite system configuration",
        RiskLevel.DANGEROUS, "system", False,
    ),
    (
        r"\brm\s[^|;&\n]*\*",
        "Delete with wildcard",
        RiskLevel.DANGEROUS, "filesystem", False,
    ),
    (
        r"\b(?:fdisk|sfdisk|gdisk|parted)\b|\bdiskutil\s+(?:erase\w*|partitionDisk)\b",
        "Disk partition modification",
        RiskLevel.DANGEROUS, "disk", False,
    ),
    (
        r"\blaunchctl\s+unload\b.*\bcom\.apple\.",
        "Unload system service",
        RiskLevel.DANGEROUS, "system", False,
    ),
    (
        rf"\bchmod\s+{_FLAGS}[ugoa]*\+[rwxXt]*s",
        "Set setuid/setgid bit",
        RiskLevel.DANGEROUS, "permissions", False,
    ),
    (
        rf"\bkill\s+-(?:9|KILL|SIGKILL)\s+-1{_END}",
        "Kill every process the user can signal",
        RiskLevel.DANGEROUS, "process", False,
    ),
    (
        r"\biptables\s+(?:-F|--flush)(?=\s|$)|\bufw\s+disable\b",
        "Flush or disable firewall rules",
        RiskLevel.DANGEROUS, "network", False,
    ),
    (
        r"(?:^|[;&|(])\s*(?:sudo\s+)?(?:shutdown|reboot|poweroff|halt|init\s+[06])\b",
        "Shut down or reboot the system",
        RiskLevel.DANGEROUS, "system", False,
    ),

    # CAUTION - potentially risky
    (
        rf"\brm\s+{_FLAGS}?(?:-[a-zA-Z]*[rRf][a-zA-Z]*|--recursive|--force){_END}",
        "Recursive or force delete",
        RiskLevel.CAUTION, "filesystem", False,
    ),
    (
        r"\bsudo\s+",
        "Elevated privileges",
        RiskLevel.CAUTION, "system", False,
    ),
    (
        rf"\bkill\s+(?:-9|-KILL|-SIGKILL|-s\s+(?:9|KILL|SIGKILL)){_END}",
        "Force kill process",
        RiskLevel.CAUTION, "process", False,
    ),
    (
        r"\b(?:pkill|killall)\b",
        "Kill processes by name",
        RiskLevel.CAUTION, "process", False,
    ),
    (
        r"(?<![<>&\d=\"'\\-])>\|?\s*(?![&>]|/dev/null\b|/dev/std(?:out|err)\b)\S",
        "File overwrite redirect",
        RiskLevel.CAUTION, "filesystem", False,
    ),
    (
        r"\bgit\s+push\b[^|;&]*(?:--force|\s-[a-zA-Z]*f\b)",
        "Force push can overwrite history",
        RiskLevel.CAUTION, "git", False,
    ),
    (
        r"\bgit\s+reset\b[^|;&]*--hard\b",
        "Hard reset discards changes",
        RiskLevel.CAUTION, "git", False,
    ),
    (
        r"\bgit\s+clean\b[^|;&]*\s-[a-zA-Z]*f",
        "Remove untracked files",
        RiskLevel.CAUTION, "git", False,
    ),
    (
        r"\bdocker\s+(?:system|image|volume|container|network|builder)\s+prune\b",
        "Remove unused Docker data",
        RiskLevel.CAUTION, "docker", False,
    ),
    (
        rf"\bdocker\s+(?:rm|rmi)\s+(?:-[a-zA-Z]*f[a-zA-Z]*|--force){_END}",
        "Force remove container or image",
        RiskLevel.CAUTION, "docker", False,
    ),
    (
        r"\bdocker\s+volume\s+rm\b",
        "Remove Docker volume",
        RiskLevel.CAUTION, "docker", False,
    ),
    (
        r"\b(?:brew\s+uninstall|apt(?:-get)?\s+(?:-y\s+)?(?:remove|purge|autoremove)"
        r"|yum\s+(?:remove|erase)|dnf\s+remove|pacman\s+-R\w*"
        r"|pip3?\s+uninstall|npm\s+(?:uninstall|rm)\s+(?:-g|--global))\b",
        "Package removal",
        RiskLevel.CAUTION, "packages", False,
    ),
    (
        r"\bhistory\s+-c\b|>\s*~/\.(?:bash|zsh)_history\b",
        "Clear command history",
        RiskLevel.CAUTION, "system", False,
    ),
    (
        r"\btruncate\s+",
        "Truncate file (data loss)",
        RiskLevel.CAUTION, "filesystem", True,
    ),
    (
        r"\bshred\s+",
        "Secure delete (unrecoverable)",
        RiskLevel.CAUTION, "filesystem", True,
    ),
    (
        r"\bcrontab\s+(?:-u\s+\S+\s+)?-r\b",
        "Remove all cron jobs",
        RiskLevel.CAUTION, "system", True,
    ),
    (
        r"\bsystemctl\s+(?:stop|disable|mask)\b",
        "Stop or disable a system service",
        RiskLevel.CAUTION, "system", False,
    ),
)


def build_registry() -> PatternRegistry:
    """Compile SIGNATURES into a registry. Called once at import."""
    return PatternRegistry(
        DangerPattern(
            pattern=re.compile(regex),
            description=description,
            risk_level=level,
            category=category,
            irreversible=irreversible,
        )
        for regex, description, level, category, irreversible in SIGNATURES
    )
