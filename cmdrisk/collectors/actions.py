"""
Action classification for mutating commands.

Maps command names to a small action vocabulary and adds the structural
signals that depend on how a specific command is invoked (rm -rf on /,
chmod -R 777, dd, mkfs).
"""

from enum import Enum
from typing import List, Optional

from ..core.parser import RedirectMode, Word
from ..types import RiskLevel
from .base_collector import (
    NULL_SINKS,
    BaseCollector,
    Evidence,
    command_name,
    has_short_flag,
    split_flags,
)


class Action(str, Enum):
    """What a command does to the system."""
    DELETE = "DELETE"
    MOVE = "MOVE"
    COPY = "COPY"
    OVERWRITE = "OVERWRITE"
    APPEND = "APPEND"
    KILL = "KILL"
    PERMISSIONS = "PERMISSIONS"
    FORMAT = "FORMAT"
    PARTITION = "PARTITION"
    SHUTDOWN = "SHUTDOWN"


COMMAND_ACTIONS = {
    "rm": Action.DELETE,
    "rmdir": Action.DELETE,
    "unlink": Action.DELETE,
    "shred": Action.DELETE,
    "mv": Action.MOVE,
    "cp": Action.COPY,
    "rsync": Action.COPY,
    "dd": Action.OVERWRITE,
    "truncate": Action.OVERWRITE,
    "kill": Action.KILL,
    "pkill": Action.KILL,
    "killall": Action.KILL,
    "chmod": Action.PERMISSIONS,
    "chown": Action.PERMISSIONS,
    "chgrp": Action.PERMISSIONS,
    "fdisk": Action.PARTITION,
    "sfdisk": Action.PARTITION,
    "gdisk": Action.PARTITION,
    "parted": Action.PARTITION,
    "shutdown": Action.SHUTDOWN,
    "reboot": Action.SHUTDOWN,
    "poweroff": Action.SHUTDOWN,
    "halt": Action.SHUTDOWN,
}

# rm targets that take out the whole root or home tree
ROOT_OR_HOME = frozenset({
    "/", "/*",
    "~", "~/", "~/*",
    "$HOME", "$HOME/", "$HOME/*",
    "${HOME}", "${HOME}/", "${HOME}/*",
})

WORLD_WRITABLE_MODES = frozenset({"777", "0777", "a+rwx", "ugo+rwx"})

# Directories whose permissions the whole system depends on
SYSTEM_DIRS = ("/etc", "/usr", "/bin", "/sbin", "/boot", "/lib", "/sys", "/var")


def is_system_path(path: str) -> bool:
    path = path.rstrip("/") or "/"
    if path in ("/", "/*"):
        return True
    return any(path == d or path.startswith(d + "/") for d in SYSTEM_DIRS)


def action_for(name: str, args: List[str]) -> Optional[Action]:
    """Action for a command name, or None for commands we do not track."""
    name = command_name(name)
    if name == "mkfs" or name.startswith("mkfs."):
        return Action.FORMAT
    if name == "find" and "-delete" in args:
        return Action.DELETE
    return COMMAND_ACTIONS.get(name)


class ActionCollector(BaseCollector):
    """Records actions per stage plus command-specific risk signals."""

    def collect(self, evidence: Evidence) -> None:
        if evidence.pipeline is None:
            return

        for stage in evidence.pipeline:
            words = stage.effective_words()
            if words:
                name = command_name(words[0].text)
                args = list(words[1:])
                action = action_for(name, [w.text for w in args])
                if action is not None:
                    evidence.add_action(action.value)
                self._check_command(evidence, name, args)

            for redirect in stage.redirects:
                if redirect.target in NULL_SINKS:
                    continue
                if redirect.mode is RedirectMode.APPEND:
                    evidence.add_action(Action.APPEND.value)
                else:
                    evidence.add_action(Action.OVERWRITE.value)

    def _check_command(self, evidence: Evidence, name: str, args: List[Word]) -> None:
        if name == "rm":
            self._check_rm(evidence, args)
        elif name == "mv":
            self.signal(evidence, RiskLevel.CAUTION, "Moves or renames files")
        elif name == "chmod":
            self._check_chmod(evidence, args)
        elif name in ("chown", "chgrp"):
            flags, _ = split_flags(args)
            if has_short_flag(flags, "R", "--recursive"):
                self.signal(evidence, RiskLevel.DANGEROUS, "Recursive ownership change")
        elif name == "dd":
            self.signal(
                evidence, RiskLevel.DANGEROUS,
                "Direct disk access - potential data loss", irreversible=True,
            )
        elif name == "mkfs" or name.startswith("mkfs."):
            self.signal(evidence, RiskLevel.CRITICAL, "Formats a filesystem", irreversible=True)
        elif name == "shred":
            self.signal(
                evidence, RiskLevel.CAUTION,
                "Overwrites file contents before deleting", irreversible=True,
            )
        elif name == "truncate":
            self.signal(evidence, RiskLevel.CAUTION, "Truncates file contents", irreversible=True)
        elif name == "find" and any(arg.text == "-delete" for arg in args):
            self.signal(evidence, RiskLevel.CAUTION, "Deletion operation")

    def _check_rm(self, evidence: Evidence, args: List[Word]) -> None:
        flags, operands = split_flags(args)
        recursive = has_short_flag(flags, "rR", "--recursive")
        force = has_short_flag(flags, "f", "--force")

        if any(word.text in ROOT_OR_HOME for word in operands):
            self.signal(
                evidence, RiskLevel.CRITICAL,
                "Attempting to delete root or home directory", irreversible=True,
            )

        if recursive and force:
            self.signal(
                evidence, RiskLevel.DANGEROUS,
                "Recursive force deletion cannot be undone", irreversible=True,
            )
        else:
            self.signal(evidence, RiskLevel.CAUTION, "Deletion operation")

    def _check_chmod(self, evidence: Evidence, args: List[Word]) -> None:
        flags, operands = split_flags(args)
        recursive = has_short_flag(flags, "R", "--recursive")
        mode = operands[0].text if operands else ""

        if mode in WORLD_WRITABLE_MODES and recursive:
            self.signal(
                evidence, RiskLevel.DANGEROUS,
                "World-writable permissions applied recursively",
            )
        elif mode in WORLD_WRITABLE_MODES and any(is_system_path(w.text) for w in operands[1:]):
            self.signal(
                evidence, RiskLevel.DANGEROUS,
                "World-writable permissions on a system path",
            )
        elif mode in WORLD_WRITABLE_MODES:
            self.signal(
                evidence, RiskLevel.CAUTION,
                "World-writable permissions are a security risk",
            )
        elif recursive:
            self.signal(evidence, RiskLevel.CAUTION, "Recursive permission change")
