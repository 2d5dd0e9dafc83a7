"""
User-configured access rules: blocked commands, allowed and protected paths.

All three are inert when their list is empty, so leaving a setting out never
raises the risk of a command.
"""

import logging
import os
import shlex
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.parser import Stage
from ..types import RiskLevel
from .actions import Action
from .base_collector import NULL_SINKS, BaseCollector, Evidence, command_name
from .paths import stage_paths

logger = logging.getLogger(__name__)

# Characters that make a blocked entry a raw-text signature rather than words
_SHELL_SYNTAX = frozenset("();<>|&`$")

# Actions that change what they touch
MODIFYING_ACTIONS = frozenset({
    Action.DELETE,
    Action.MOVE,
    Action.OVERWRITE,
    Action.APPEND,
    Action.PERMISSIONS,
    Action.FORMAT,
    Action.PARTITION,
})


def normalize_path(path: str, working_dir: Optional[str] = None) -> str:
    """Expand '~', anchor relative paths at working_dir if given, and normalise."""
    expanded = os.path.expanduser(path)
    if working_dir and not os.path.isabs(expanded):
        expanded = os.path.join(os.path.expanduser(working_dir), expanded)
    return os.path.normpath(expanded)


def is_within(path: str, prefix: str) -> bool:
    """Component-wise prefix test: /tmpfoo is not inside /tmp."""
    if prefix == os.sep:
        return path.startswith(os.sep)
    return path == prefix or path.startswith(prefix.rstrip(os.sep) + os.sep)


class BlockedCommandCollector(BaseCollector):
    """Forces CRITICAL when a stage runs a command the user has blocked."""

    def __init__(self, blocked_commands: Iterable[str] = ()):
        self._entries: List[Tuple[str, Tuple[str, ...]]] = []
        for entry in blocked_commands:
            if _SHELL_SYNTAX & set(entry):
                self._entries.append((entry, ()))
                continue
            try:
                words = tuple(shlex.split(entry))
            except ValueError:
                words = ()
            self._entries.append((entry, words))

    def collect(self, evidence: Evidence) -> None:
        if not self._entries:
            return

        stages = evidence.stages()
        for entry, words in self._entries:
            if words:
                hit = any(self._starts_with(stage, words) for stage in stages)
            else:
                hit = entry in evidence.command
            if hit:
                logger.debug(f"Blocked command {entry!r} found in {evidence.command!r}")
                self.signal(
                    evidence, RiskLevel.CRITICAL,
                    f"Command '{entry}' is explicitly blocked", blocking=True,
                )

    @staticmethod
    def _starts_with(stage: Stage, words: Sequence[str]) -> bool:
        for candidate in (stage.words, stage.effective_words()):
            texts = [word.text for word in candidate[:len(words)]]
            if texts:
                texts[0] = command_name(texts[0])
            if texts == list(words):
                return True
        return False


class AllowedPathCollector(BaseCollector):
    """Flags affected paths that fall outside every allowed directory."""

    def __init__(
        self,
        allowed_paths: Iterable[str] = (),
        level: RiskLevel = RiskLevel.CAUTION,
        working_dir: Optional[str] = None,
    ):
        self.allowed = [normalize_path(path) for path in allowed_paths]
        self.level = level
        self.working_dir = working_dir

    def collect(self, evidence: Evidence) -> None:
        if not self.allowed:
            return

        for path in evidence.paths:
            resolved = normalize_path(path, self.working_dir)
            if not any(is_within(resolved, prefix) for prefix in self.allowed):
                self.signal(evidence, self.level, f"Path '{path}' is outside allowed directories")


class ProtectedPathCollector(BaseCollector):
    """Raises to DANGEROUS when a modifying stage touches a protected path."""

    def __init__(self, protected_paths: Iterable[str] = (), working_dir: Optional[str] = None):
        self.protected = [normalize_path(path) for path in protected_paths]
        self.working_dir = working_dir

    def collect(self, evidence: Evidence) -> None:
        if not self.protected or evidence.pipeline is None:
            return

        touched: List[str] = []
        for stage in evidence.pipeline:
            action, paths = stage_paths(stage)
            if action in MODIFYING_ACTIONS:
                touched.extend(paths)
            touched.extend(r.target for r in stage.redirects if r.target not in NULL_SINKS)

        reported = set()
        for path in touched:
            if path in reported:
                continue
            resolved = normalize_path(path, self.working_dir)
            if any(self._covers(entry, resolved) for entry in self.protected):
                reported.add(path)
                self.signal(evidence, RiskLevel.DANGEROUS, f"Modifies protected path '{path}'")

    @staticmethod
    def _covers(entry: str, path: str) -> bool:
        # "/" protects the root itself, not everything beneath it
        if entry == os.sep:
            return path in (os.sep, os.sep + "*")
        return is_within(path, entry)
