"""Affected path extraction."""

from typing import List, Optional, Tuple

from ..core.parser import Stage, Word
from .actions import Action, action_for
from .base_collector import NULL_SINKS, BaseCollector, Evidence, command_name, split_flags

# Commands whose first operand is a mode or owner, not a path
_MODE_FIRST = frozenset({"chmod", "chown", "chgrp"})
# Actions whose operands name processes or nothing at all
_NON_PATH = frozenset({Action.KILL, Action.SHUTDOWN})


def _operand_paths(name: str, args: List[Word]) -> List[str]:
    if name == "dd":
        return [
            arg.text.split("=", 1)[1]
            for arg in args
            if arg.text.startswith(("if=", "of=")) and len(arg.text) > 3
        ]
    if name == "find":
        # find's paths come before the first expression word
        paths = []
        for arg in args:
            if arg.text.startswith(("-", "(", "!")):
                break
            paths.append(arg.text)
        return paths

    _, operands = split_flags(args)
    if name in _MODE_FIRST and not any(a.text.startswith("--reference") for a in args):
        operands = operands[1:]
    return [word.text for word in operands]


def stage_paths(stage: Stage) -> Tuple[Optional[Action], List[str]]:
    """Action of a stage and the operand paths it touches (redirects excluded)."""
    words = stage.effective_words()
    if not words:
        return None, []
    name = command_name(words[0].text)
    args = list(words[1:])
    action = action_for(name, [w.text for w in args])
    if action is None or action in _NON_PATH:
        return action, []
    return action, _operand_paths(name, args)


class PathCollector(BaseCollector):
    """
    Gathers path-like arguments of mutating stages and every redirect target.

    Dynamic words ($VAR/x, $(pwd)/y, *.log) are kept verbatim so that path
    heuristics downstream still see them. Relative paths stay relative.
    """

    def collect(self, evidence: Evidence) -> None:
        if evidence.pipeline is None:
            return

        for stage in evidence.pipeline:
            _, paths = stage_paths(stage)
            for path in paths:
                evidence.add_path(path)
            for redirect in stage.redirects:
                if redirect.target not in NULL_SINKS:
                    evidence.add_path(redirect.target)
