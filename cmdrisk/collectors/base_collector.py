"""
Base collector interface for structural risk signals.

Collectors read the raw command and, when parsing succeeded, its Pipeline.
They record what they find on a per-call Evidence object; the aggregator
reduces the collected signals with max().
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..core.parser import Pipeline, Stage, Word, leading_stage
from ..types import RiskLevel

# Redirect targets that do not touch a real file
NULL_SINKS = frozenset({"/dev/null", "/dev/stdout", "/dev/stderr", "/dev/tty"})


def command_name(text: str) -> str:
    """'/usr/bin/rm' -> 'rm'."""
    return text.rsplit("/", 1)[-1]


def split_flags(words: Sequence[Word]) -> Tuple[List[str], List[Word]]:
    """Separate flag words from operands; everything after '--' is an operand."""
    flags: List[str] = []
    operands: List[Word] = []
    end_of_flags = False
    for word in words:
        if not end_of_flags and word.text == "--":
            end_of_flags = True
        elif not end_of_flags and word.text.startswith("-") and word.text != "-":
            flags.append(word.text)
        else:
            operands.append(word)
    return flags, operands


def has_short_flag(flags: Sequence[str], letters: str, long_name: str) -> bool:
    """True if any short flag cluster holds one of letters, or the long flag is set."""
    for flag in flags:
        if flag == long_name:
            return True
        if not flag.startswith("--") and any(letter in flag[1:] for letter in letters):
            return True
    return False


@dataclass(frozen=True)
class Signal:
    """A risk floor plus the reason for it."""
    level: RiskLevel
    reason: str
    source: str
    irreversible: bool = False
    blocking: bool = False  # blocked-command hit; always reported first


@dataclass
class Evidence:
    """Working state for one analyze() call. Never shared between calls."""
    command: str
    pipeline: Optional[Pipeline] = None
    signals: List[Signal] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    paths: List[str] = field(default_factory=list)
    requires_sudo: bool = False

    @property
    def parsed(self) -> bool:
        return self.pipeline is not None

    def stages(self) -> List[Stage]:
        """Parsed stages, or the whitespace fallback when parsing failed."""
        if self.pipeline is not None:
            return list(self.pipeline)
        fallback = leading_stage(self.command)
        return [fallback] if fallback.words else []

    def add_action(self, action: str) -> None:
        if action not in self.actions:
            self.actions.append(action)

    def add_path(self, path: str) -> None:
        if path and path not in self.paths:
            self.paths.append(path)


class BaseCollector(ABC):
    """Abstract base class for signal collectors."""

    @abstractmethod
    def collect(self, evidence: Evidence) -> None:
        """
        Inspect the command and record findings on evidence.

        Must not raise for any command text.
        """
        pass

    def get_collector_name(self) -> str:
        return self.__class__.__name__.replace("Collector", "").lower()

    def signal(
        self,
        evidence: Evidence,
        level: RiskLevel,
        reason: str,
        irreversible: bool = False,
        blocking: bool = False,
    ) -> None:
        evidence.signals.append(
            Signal(
                level=level,
                reason=reason,
                source=self.get_collector_name(),
                irreversible=irreversible,
                blocking=blocking,
            )
        )
