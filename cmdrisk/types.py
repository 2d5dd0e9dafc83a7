"""
Shared types for command risk classification.

RiskLevel ordering is load-bearing: aggregation takes the max over levels
and the execution gate compares against a threshold.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Tuple


class RiskLevel(IntEnum):
    """Danger tier of a command, totally ordered."""
    SAFE = 0
    CAUTION = 1
    DANGEROUS = 2
    CRITICAL = 3

    def __str__(self) -> str:
        return self.name

    def __format__(self, spec: str) -> str:
        return format(self.name, spec)

    @property
    def color(self) -> str:
        """Rich color name used when rendering this level."""
        return _COLORS[self]

    @property
    def emoji(self) -> str:
        return _EMOJI[self]

    @classmethod
    def from_name(cls, name: str) -> "RiskLevel":
        """
        Look up a level by name, ignoring case.

        Raises:
            ValueError: If the name is not a known level
        """
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            available = ", ".join(level.name.lower() for level in cls)
            raise ValueError(
                f"Unknown risk level: {name}. Available levels: {available}"
            ) from None


_COLORS = {
    RiskLevel.SAFE: "green",
    RiskLevel.CAUTION: "yellow",
    RiskLevel.DANGEROUS: "dark_orange",
    RiskLevel.CRITICAL: "red",
}

_EMOJI = {
    RiskLevel.SAFE: "🟢",
    RiskLevel.CAUTION: "🟡",
    RiskLevel.DANGEROUS: "🟠",
    RiskLevel.CRITICAL: "🔴",
}


@dataclass(frozen=True)
class MatchedPattern:
    """A danger signature that fired against a command."""
    pattern: str
    description: str
    risk_level: RiskLevel


@dataclass(frozen=True)
class FileInfo:
    """Filesystem facts about an affected path."""
    path: str
    size: int
    is_dir: bool
    file_count: int = 0  # directories only


@dataclass(frozen=True)
class CommandAnalysis:
    """
    Result of classifying one command.

    Built fresh per call and never mutated afterwards; sequence fields are
    tuples so callers cannot change a shared result by accident.
    """
    command: str
    risk_level: RiskLevel = RiskLevel.SAFE
    risk_reasons: Tuple[str, ...] = ()
    affected_paths: Tuple[str, ...] = ()
    affected_files: Tuple[FileInfo, ...] = ()
    actions: Tuple[str, ...] = ()
    reversible: bool = True
    requires_sudo: bool = False
    patterns: Tuple[MatchedPattern, ...] = ()
    blocked: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-friendly view of the analysis.

        Risk levels are rendered as SAFE/CAUTION/DANGEROUS/CRITICAL, which is
        the form history stores alongside the command text.
        """
        return {
            "command": self.command,
            "risk_level": str(self.risk_level),
            "risk_reasons": list(self.risk_reasons),
            "affected_paths": list(self.affected_paths),
            "affected_files": [
                {
                    "path": info.path,
                    "size": info.size,
                    "is_dir": info.is_dir,
                    "file_count": info.file_count,
                }
                for info in self.affected_files
            ],
            "actions": list(self.actions),
            "reversible": self.reversible,
            "requires_sudo": self.requires_sudo,
            "blocked": self.blocked,
            "matched_patterns": [
                {
                    "pattern": match.pattern,
                    "description": match.description,
                    "risk_level": str(match.risk_level),
                }
                for match in self.patterns
            ],
        }
