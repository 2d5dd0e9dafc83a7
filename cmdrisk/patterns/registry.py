"""
Immutable registry of danger signatures.

The registry is built once and only ever read afterwards. Every accessor
hands back a fresh list so callers can sort or filter without touching the
canonical table.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..types import RiskLevel

CATEGORIES = frozenset({
    "filesystem",
    "disk",
    "system",
    "permissions",
    "network",
    "process",
    "git",
    "docker",
    "packages",
})


@dataclass(frozen=True)
class DangerPattern:
    """A compiled signature with its tier and category."""
    pattern: "re.Pattern[str]"
    description: str
    risk_level: RiskLevel
    category: str
    irreversible: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, re.Pattern):
            raise ValueError(f"Pattern for '{self.description}' is not a compiled regex")
        if not self.description.strip():
            raise ValueError(f"Pattern {self.pattern.pattern!r} has an empty description")
        if self.category not in CATEGORIES:
            available = ", ".join(sorted(CATEGORIES))
            raise ValueError(
                f"Unknown category: {self.category}. Available categories: {available}"
            )
        if not isinstance(self.risk_level, RiskLevel):
            raise ValueError(f"Pattern '{self.description}' has no valid risk level")

    def matches(self, command: str) -> bool:
        return self.pattern.search(command) is not None


class PatternRegistry:
    """Ordered, read-only table of DangerPattern entries."""

    def __init__(self, patterns: Iterable[DangerPattern]):
        self._patterns: Tuple[DangerPattern, ...] = tuple(patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self):
        return iter(self._patterns)

    def all_patterns(self) -> List[DangerPattern]:
        """Return every pattern in table order."""
        return list(self._patterns)

    def by_category(self, category: str) -> List[DangerPattern]:
        """Return patterns tagged with category, in table order."""
        return [p for p in self._patterns if p.category == category]

    def by_risk_level(self, level: RiskLevel) -> List[DangerPattern]:
        """Return patterns of exactly the given tier, in table order."""
        return [p for p in self._patterns if p.risk_level == level]

    def categories(self) -> List[str]:
        seen: List[str] = []
        for p in self._patterns:
            if p.category not in seen:
                seen.append(p.category)
        return seen

    def match(self, command: str) -> List[DangerPattern]:
        """
        Find every pattern that fires anywhere in the command text.

        All hits are returned, not just the first or the highest; the
        aggregator needs the full trail to explain its verdict.
        """
        return [p for p in self._patterns if p.matches(command)]

    def extend(self, patterns: Iterable[DangerPattern]) -> "PatternRegistry":
        """Return a new registry with extra patterns appended."""
        return PatternRegistry(self._patterns + tuple(patterns))
