from typing import List

from ..types import RiskLevel
from .registry import CATEGORIES, DangerPattern, PatternRegistry
from .signatures import SIGNATURES, build_registry

# Compiled once; shared read-only by every analyzer.
DEFAULT_REGISTRY = build_registry()


def all_patterns() -> List[DangerPattern]:
    """Every default pattern, as a fresh list."""
    return DEFAULT_REGISTRY.all_patterns()


def by_category(category: str) -> List[DangerPattern]:
    return DEFAULT_REGISTRY.by_category(category)


def by_risk_level(level: RiskLevel) -> List[DangerPattern]:
    return DEFAULT_REGISTRY.by_risk_level(level)


__all__ = [
    "CATEGORIES",
    "DEFAULT_REGISTRY",
    "DangerPattern",
    "PatternRegistry",
    "SIGNATURES",
    "all_patterns",
    "build_registry",
    "by_category",
    "by_risk_level",
]
