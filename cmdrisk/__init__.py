"""cmdrisk: classify the risk of shell commands before they run."""

from .types import CommandAnalysis, FileInfo, MatchedPattern, RiskLevel
from .patterns import DEFAULT_REGISTRY, DangerPattern, PatternRegistry
from .core.analyzer import Analyzer
from .core.gate import ExecutionGate, GateDecision

__version__ = "0.1.0"

__all__ = [
    "Analyzer",
    "CommandAnalysis",
    "DEFAULT_REGISTRY",
    "DangerPattern",
    "ExecutionGate",
    "FileInfo",
    "GateDecision",
    "MatchedPattern",
    "PatternRegistry",
    "RiskLevel",
]
