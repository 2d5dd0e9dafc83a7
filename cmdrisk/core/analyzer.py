"""
Command risk analyzer: the public entry point of the engine.

Runs the danger signature table and the structural collectors over a
command line and hands the results to the aggregator.
"""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Iterable, List, Optional, Union

from ..collectors import (
    ActionCollector,
    AllowedPathCollector,
    BaseCollector,
    BlockedCommandCollector,
    Evidence,
    PathCollector,
    PrivilegeCollector,
    ProtectedPathCollector,
    RedirectCollector,
)
from ..patterns import DEFAULT_REGISTRY, DangerPattern, PatternRegistry
from ..types import CommandAnalysis, FileInfo, RiskLevel
from .aggregator import aggregate
from .files import collect_file_info
from .parser import ShlexExtractor, StructuralExtractor

if TYPE_CHECKING:
    from .configs import SafetySettings

logger = logging.getLogger(__name__)

PATH_VIOLATION_LEVELS = (RiskLevel.CAUTION, RiskLevel.DANGEROUS)


def _validate_entries(name: str, entries: Optional[Iterable[str]]) -> List[str]:
    if entries is None:
        return []
    if isinstance(entries, str):
        raise ValueError(f"{name} must be a list of strings, not a single string")

    validated = []
    for entry in entries:
        if not isinstance(entry, str):
            raise ValueError(f"{name} entries must be strings, got {type(entry).__name__}")
        if not entry.strip():
            raise ValueError(f"{name} entries must not be empty")
        if "\x00" in entry:
            raise ValueError(f"{name} entry {entry!r} contains a NUL byte")
        validated.append(entry.strip())
    return validated


def _validate_level(level: Union[RiskLevel, str]) -> RiskLevel:
    if isinstance(level, str):
        level = RiskLevel.from_name(level)
    if level not in PATH_VIOLATION_LEVELS:
        available = ", ".join(str(lvl).lower() for lvl in PATH_VIOLATION_LEVELS)
        raise ValueError(
            f"Unsupported path violation level: {level}. Available levels: {available}"
        )
    return RiskLevel(level)


class Analyzer:
    """Classifies shell commands by risk."""

    def __init__(
        self,
        blocked_commands: Optional[Iterable[str]] = None,
        allowed_paths: Optional[Iterable[str]] = None,
        *,
        protected_paths: Optional[Iterable[str]] = None,
        path_violation_level: Union[RiskLevel, str] = RiskLevel.CAUTION,
        working_dir: Optional[str] = None,
        registry: Optional[PatternRegistry] = None,
        extractor: Optional[StructuralExtractor] = None,
    ):
        """
        Initialize the analyzer and validate its configuration.

        Args:
            blocked_commands: Commands that are always CRITICAL and refused
            allowed_paths: Directories commands may touch; empty means anywhere
            protected_paths: Paths whose modification is at least DANGEROUS
            path_violation_level: Tier for paths outside allowed_paths
            working_dir: Base for relative paths in allowed/protected checks
            registry: Danger signatures (default: the built-in table)
            extractor: Structural parser (default: ShlexExtractor)

        Raises:
            ValueError: If any setting is malformed
        """
        self.blocked_commands = _validate_entries("blocked_commands", blocked_commands)
        self.allowed_paths = _validate_entries("allowed_paths", allowed_paths)
        self.protected_paths = _validate_entries("protected_paths", protected_paths)
        self.path_violation_level = _validate_level(path_violation_level)
        self.working_dir = working_dir
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self.extractor = extractor if extractor is not None else ShlexExtractor()

        # Order matters: it fixes the order of structural reasons
        self.collectors: List[BaseCollector] = [
            PrivilegeCollector(),
            ActionCollector(),
            RedirectCollector(),
            PathCollector(),
            BlockedCommandCollector(self.blocked_commands),
            AllowedPathCollector(self.allowed_paths, self.path_violation_level, working_dir),
            ProtectedPathCollector(self.protected_paths, working_dir),
        ]

    @classmethod
    def from_settings(
        cls, settings: "SafetySettings", working_dir: Optional[str] = None
    ) -> "Analyzer":
        """Build an analyzer from loaded SafetySettings."""
        return cls(
            blocked_commands=settings.blocked_commands,
            allowed_paths=settings.allowed_paths,
            protected_paths=settings.protected_paths,
            path_violation_level=settings.path_violation_level,
            working_dir=working_dir,
        )

    def match_patterns(self, command: str) -> List[DangerPattern]:
        return self.registry.match(command)

    def analyze(self, command: str) -> CommandAnalysis:
        """
        Classify a command.

        Never raises for string input. Syntax the extractor cannot handle
        degrades to pattern matching plus leading-token checks.

        Args:
            command: Shell command line to classify

        Returns:
            CommandAnalysis with the verdict and its evidence
        """
        if not command or not command.strip():
            return CommandAnalysis(command=command)

        matched = self.match_patterns(command)

        pipeline = self.extractor.parse(command)
        if pipeline is None:
            logger.debug(f"No structure for {command!r}; using pattern-only analysis")

        evidence = Evidence(command=command, pipeline=pipeline)
        for collector in self.collectors:
            collector.collect(evidence)

        analysis = aggregate(command, matched, evidence)
        logger.debug(
            f"Analyzed {command!r}: {analysis.risk_level} "
            f"({len(analysis.patterns)} patterns, {len(evidence.signals)} signals)"
        )
        return analysis

    def get_affected_files(
        self, analysis: CommandAnalysis, max_files: Optional[int] = None
    ) -> List[FileInfo]:
        """Stat the paths of an analysis. Missing paths are skipped."""
        return collect_file_info(
            analysis.affected_paths, max_files=max_files, working_dir=self.working_dir
        )

    def with_affected_files(
        self, analysis: CommandAnalysis, max_files: Optional[int] = None
    ) -> CommandAnalysis:
        """Return a copy of analysis with affected_files filled in."""
        files = self.get_affected_files(analysis, max_files=max_files)
        return replace(analysis, affected_files=tuple(files))
