"""Main CLI entry point - check commands and inspect the pattern table."""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

import typer

from cmdrisk.core.analyzer import Analyzer
from cmdrisk.core.configs import CONFIG_PATH, ENV_PATH, get_safety_settings, load_raw_config
from cmdrisk.core.gate import ExecutionGate, GateDecision
from cmdrisk.patterns import CATEGORIES, DEFAULT_REGISTRY
from cmdrisk.types import RiskLevel
from cmdrisk.ui.output import render_analysis, render_patterns

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="cmdrisk - classify shell commands by risk before running them.",
)

EXIT_CODES = {
    GateDecision.ALLOW: 0,
    GateDecision.CONFIRM: 1,
    GateDecision.DENY: 2,
}
EXIT_CONFIG_ERROR = 3


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@app.command()
def check(
    command: str = typer.Argument(..., help="Shell command to classify (quote it)"),
    json_output: bool = typer.Option(False, "--json", help="Print the analysis as JSON"),
    files: bool = typer.Option(False, "--files", help="Stat affected paths on disk"),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file to read"),
    block: Optional[List[str]] = typer.Option(None, "--block", help="Extra blocked command"),
    allow_path: Optional[List[str]] = typer.Option(None, "--allow-path", help="Extra allowed directory"),
    threshold: Optional[str] = typer.Option(None, "--threshold", help="safe, caution or dangerous"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    Classify a command and exit with its gate decision.

    Exit codes: 0 allow, 1 confirm, 2 deny, 3 configuration error.

    Example: cmdrisk check "rm -rf ./build"
    """
    _configure_logging(verbose)

    try:
        if config is not None:
            raw = load_raw_config(config, env_path=config.parent / ".env")
        else:
            raw = load_raw_config(CONFIG_PATH, env_path=ENV_PATH)
        settings = get_safety_settings(raw)

        settings.blocked_commands.extend(block or [])
        settings.allowed_paths.extend(allow_path or [])
        if threshold is not None:
            settings.confirm_threshold = threshold

        analyzer = Analyzer.from_settings(settings, working_dir=os.getcwd())
        gate = ExecutionGate.from_settings(settings)
    except ValueError as e:
        typer.echo(f"Error loading configuration: {e}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    analysis = analyzer.analyze(command)
    if files:
        analysis = analyzer.with_affected_files(analysis, max_files=settings.max_affected_files)

    decision = gate.decide(analysis)
    logger.debug(f"Gate decision for {command!r}: {decision.value}")

    if json_output:
        payload = analysis.to_dict()
        payload["decision"] = decision.value
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        render_analysis(analysis)

    raise typer.Exit(EXIT_CODES[decision])


@app.command()
def patterns(
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only this category"),
    level: Optional[str] = typer.Option(None, "--level", "-l", help="Only this risk level"),
) -> None:
    """
    List the built-in danger patterns.

    Example: cmdrisk patterns --level critical
    """
    selected = DEFAULT_REGISTRY.all_patterns()

    if category is not None:
        if category not in CATEGORIES:
            typer.echo(
                f"Unknown category: {category}. Available categories: "
                f"{', '.join(sorted(CATEGORIES))}",
                err=True,
            )
            raise typer.Exit(EXIT_CONFIG_ERROR)
        selected = [p for p in selected if p.category == category]

    if level is not None:
        try:
            risk_level = RiskLevel.from_name(level)
        except ValueError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR)
        selected = [p for p in selected if p.risk_level == risk_level]

    render_patterns(selected)


def run() -> None:
    """Entry point for console script mapping."""
    app()


if __name__ == "__main__":
    run()
