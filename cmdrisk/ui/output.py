"""
Rich rendering of analyses and the pattern table.
"""

from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..patterns import DangerPattern
from ..types import CommandAnalysis

_console = Console()


def format_size(size: int) -> str:
    """Human readable size using binary units: 512 B, 1.5 KB, 3.0 GB."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def render_analysis(analysis: CommandAnalysis, console: Optional[Console] = None) -> None:
    """Print a panel describing the verdict and the evidence behind it."""
    if console is None:
        console = _console
    level = analysis.risk_level

    body = Text()
    body.append(f"{level.emoji} {level}", style=f"bold {level.color}")
    if analysis.blocked:
        body.append("  BLOCKED", style="bold red")
    body.append("\n")

    if analysis.risk_reasons:
        body.append("\nReasons:\n", style="bold")
        for reason in analysis.risk_reasons:
            body.append(f"  • {reason}\n")

    if analysis.actions:
        body.append("\nActions: ", style="bold")
        body.append(", ".join(analysis.actions) + "\n")

    if analysis.affected_paths:
        body.append("\nAffected paths:\n", style="bold")
        for path in analysis.affected_paths:
            body.append(f"  {path}\n", style="cyan")

    if analysis.affected_files:
        body.append("\nAffected files:\n", style="bold")
        for info in analysis.affected_files:
            if info.is_dir:
                body.append(f"  📁 {info.path} ({info.file_count} files)\n")
            else:
                body.append(f"  📄 {info.path} ({format_size(info.size)})\n")

    if analysis.requires_sudo:
        body.append("\n⚡ Requires elevated privileges\n", style="yellow")
    if not analysis.reversible:
        body.append("\n⚠️  This operation cannot be undone\n", style="bold red")

    console.print(
        Panel(body, title=Text(analysis.command, style="cyan"), title_align="left", expand=False)
    )


def render_patterns(patterns: Iterable[DangerPattern], console: Optional[Console] = None) -> None:
    """Print danger signatures as a table."""
    if console is None:
        console = _console

    table = Table(title="Danger patterns")
    table.add_column("Level")
    table.add_column("Category", style="cyan")
    table.add_column("Description")
    table.add_column("Irreversible", justify="center")

    for pattern in patterns:
        table.add_row(
            Text(str(pattern.risk_level), style=pattern.risk_level.color),
            pattern.category,
            pattern.description,
            "yes" if pattern.irreversible else "",
        )

    console.print(table)
