"""Rich terminal output for validation runs.

Progress bar for per-assertion calls, a verdict summary table,
and plain JSON output for piping.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from uxassert.models.report import ValidationReport
from uxassert.report.aggregate import summarize_verdicts
from uxassert.storage.json_store import report_to_json

# Verdict styling map: verdict value -> (symbol, Rich markup style)
_VERDICT_STYLES: dict[str, tuple[str, str]] = {
    "pass": ("✓ pass", "bold green"),
    "fail": ("✗ fail", "bold red"),
    "uncertain": ("? uncertain", "bold yellow"),
}


def create_progress(console: Console) -> Progress | None:
    """Create a Rich Progress bar, or None when not attached to a terminal."""
    if not console.is_terminal:
        return None

    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def render_summary(report: ValidationReport, console: Console) -> None:
    """Render one row per assertion plus verdict totals."""
    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 2))
    table.add_column("Step", style="dim")
    table.add_column("Assertion")
    table.add_column("Verdict")
    table.add_column("Conf.", justify="right")

    for step in report.test_steps:
        for assertion in step.assertions:
            symbol, style = _VERDICT_STYLES[assertion.verdict.value]
            table.add_row(
                escape(step.id),
                escape(f"[{assertion.id}] {assertion.text}"),
                f"[{style}]{symbol}[/{style}]",
                f"{assertion.confidence:.2f}",
            )

    console.print(table)

    counts = summarize_verdicts(report)
    console.print(
        f"[green]{counts['pass']} passed[/green], "
        f"[red]{counts['fail']} failed[/red], "
        f"[yellow]{counts['uncertain']} uncertain[/yellow]"
    )


def render_warnings(warnings: list[str], console: Console) -> None:
    """Print pipeline warnings, one dim yellow line each."""
    for warning in warnings:
        console.print(f"[dim yellow]Warning: {escape(warning)}[/dim yellow]")


def output_json(report: ValidationReport) -> None:
    """Print the report JSON to stdout without Rich markup processing."""
    print(report_to_json(report))
