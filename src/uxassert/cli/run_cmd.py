"""uxassert run -- validate assertions against a screen recording.

Loads configuration and assertions, extracts frames with ffmpeg, runs
the selected strategy (or the agent loop), writes the JSON report, and
exits with an appropriate code.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import time
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from uxassert.adapters.base import BaseAdapter, TransportError
from uxassert.adapters.registry import get_adapter
from uxassert.cli.output import (
    create_progress,
    output_json,
    render_summary,
    render_warnings,
)
from uxassert.loader.assertions import AssertionsFileError, load_assertions
from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig, load_config
from uxassert.models.evaluation import PipelineResult
from uxassert.models.frame import Frame
from uxassert.models.report import ValidationReport
from uxassert.pipeline import run_pipeline
from uxassert.report.aggregate import build_report
from uxassert.storage.csv_log import CsvResultRow, append_results_csv
from uxassert.storage.json_store import report_to_json, write_report_json
from uxassert.video.frames import FrameExtractionError, extract_frames

console = Console(stderr=True)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_INFRA_ERROR = 3


def run(
    video: str = typer.Option(..., "--video", "-v", help="Path to screen recording (MP4)"),
    assertions: str = typer.Option(..., "--assertions", "-a", help="Path to JSON file with UX assertions"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report JSON here (default: stdout)"),
    fps: Optional[float] = typer.Option(None, "--fps", help="Frames per second to sample"),
    persona: Optional[str] = typer.Option(None, "--persona", "-p", help="ux-designer | qa-engineer | none"),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="two-pass | batch | single | agentic"),
    model: Optional[str] = typer.Option(None, "--model", help="Model id"),
    max_frames: Optional[int] = typer.Option(None, "--max-frames", help="Max frames per model request"),
    max_turns: Optional[int] = typer.Option(None, "--max-turns", help="Max agent turns (agentic only)"),
    keep_frames: bool = typer.Option(False, "--keep-frames", help="Keep extracted frames on disk"),
    csv_path: Optional[str] = typer.Option(None, "--csv", help="Append one row per assertion to this CSV"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to uxassert.yaml"),
) -> None:
    """Validate UX assertions against a screen recording."""
    asyncio.run(
        _run_async(
            video_path=Path(video),
            assertions_path=Path(assertions),
            output_path=Path(output) if output else None,
            overrides={
                "fps": fps,
                "persona": persona,
                "strategy": strategy,
                "model": model,
                "max_frames_per_request": max_frames,
                "max_agent_turns": max_turns,
            },
            keep_frames=keep_frames,
            csv_path=Path(csv_path) if csv_path else None,
            config_path=Path(config_path) if config_path else None,
        )
    )


def _resolve_settings(config_path: Path | None, overrides: dict[str, Any]) -> ValidatorConfig:
    if config_path is not None and not config_path.exists():
        console.print(f"[bold red]Config error:[/bold red] {config_path} not found")
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    try:
        return load_config(config_path, overrides)
    except ValidationError as exc:
        console.print("[bold red]Configuration errors:[/bold red]")
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"])
            console.print(f"  {field}: {escape(err['msg'])}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    except (ValueError, yaml.YAMLError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)


async def _run_async(
    *,
    video_path: Path,
    assertions_path: Path,
    output_path: Path | None,
    overrides: dict[str, Any],
    keep_frames: bool,
    csv_path: Path | None,
    config_path: Path | None,
) -> None:
    """Async implementation of the run command."""
    start = time.perf_counter()

    # 1. Environment and configuration
    load_dotenv(Path.cwd() / ".env", override=False)
    settings = _resolve_settings(config_path, overrides)

    # 2. Resolve adapter
    if settings.adapter == "anthropic" and not os.environ.get("ANTHROPIC_API_KEY"):
        console.print(
            "[bold red]Error:[/bold red] ANTHROPIC_API_KEY is not set. "
            "Add it to .env or export it."
        )
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    try:
        adapter = get_adapter(settings.adapter)
    except (ValueError, ImportError, TypeError) as exc:
        console.print(f"[bold red]Adapter error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)

    # 3. Assertions
    console.print("Loading assertions...")
    try:
        assertion_list = load_assertions(assertions_path)
    except AssertionsFileError as exc:
        console.print(f"[bold red]Assertions error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    if not assertion_list:
        console.print(f"[bold red]No assertions found in[/bold red] {assertions_path}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    console.print(f"Assertions loaded: {len(assertion_list)}")

    # 4. Frames
    frames_dir = Path.cwd() / "tmp" / f"frames-{int(time.time() * 1000)}"
    try:
        console.print(f"Extracting frames (fps={settings.fps})...")
        try:
            extracted = extract_frames(video_path.resolve(), settings.fps, frames_dir)
        except FrameExtractionError as exc:
            console.print(f"[bold red]Frame extraction error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=EXIT_INPUT_ERROR)
        if not extracted.frames:
            console.print(
                "[bold red]No frames extracted.[/bold red] Check video path and format."
            )
            raise typer.Exit(code=EXIT_INPUT_ERROR)
        console.print(f"Frames extracted: {len(extracted.frames)}")

        # 5. Evaluate
        console.print(
            f"Running {settings.strategy} pipeline "
            f"(model={settings.model}, persona={settings.persona})..."
        )
        try:
            result = await _evaluate(adapter, settings, extracted.frames, assertion_list)
        except TransportError as exc:
            console.print(f"[bold red]Model backend error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=EXIT_INFRA_ERROR)
    finally:
        if keep_frames:
            if frames_dir.exists():
                console.print(f"[dim]Frames kept in {frames_dir}[/dim]")
        elif frames_dir.exists():
            shutil.rmtree(frames_dir, ignore_errors=True)

    render_warnings(result.warnings, console)

    # 6. Report
    report = build_report(
        video_path=str(video_path.resolve()),
        duration_seconds=extracted.duration_seconds,
        frame_count=len(extracted.frames),
        settings=settings,
        assertions=assertion_list,
        result=result,
        elapsed_seconds=round(time.perf_counter() - start, 3),
    )

    if output_path is not None:
        written = write_report_json(report, output_path)
        console.print(f"Results written to {written}")
        render_summary(report, Console())
    else:
        output_json(report)

    if csv_path is not None:
        count = append_results_csv(csv_path, _csv_rows(report, settings, assertion_list))
        console.print(f"Appended {count} row(s) to {csv_path}")

    elapsed = time.perf_counter() - start
    console.print(f"[dim]Validation completed in {elapsed:.2f}s[/dim]")


async def _evaluate(
    adapter: BaseAdapter,
    settings: ValidatorConfig,
    frames: list[Frame],
    assertion_list: list[Assertion],
) -> PipelineResult:
    """Run the pipeline with progress display for the selected path."""

    def on_tool(tool_name: str) -> None:
        console.print(f"[dim]Using tool: {tool_name}[/dim]")

    if settings.strategy == "single":
        progress = create_progress(console)
        if progress is not None:
            with progress:
                task = progress.add_task("Evaluating assertions", total=len(assertion_list))

                def on_progress(done: int, total: int) -> None:
                    progress.update(task, completed=done)

                return await run_pipeline(
                    adapter, settings, frames, assertion_list, progress_callback=on_progress
                )

    return await run_pipeline(adapter, settings, frames, assertion_list, tool_callback=on_tool)


def _csv_rows(
    report: ValidationReport, settings: ValidatorConfig, assertion_list: list[Assertion]
) -> list[CsvResultRow]:
    result_json = report_to_json(report)
    return [
        CsvResultRow(
            fps=settings.fps,
            persona=settings.persona,
            strategy=settings.strategy,
            text=a.text,
            type=a.type or "concrete",
            test_step_description=a.test_step_description or "",
            result_json=result_json,
        )
        for a in assertion_list
    ]
