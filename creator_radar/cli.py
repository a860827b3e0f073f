"""Command-line interface for Creator Radar."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import httpx
import structlog
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from creator_radar import __version__
from creator_radar.config import configure_logging, get_settings
from creator_radar.errors import PreconditionFailure
from creator_radar.models import (
    STAGE_ORDER,
    ErrorEvent,
    LogEvent,
    PipelineEvent,
    ResultEvent,
    StageCompleteEvent,
    StageKey,
    StageStartEvent,
)
from creator_radar.pipeline import (
    PipelineOrchestrator,
    StreamState,
    adecode_stream,
    apply_event,
)

app = typer.Typer(
    name="creator-radar",
    help="Creator Radar - Staged analysis of creator content",
    add_completion=False,
)
console = Console()
logger = structlog.get_logger(__name__)

SAMPLE_CONTENT = (
    "Hook: Learn how to design a creator content pipeline in 10 minutes.\n"
    "Context: We tested 50 posts across platforms.\n"
    "Value: Here are the patterns that consistently boost retention.\n"
    "CTA: Try these steps in your next post."
)


def _render_event(event: PipelineEvent) -> None:
    """Print one event as it arrives."""
    if isinstance(event, StageStartEvent):
        console.print(f"[blue]▶ {event.stage}[/blue] started")
    elif isinstance(event, StageCompleteEvent):
        console.print(f"[green]✔ {event.stage}[/green] complete")
    elif isinstance(event, ResultEvent):
        console.print(f"  [dim]result: {', '.join(event.payload)}[/dim]")
    elif isinstance(event, LogEvent):
        console.print(f"[dim]{event.message}[/dim]")
    elif isinstance(event, ErrorEvent):
        console.print(f"[red]✖ {event.stage or 'Pipeline'}:[/red] {event.message}")


def _load_previous(path: Optional[Path]) -> dict:
    if path is None:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


async def _run_local(
    content: str,
    from_stage: Optional[StageKey],
    previous: dict,
) -> StreamState:
    orchestrator = PipelineOrchestrator.from_settings()
    events = orchestrator.run(content, from_stage=from_stage, previous=previous)

    initial_outputs = {
        key: previous[key.previous_key]
        for key in STAGE_ORDER
        if previous.get(key.previous_key)
    }
    state = StreamState.resumed(initial_outputs)
    async for event in events:
        _render_event(event)
        state = apply_event(state, event)
    return state


@app.command()
def analyze(
    content_path: Path = typer.Argument(
        ...,
        help="Path to a text file with the content to analyze",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    from_stage: Optional[StageKey] = typer.Option(
        None,
        "--from-stage",
        "-s",
        help="Resume at this stage (requires --previous for earlier stages)",
    ),
    previous_path: Optional[Path] = typer.Option(
        None,
        "--previous",
        "-p",
        help="JSON file with earlier stage outputs (as written by --output)",
        exists=True,
        dir_okay=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Where to write stage outputs (default: <content_name>_analysis.json)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Run the pipeline in-process and stream events to the terminal."""
    configure_logging("DEBUG" if verbose else "WARNING", json_logs=False)

    console.print(
        Panel.fit(
            "[bold blue]Creator Radar[/bold blue]\n"
            "Analyzing content...",
            border_style="blue",
        )
    )

    if output is None:
        output = content_path.with_name(f"{content_path.stem}_analysis.json")

    content = content_path.read_text(encoding="utf-8")
    previous = _load_previous(previous_path)

    try:
        state = asyncio.run(_run_local(content, from_stage, previous))
    except PreconditionFailure as e:
        console.print(f"\n[red]Cannot start:[/red] {e}")
        sys.exit(2)

    outputs = {key.previous_key: state.outputs[key] for key in STAGE_ORDER if key in state.outputs}
    with open(output, "w", encoding="utf-8") as f:
        json.dump(outputs, f, indent=2, ensure_ascii=False)

    _display_summary(state)
    console.print(f"\n[green]Stage outputs saved to:[/green] {output}")

    if state.error_stage is not None:
        console.print(
            f"[yellow]Retry with:[/yellow] creator-radar analyze {content_path} "
            f"--from-stage {state.error_stage.value} --previous {output}"
        )
        sys.exit(1)


@app.command("sanity-check")
def sanity_check(
    url: str = typer.Option(
        "http://localhost:8100/api/analyze",
        "--url",
        help="Analyze endpoint of a running server",
    ),
) -> None:
    """Post sample content to a running server and check the event stream."""
    counts = {"stage_start": 0, "stage_complete": 0, "result": 0}

    async def _consume() -> None:
        async with httpx.AsyncClient(timeout=None) as client:
            async with client.stream("POST", url, json={"content": SAMPLE_CONTENT}) as response:
                if response.status_code != 200:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise RuntimeError(f"Sanity check failed: {response.status_code} {body}")
                async for event in adecode_stream(response.aiter_bytes()):
                    stage_info = f" ({event.stage})" if getattr(event, "stage", None) else ""
                    console.print(f"[event] {event.type}{stage_info}", markup=False)
                    if event.type in counts:
                        counts[event.type] += 1

    try:
        asyncio.run(_consume())
    except (RuntimeError, httpx.HTTPError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if not all(counts.values()):
        console.print(
            "[red]Sanity check failed: events missing "
            f"(starts={counts['stage_start']}, completes={counts['stage_complete']}, "
            f"results={counts['result']}).[/red]"
        )
        sys.exit(1)

    console.print("[green]Sanity check passed.[/green]")


@app.command()
def info() -> None:
    """Display system information and configuration."""
    settings = get_settings()

    console.print(
        Panel.fit(
            "[bold blue]Creator Radar[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("Analysis URL", settings.mino_api_url or "[red]not set[/red]")
    table.add_row("Analysis key", "set" if settings.mino_api_key else "[red]not set[/red]")
    table.add_row("Trends URL", settings.perplexity_url)
    table.add_row("Trends model", settings.perplexity_model)
    table.add_row("Trends key", "set" if settings.perplexity_api_key else "[red]not set[/red]")
    table.add_row("Request timeout", f"{settings.request_timeout:g}s")
    table.add_row(
        "Stage deadline",
        f"{settings.stage_timeout_seconds:g}s" if settings.stage_timeout_seconds else "none",
    )
    table.add_row("Max content length", str(settings.max_content_length))

    console.print(table)


def _display_summary(state: StreamState) -> None:
    """Display per-stage status and the headline findings."""
    console.print("\n[bold]Analysis Summary[/bold]")
    console.print("-" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Stage", style="dim")
    table.add_column("Status", justify="right")
    for stage_name, status in state.stage_status.items():
        table.add_row(stage_name, status.value)
    console.print(table)

    segments = (state.output(StageKey.A) or {}).get("segments", [])
    if segments:
        console.print(f"\n[dim]Segments:[/dim] {len(segments)}")

    synthesis = state.output(StageKey.E)
    if synthesis:
        console.print(f"[dim]Overall potential:[/dim] {synthesis.get('overallPotential')}")
        fixes = synthesis.get("highestImpactFixes", [])[:5]
        if fixes:
            console.print("\n[bold]Highest-impact fixes[/bold]")
            for i, fix in enumerate(fixes, 1):
                console.print(f"  {i}. {fix}")

    if state.error_message:
        console.print(f"\n[red]Error:[/red] {state.error_message}")


if __name__ == "__main__":
    app()
