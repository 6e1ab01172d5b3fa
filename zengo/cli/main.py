"""
Typer CLI for the Zengo board engine.

Commands:
    zengo generate SENTENCE     - Validate a sentence and lay it out on a board
    zengo validate SENTENCE     - List overflow/duplicate defects
    zengo level                 - Show XP and level for usage aggregates
    zengo rhythm EVENTS.json    - Show the fastest weekday/hour engagement slots
    zengo nudges                - Suggest board-size promotions from recorded sessions

Usage:
    zengo generate "A stitch in time saves nine" --level 5x5-medium --seed 7
    zengo validate "Practice makes perfect practice" --level 3x3-easy
    zengo level --usage-ms 3600000 --items 10 --concept 1000
"""

from __future__ import annotations

import json
import random
from datetime import datetime
from pathlib import Path

import typer
from loguru import logger
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from zengo.config import DIFFICULTY_PROFILES, configure_logging, get_settings
from zengo.content.generator import ContentGenerator, GenerationError
from zengo.content.validator import ContentValidationError, ContentValidator
from zengo.core.models import BoardContent
from zengo.progression.level import LevelInputs, compute_level
from zengo.progression.nudges import compute_nudges
from zengo.progression.rhythm import ActivityEvent, compute_fastest_bins
from zengo.session.recorder import SessionRecorder

app = typer.Typer(
    name="zengo",
    help="Zengo: spatial memory board engine",
    no_args_is_help=True,
)
console = Console()

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


# =============================================================================
# Display Helpers
# =============================================================================


def render_board(content: BoardContent) -> Table:
    """Draw the board with each word in its cell."""
    table = Table(box=box.SQUARE, show_header=False, show_lines=True)
    for _ in range(content.board_size):
        table.add_column(justify="center", min_width=8)

    grid = [["" for _ in range(content.board_size)] for _ in range(content.board_size)]
    for mapping in content.word_mappings:
        grid[mapping.position.y][mapping.position.x] = (
            f"[bold cyan]{mapping.word}[/bold cyan]\n[dim]#{mapping.order}[/dim]"
        )
    for row in grid:
        table.add_row(*row)
    return table


def _check_level(level: str) -> str:
    if level not in DIFFICULTY_PROFILES:
        raise typer.BadParameter(f"Choose one of: {', '.join(DIFFICULTY_PROFILES)}")
    return level


# =============================================================================
# Commands
# =============================================================================


@app.command()
def generate(
    sentence: str = typer.Argument(..., help="Sentence to place on the board"),
    level: str = typer.Option("5x5-medium", "--level", "-l", callback=_check_level),
    language: str | None = typer.Option(None, "--lang", help="Language tag"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for a reproducible layout"),
    as_json: bool = typer.Option(False, "--json", help="Print BoardContent as JSON"),
):
    """Validate a sentence and generate a non-collinear layout."""
    generator = ContentGenerator(rng=random.Random(seed))
    try:
        content = generator.build(sentence, level, language=language)
    except ContentValidationError as e:
        console.print(f"[red]Invalid content:[/red] {e}")
        raise typer.Exit(code=1)
    except GenerationError as e:
        console.print(f"[red]Generation failed:[/red] {e}")
        raise typer.Exit(code=2)

    if as_json:
        console.print_json(json.dumps(content.to_dict()))
        return

    console.print(
        Panel(
            render_board(content),
            title=f"[bold]{content.difficulty_level}[/bold] - {content.total_words} words",
            subtitle=(
                f"stones {content.total_allowed_stones} | show {content.initial_display_time_ms}ms | "
                f"target {content.target_time_ms}ms"
            ),
            expand=False,
        )
    )


@app.command()
def validate(
    sentence: str = typer.Argument(..., help="Sentence to check"),
    level: str = typer.Option("5x5-medium", "--level", "-l", callback=_check_level),
    fix: bool = typer.Option(False, "--fix", help="Substitute shorter synonyms for overflow words"),
):
    """List overflow and duplicate defects for a sentence."""
    validator = ContentValidator()
    board_size = DIFFICULTY_PROFILES[level].board_size

    if fix:
        sentence, report = validator.remediate(sentence, board_size, level)
        console.print(f"[cyan]Rewritten:[/cyan] {sentence}")
    else:
        report = validator.validate(sentence, board_size, level)

    if report.is_valid:
        console.print(f"[green]OK[/green] {len(report.tokens)} tokens: {' | '.join(report.tokens)}")
        return

    table = Table(title="Content defects", box=box.SIMPLE)
    table.add_column("Kind", style="yellow")
    table.add_column("Token", style="bold")
    table.add_column("Detail", style="dim")
    for defect in report.errors:
        table.add_row(defect.kind.value, defect.token, defect.detail)
    console.print(table)
    raise typer.Exit(code=1)


@app.command()
def level(
    usage_ms: float = typer.Option(0.0, "--usage-ms", help="Total usage time in milliseconds"),
    items: float = typer.Option(0.0, "--items", help="Number of content items created"),
    concept: float = typer.Option(0.0, "--concept", help="Concept score sum"),
):
    """Show XP and level for usage aggregates."""
    state = compute_level(
        LevelInputs(total_usage_ms=usage_ms, item_count=items, concept_score_sum=concept)
    )

    table = Table(title=f"Level {state.level}", box=box.ROUNDED)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    if state.breakdown is not None:
        table.add_row("Time XP", f"{state.breakdown.xp_time:.1f}")
        table.add_row("Item XP", f"{state.breakdown.xp_items:.1f}")
        table.add_row("Concept XP", f"{state.breakdown.xp_concept:.1f}")
    table.add_row("Total XP", f"[bold]{state.total_xp:.1f}[/bold]")
    table.add_row("Current threshold", f"{state.current_threshold:.1f}")
    table.add_row(f"Level {state.next_level} at", f"{state.next_threshold:.1f}")
    table.add_row("Progress", f"{state.progress_to_next:.0%}")
    console.print(table)


@app.command()
def rhythm(
    events_file: Path = typer.Argument(..., exists=True, readable=True, help="JSON list of {ts, type}"),
    types: str = typer.Option(..., "--types", help="Comma-separated action types to sample"),
    min_count: int = typer.Option(3, "--min-count"),
    top: int = typer.Option(3, "--top"),
):
    """Show the weekday/hour slots with the fastest recurring cadence."""
    raw = json.loads(events_file.read_text(encoding="utf-8"))
    events = [ActivityEvent(timestamp=datetime.fromisoformat(e["ts"]), action_type=e["type"]) for e in raw]
    target = {t.strip() for t in types.split(",") if t.strip()}
    bins = compute_fastest_bins(events, target, min_count=min_count, top_n=top)

    if not bins:
        console.print("[yellow]Not enough data for any slot[/yellow]")
        return

    table = Table(title="Fastest rhythm", box=box.ROUNDED)
    table.add_column("#", style="dim")
    table.add_column("Slot")
    table.add_column("Median gap", justify="right")
    table.add_column("n", justify="right")
    for rank, b in enumerate(bins, start=1):
        slot = f"{WEEKDAY_LABELS[b.weekday]} {b.hour:02d}-{(b.hour + 1) % 24:02d}h"
        table.add_row(str(rank), slot, f"{b.median_interval_min:.1f}m", str(b.count))
    console.print(table)


@app.command()
def nudges(
    log_dir: Path | None = typer.Option(None, "--dir", help="Telemetry directory"),
    limit: int = typer.Option(20, "--limit"),
):
    """Suggest board-size promotions from recorded sessions."""
    recent = SessionRecorder(log_dir).recent_results(limit=limit)
    result = compute_nudges(recent)
    console.print(f"Sessions considered: {len(recent)}")
    console.print(f"Ready for 5x5: {'[green]yes[/green]' if result.ready_for_5x5 else 'no'}")
    console.print(f"Try 7x7: {'[green]yes[/green]' if result.suggest_7x7 else 'no'}")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    logger.debug("zengo CLI starting")
    app()


if __name__ == "__main__":
    main()
