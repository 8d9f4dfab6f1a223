"""
studytrack: Main CLI.

A Rich terminal interface for tracking and reviewing study concepts.

Commands:
- studytrack dashboard  - Headline stats, weekly trend, weak concepts, insight
- studytrack list       - All concepts with their schedule
- studytrack add        - Register a new concept
- studytrack delete     - Remove a concept
- studytrack review     - Take a quiz on a concept
- studytrack record     - Record a quiz score directly (--score)
- studytrack analytics  - Subject distribution and leaderboard
- studytrack insight    - Coaching insight from the advisor
- studytrack set-key    - Save or clear the Gemini API key
- studytrack reset      - Restore the starter concepts
"""
from __future__ import annotations

import sys
import time
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from studytrack.config import get_settings
from studytrack.core.constants import SUBJECTS
from studytrack.core.models import Concept, Difficulty
from studytrack.delivery.state_store import ConceptNotFoundError
from studytrack.study.quiz import QuizSession
from studytrack.study.tracker import StudyTracker

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="studytrack",
    help="studytrack: spaced-repetition study tracker",
    no_args_is_help=True,
)
console = Console()


def get_tracker() -> StudyTracker:
    return StudyTracker.from_settings(get_settings())


# =============================================================================
# Display Helpers
# =============================================================================


def retention_style(score: int) -> str:
    if score > 75:
        return "green"
    if score > 40:
        return "yellow"
    return "red"


def format_retention(score: int) -> str:
    color = retention_style(score)
    return f"[{color}]{score}%[/{color}]"


def format_status(concept: Concept) -> str:
    color = concept.status.color
    return f"[{color}]{concept.status.value}[/{color}]"


def concept_table(concepts: list[Concept], tracker: StudyTracker, title: str | None = None) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Subject")
    table.add_column("Difficulty")
    table.add_column("Retention", justify="right")
    table.add_column("Last Quiz", justify="right")
    table.add_column("Status")
    table.add_column("Next Review")

    for c in concepts:
        next_review = c.next_review_date.isoformat()
        if tracker.scheduler.is_due(c):
            overdue = tracker.scheduler.days_overdue(c)
            marker = f"{overdue}d overdue" if overdue else "due"
            next_review = f"[bold red]{next_review} ({marker})[/bold red]"
        latest = c.latest_review
        table.add_row(
            c.id,
            c.title,
            c.subject,
            c.difficulty.value,
            format_retention(c.retention_score),
            f"{latest.score}%" if latest else "-",
            format_status(c),
            next_review,
        )
    return table


def fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def dashboard(
    no_insight: bool = typer.Option(
        False,
        "--no-insight",
        help="Skip the advisor insight",
    ),
) -> None:
    """Show headline stats, the weekly trend, and concepts needing attention."""
    tracker = get_tracker()
    view = tracker.dashboard()
    summary = view.summary

    console.print("\n[bold cyan]Dashboard[/bold cyan]")
    console.print("=" * 40)

    stats_table = Table(show_header=False, box=None)
    stats_table.add_column("Metric", style="dim")
    stats_table.add_column("Value", style="bold")
    stats_table.add_row("Concepts active", str(summary.total))
    stats_table.add_row("Avg retention", f"{summary.avg_retention}%")
    stats_table.add_row("Due today", str(summary.due_today))
    stats_table.add_row("Daily streak", str(summary.streak))
    console.print(stats_table)

    trend_table = Table(title="Knowledge Growth (last 7 days)")
    for point in view.weekly_trend:
        trend_table.add_column(point.label, justify="right")
    trend_table.add_row(*(str(p.score) for p in view.weekly_trend))
    console.print(trend_table)

    if view.needs_attention:
        console.print(
            concept_table(view.needs_attention, tracker, title="Need Attention (below 80%)")
        )
    else:
        console.print("\n[green]Every concept is at 80% or better.[/green]")

    if not no_insight:
        console.print(Panel(tracker.insight(), title="Advisor Insight", border_style="magenta"))


@app.command("list")
def list_concepts() -> None:
    """List every concept with its retention and schedule."""
    tracker = get_tracker()
    concepts = tracker.concepts()
    if not concepts:
        console.print("[yellow]No concepts yet. Add one with 'studytrack add'.[/yellow]")
        return
    console.print(concept_table(concepts, tracker, title="Knowledge Base"))


@app.command()
def add(
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Concept name"),
    subject: Optional[str] = typer.Option(None, "--subject", "-s", help="Subject"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Core definition or logic"
    ),
    difficulty: Optional[Difficulty] = typer.Option(
        None, "--difficulty", help="Easy, Medium or Hard"
    ),
) -> None:
    """Register a new concept (prompts for anything not given)."""
    tracker = get_tracker()

    title = title or Prompt.ask("Concept name")
    subject = subject or Prompt.ask("Subject", choices=SUBJECTS, default=SUBJECTS[0])
    description = description or Prompt.ask("Knowledge summary")
    if difficulty is None:
        levels = ", ".join(f"{d.value} = {d.label}" for d in Difficulty)
        difficulty = Difficulty(
            Prompt.ask(
                f"Complexity ({levels})",
                choices=[d.value for d in Difficulty],
                default=Difficulty.MEDIUM.value,
            )
        )

    try:
        concept = tracker.add_concept(title, subject, description, difficulty)
    except ValueError as e:
        fail(str(e))
        return

    console.print(f"[green]Registered '{concept.title}' ({concept.id}), due today.[/green]")


@app.command()
def delete(
    concept_id: str = typer.Argument(..., help="Concept ID"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a concept and its review history."""
    tracker = get_tracker()
    concept = tracker.store.get(concept_id)
    if concept is None:
        console.print(f"[yellow]No concept with ID {concept_id}; nothing deleted.[/yellow]")
        return

    if not confirm and not Confirm.ask(f"Delete '{concept.title}'?", default=False):
        raise typer.Exit(0)

    tracker.delete_concept(concept_id)
    console.print(f"[green]Deleted '{concept.title}'.[/green]")


@app.command()
def review(
    concept_id: str = typer.Argument(..., help="Concept ID"),
) -> None:
    """Take a quiz on a concept and update its retention."""
    tracker = get_tracker()
    try:
        concept = tracker.get_concept(concept_id)
    except ConceptNotFoundError as e:
        fail(str(e))
        return

    with console.status(f"Generating quiz for {concept.title}..."):
        questions = tracker.quiz_for(concept_id)

    session = QuizSession(questions)
    started = time.time()

    while not session.is_finished:
        question = session.current
        index = session.current_index + 1
        body = question.question + "\n\n" + "\n".join(
            f"  {chr(65 + i)}. {option}" for i, option in enumerate(question.options)
        )
        console.print(Panel(body, title=f"Question {index}/{len(questions)}", border_style="cyan"))

        letters = [chr(65 + i) for i in range(len(question.options))]
        choice = Prompt.ask(
            "Your answer",
            choices=letters + [letter.lower() for letter in letters],
            show_choices=False,
        ).upper()
        if session.answer(ord(choice) - ord("A")):
            console.print("[bold green]Correct![/bold green]")
        else:
            console.print(f"[bold red]Incorrect.[/bold red] Answer: {question.correct_answer}")
        if question.explanation:
            console.print(f"[dim]{question.explanation}[/dim]\n")

    minutes = max(1, round((time.time() - started) / 60))
    score = session.score_percent()
    updated = tracker.complete_review(concept_id, score, time_spent=minutes)

    console.print(Panel(
        f"[bold]Review Complete![/bold]\n\n"
        f"Quiz score: {score}%\n"
        f"Retention: {concept.retention_score}% -> {format_retention(updated.retention_score)}\n"
        f"Status: {format_status(updated)}\n"
        f"Next review: {updated.next_review_date.isoformat()}",
        title="Summary",
        border_style="green",
    ))


@app.command()
def record(
    concept_id: str = typer.Argument(..., help="Concept ID"),
    score: int = typer.Option(
        ..., "--score", "-s", help="Quiz score in percent; clamped to 0-100"
    ),
    minutes: Optional[int] = typer.Option(None, "--minutes", "-m", help="Time spent"),
) -> None:
    """Record a quiz score without running the interactive quiz."""
    tracker = get_tracker()
    try:
        updated = tracker.complete_review(concept_id, score, time_spent=minutes)
    except ConceptNotFoundError as e:
        fail(str(e))
        return

    console.print(
        f"[green]{updated.title}: retention {updated.retention_score}% "
        f"({updated.status.value}), next review {updated.next_review_date.isoformat()}[/green]"
    )


@app.command()
def analytics() -> None:
    """Show subject distribution and the mastery leaderboard."""
    tracker = get_tracker()
    view = tracker.dashboard()

    dist_table = Table(title="Cognitive Load Distribution")
    dist_table.add_column("Subject")
    dist_table.add_column("Concepts", justify="right")
    for subject, count in view.subject_distribution.items():
        dist_table.add_row(subject, str(count))
    console.print(dist_table)

    board = Table(title="Mastery Leaderboard")
    board.add_column("#", style="dim", justify="right")
    board.add_column("Title", style="bold")
    board.add_column("Retention", justify="right")
    for rank, concept in enumerate(view.leaderboard, 1):
        board.add_row(f"{rank:02d}", concept.title, format_retention(concept.retention_score))
    console.print(board)

    status_table = Table(title="Status")
    status_table.add_column("Status")
    status_table.add_column("Concepts", justify="right")
    for status, count in view.status_breakdown.items():
        status_table.add_row(f"[{status.color}]{status.value}[/{status.color}]", str(count))
    console.print(status_table)


@app.command()
def insight() -> None:
    """Print a coaching insight for the current collection."""
    tracker = get_tracker()
    console.print(Panel(tracker.insight(), title="Advisor Insight", border_style="magenta"))


@app.command("set-key")
def set_key(
    api_key: Optional[str] = typer.Argument(None, help="Gemini API key"),
    clear: bool = typer.Option(False, "--clear", help="Remove the saved key"),
) -> None:
    """Save the Gemini API key used for quizzes and insights."""
    tracker = get_tracker()
    if clear:
        tracker.set_api_key(None)
        if tracker.settings.has_ai_configured():
            console.print("[green]Saved API key removed. The environment key will be used.[/green]")
        else:
            console.print("[green]Saved API key removed. Offline fallbacks will be used.[/green]")
        return

    api_key = api_key or Prompt.ask("Gemini API key", password=True)
    if not api_key.strip():
        fail("API key cannot be empty")
        return
    tracker.set_api_key(api_key.strip())
    console.print("[green]API key saved.[/green]")


@app.command()
def reset(
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Replace all concepts with the starter set."""
    if not confirm and not Confirm.ask(
        "Replace ALL concepts with the starter set? This cannot be undone!", default=False
    ):
        raise typer.Exit(0)

    concepts = get_tracker().reset()
    console.print(f"[green]Restored {len(concepts)} starter concepts.[/green]")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging() -> None:
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            level="DEBUG",
            rotation="1 MB",
            retention=3,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        )


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
