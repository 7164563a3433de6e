"""Command-line interface for reading deadlines.

Built with Typer for commands and Rich for output.
"""

import logging
from datetime import date
from enum import Enum
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import get_config
from .dates import local_date_of, resolve_timezone
from .db import get_db
from .db.schemas import (
    MS_PER_MINUTE,
    DeadlineCreate,
    DeadlineFormat,
    DeadlineRecord,
    DeadlineStatus,
    PaceUnit,
)
from .db.sqlite import Database
from .pace.urgency import URGENCY_COLORS

# Create the main app
app = typer.Typer(
    name="deadlines",
    help="Track reading deadlines and the pace needed to meet them.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


class StatusAction(str, Enum):
    """Status changes accepted by the ``status`` command."""

    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    REVIEW = "review"
    COMPLETE = "complete"
    DNF = "dnf"
    REACTIVATE = "reactivate"


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def _local_zone():
    """Configured local zone, exiting on an unknown name."""
    config = get_config()
    tz = resolve_timezone(config.timezone_name)
    if tz is None:
        print_error(f"Unknown timezone: {config.timezone_name}")
        raise typer.Exit(1)
    return tz


def _parse_date(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        print_error(f"Invalid date for {option}: {value} (expected YYYY-MM-DD)")
        raise typer.Exit(1)


def _to_stored(amount: int, format: DeadlineFormat) -> int:
    """Convert CLI pages/minutes to the stored unit."""
    return amount * MS_PER_MINUTE if format.is_audio else amount


def _find_deadline(db: Database, query: str) -> DeadlineRecord:
    """Resolve a deadline by ID or title/author search."""
    deadline = db.get_deadline(query)
    if deadline:
        return deadline

    matches = db.search_deadlines(query, limit=5)
    if not matches:
        print_error(f"No deadline found matching: {query}")
        raise typer.Exit(1)

    if len(matches) == 1:
        return matches[0]

    console.print("\n[bold]Multiple deadlines found:[/bold]")
    for i, d in enumerate(matches, 1):
        console.print(f"  {i}. {d.title} (due {d.deadline_date})")

    choice = typer.prompt("Select deadline number", type=int, default=1)
    if choice < 1 or choice > len(matches):
        print_error("Invalid selection")
        raise typer.Exit(1)
    return matches[choice - 1]


def _progress_bar(percent: int, width: int = 10) -> str:
    filled = int((percent / 100) * width)
    return "█" * filled + "░" * (width - filled)


def _days_left_label(days_left: Optional[int]) -> str:
    if days_left is None:
        return "date unknown"
    if days_left < 0:
        return f"{-days_left}d overdue"
    if days_left == 0:
        return "due today"
    return f"{days_left}d"


def format_results_table(results: list, title: str = "Deadlines") -> Table:
    """Create a rich table for calculated deadlines."""
    from .pace import format_progress_display

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=35)
    table.add_column("Due", justify="right")
    table.add_column("Progress", justify="center")
    table.add_column("Needed", justify="right")
    table.add_column("Status", style="yellow")
    table.add_column("Urgency")

    for r in results:
        position = format_progress_display(r.format, r.current_progress)
        total = format_progress_display(r.format, r.total_quantity)
        style = URGENCY_COLORS.get(r.urgency, "white")
        table.add_row(
            r.title,
            _days_left_label(r.days_left),
            f"[{_progress_bar(r.progress_percentage)}] {position}/{total}",
            r.required_pace_display,
            r.status.value,
            f"[{style}]{r.urgency.value}[/{style}]",
        )

    return table


@app.callback()
def setup() -> None:
    """Track reading deadlines and the pace needed to meet them."""
    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


# ============================================================================
# Deadline Commands
# ============================================================================


@app.command()
def add(
    title: str = typer.Argument(..., help="Book title"),
    total: int = typer.Option(..., "--total", "-t", min=1, help="Pages, or minutes for audio"),
    due: str = typer.Option(..., "--due", "-d", help="Due date (YYYY-MM-DD)"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Author"),
    format: DeadlineFormat = typer.Option(DeadlineFormat.PHYSICAL, "--format", "-f", help="Book format"),
    progress: int = typer.Option(0, "--progress", "-p", min=0, help="Starting page or minute"),
    pending: bool = typer.Option(False, "--pending", help="Add without starting"),
) -> None:
    """Add a new reading deadline."""
    db = get_db()
    due_date = _parse_date(due, "--due")

    try:
        data = DeadlineCreate(
            title=title,
            author=author,
            format=format,
            total_quantity=_to_stored(total, format),
            deadline_date=due_date,
            initial_status=DeadlineStatus.PENDING if pending else DeadlineStatus.READING,
            initial_progress=_to_stored(progress, format),
        )
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    deadline = db.create_deadline(data)
    print_success(f"Added: {deadline.title} (due {deadline.deadline_date})")
    console.print(f"[dim]ID: {deadline.id}[/dim]")


@app.command()
def progress(
    query: str = typer.Argument(..., help="Deadline title or ID"),
    value: int = typer.Argument(..., help="Page reached, or minutes listened for audio"),
    ignore: bool = typer.Option(False, "--ignore", help="Exclude from pace calculations"),
) -> None:
    """Log the current page (or minute) of a deadline."""
    from .reading import ProgressTracker

    db = get_db()
    deadline = _find_deadline(db, query)
    tracker = ProgressTracker(db)

    try:
        tracker.log_progress(deadline.id, _to_stored(value, deadline.format), ignore_in_calcs=ignore)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    info = tracker.get_deadline_progress(deadline.id, tz=_local_zone())
    print_success(
        f"{deadline.title}: {info['progress_display']} ({info['progress_percent']}%)"
    )


@app.command()
def status(
    query: str = typer.Argument(..., help="Deadline title or ID"),
    action: StatusAction = typer.Argument(..., help="Status change"),
    review_due: Optional[str] = typer.Option(None, "--review-due", help="Review due date (YYYY-MM-DD)"),
    needs_link: bool = typer.Option(False, "--needs-link", help="Review link must be submitted"),
) -> None:
    """Change the status of a deadline."""
    from .status import StatusManager

    db = get_db()
    deadline = _find_deadline(db, query)
    manager = StatusManager(db)

    try:
        if action == StatusAction.START:
            entry = manager.start(deadline.id)
        elif action == StatusAction.PAUSE:
            entry = manager.pause(deadline.id)
        elif action == StatusAction.RESUME:
            entry = manager.resume(deadline.id)
        elif action == StatusAction.REVIEW:
            review_date = _parse_date(review_due, "--review-due") if review_due else None
            entry, _ = manager.mark_to_review(deadline.id, review_date, needs_link)
        elif action == StatusAction.COMPLETE:
            entry = manager.complete(deadline.id)
        elif action == StatusAction.DNF:
            entry = manager.did_not_finish(deadline.id)
        else:
            entry = manager.reactivate(deadline.id)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"{deadline.title}: {entry.status.value}")


@app.command()
def show(
    query: str = typer.Argument(..., help="Deadline title or ID"),
) -> None:
    """Show the calculated figures of a deadline."""
    from .pace import format_progress_display, reading_estimate
    from .results import calculate_paces, calculate_deadline

    db = get_db()
    config = get_config()
    tz = _local_zone()
    deadline = _find_deadline(db, query)

    ledger = db.load_ledger()
    reading, listening = calculate_paces(ledger, tz, config)
    r = calculate_deadline(
        deadline,
        ledger.progress_for(deadline.id),
        ledger.statuses_for(deadline.id),
        reading,
        listening,
        tz=tz,
        review=ledger.review_for(deadline.id),
        config=config,
    )

    style = URGENCY_COLORS.get(r.urgency, "white")
    lines = [
        f"[bold]{r.title}[/bold]" + (f" by {deadline.author}" if deadline.author else ""),
        f"Format: {r.format.value}  Status: {r.status.value}",
        "",
        f"Progress: [{_progress_bar(r.progress_percentage, 30)}] {r.progress_percentage}%",
        f"Position: {format_progress_display(r.format, r.current_progress)}"
        f" of {format_progress_display(r.format, r.total_quantity)}",
        f"Due: {r.deadline_date or '-'} ({_days_left_label(r.days_left)})",
        "",
        f"Required pace: {r.required_pace_display}",
        f"Your pace: {r.user_pace_display}"
        + ("" if r.pace_is_reliable else " [dim](default, not enough recent data)[/dim]"),
        f"Urgency: [{style}]{r.urgency.value}[/{style}]  {r.pace_message}",
    ]

    estimate = reading_estimate(r.format, r.remaining)
    if estimate:
        lines.append(f"[dim]{estimate}[/dim]")
    if r.review_days_left is not None:
        lines.append(f"Reviews due: {_days_left_label(r.review_days_left)}")

    console.print(Panel("\n".join(lines), title="Deadline"))


@app.command("list")
def list_deadlines(
    show_all: bool = typer.Option(False, "--all", "-a", help="Include archived deadlines"),
    limit: int = typer.Option(20, "--limit", "-l", help="Max deadlines per group"),
) -> None:
    """List deadlines grouped by state."""
    from .results import calculate_all, separate_deadlines

    db = get_db()
    tz = _local_zone()
    results = calculate_all(db.load_ledger(), tz=tz, config=get_config())

    if not results:
        console.print("[dim]No deadlines found.[/dim]")
        console.print("[dim]Use 'deadlines add \"Title\" --total 300 --due 2025-12-31' to add one.[/dim]")
        return

    groups = separate_deadlines(results)
    sections = [
        ("Overdue", groups.overdue),
        ("Active", groups.active),
        ("Pending", groups.pending),
        ("Paused", groups.paused),
        ("To Review", groups.to_review),
    ]
    if show_all:
        sections.append(("Archived", groups.archived))

    for title, group in sections:
        if group:
            console.print(format_results_table(group[:limit], title=title))

    if not show_all and groups.archived:
        console.print(f"[dim]{len(groups.archived)} archived (use --all to show)[/dim]")


@app.command()
def pace(
    days: bool = typer.Option(False, "--days", help="Show daily activity in the window"),
) -> None:
    """Show your reading and listening pace."""
    from .pace import format_pace_display
    from .results import calculate_paces

    db = get_db()
    tz = _local_zone()
    reading, listening = calculate_paces(db.load_ledger(), tz, get_config())

    table = Table(title="Your Pace", show_header=True, header_style="bold magenta")
    table.add_column("Unit", style="cyan")
    table.add_column("Pace", justify="right")
    table.add_column("Active Days", justify="right")
    table.add_column("Method")
    table.add_column("Window")

    for data, format in ((reading, DeadlineFormat.PHYSICAL), (listening, DeadlineFormat.AUDIO)):
        window = "-"
        if data.window_start and data.window_end:
            window = f"{data.window_start} to {data.window_end}"
        method = "recent data" if data.is_reliable else "[yellow]default[/yellow]"
        table.add_row(
            data.unit.value,
            format_pace_display(data.average_pace, format),
            str(data.active_days_count),
            method,
            window,
        )

    console.print(table)

    if days:
        for data in (reading, listening):
            if not data.activity_days:
                continue
            label = "pages" if data.unit is PaceUnit.PAGES else "minutes"
            activity = Table(title=f"Daily Activity ({label})", show_header=True)
            activity.add_column("Date", style="cyan")
            activity.add_column("Amount", justify="right")
            for day, amount in sorted(data.activity_days.items()):
                activity.add_row(day.isoformat(), f"{amount:.0f}")
            console.print(activity)


@app.command()
def history(
    query: str = typer.Argument(..., help="Deadline title or ID"),
    limit: int = typer.Option(20, "--limit", "-l", help="Max entries to show"),
) -> None:
    """Show the progress and status history of a deadline."""
    from .pace import format_progress_display
    from .reading import ProgressTracker
    from .status import StatusManager

    db = get_db()
    tz = _local_zone()
    deadline = _find_deadline(db, query)

    entries = ProgressTracker(db).get_progress_history(deadline.id, limit=limit)
    statuses = StatusManager(db).history(deadline.id)

    if not entries and not statuses:
        console.print("[dim]No history for this deadline.[/dim]")
        return

    table = Table(title=f"History: {deadline.title}", show_header=True, header_style="bold magenta")
    table.add_column("Date", style="cyan")
    table.add_column("Progress", justify="right")
    table.add_column("Note")

    for entry in entries:
        table.add_row(
            str(local_date_of(entry.created_at, tz) or "-"),
            format_progress_display(deadline.format, entry.current_progress),
            "ignored" if entry.ignore_in_calcs else "",
        )
    console.print(table)

    status_table = Table(title="Status Changes", show_header=True, header_style="bold magenta")
    status_table.add_column("Date", style="cyan")
    status_table.add_column("Status", style="yellow")
    for entry in statuses[:limit]:
        status_table.add_row(str(local_date_of(entry.created_at, tz) or "-"), entry.status.value)
    console.print(status_table)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"deadlines version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
