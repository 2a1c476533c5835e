"""Read-only console dashboard over a deck export."""
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from srs_scheduler.config import SchedulerSettings, get_settings
from srs_scheduler.dashboard import calc_review_stats, get_accuracy_stats, get_study_schedule
from srs_scheduler.deck import load_deck
from srs_scheduler.errors import SchedulerError
from srs_scheduler.flashcards import build_review_queue, calc_priority_score, days_overdue
from srs_scheduler.models import Card, ReviewEvent, now_utc

console = Console()
logger = logging.getLogger(__name__)


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("due", "Cards to review now, most urgent first"),
        ("stats", "Review statistics"),
        ("forecast", "Cards coming due this week"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")


def cmd_due(cards: list[Card], settings: SchedulerSettings) -> None:
    now = now_utc()
    queue = build_review_queue(cards, now, limit=settings.session_limit)
    if not queue:
        console.print("[green]Nothing due right now![/green]")
        return
    table = Table(title=f"Review Queue ({len(queue)} cards)")
    table.add_column("#", justify="right")
    table.add_column("Card", style="cyan")
    table.add_column("Days Overdue", justify="right")
    table.add_column("Reviews", justify="right")
    table.add_column("Priority", justify="right")
    for i, card in enumerate(queue, 1):
        table.add_row(
            str(i),
            str(card.id),
            "new" if card.next_review is None else f"{days_overdue(card, now):.1f}",
            str(card.review_count),
            f"{calc_priority_score(card, now):.2f}",
        )
    console.print(table)


def cmd_stats(cards: list[Card], reviews: list[ReviewEvent]) -> None:
    stats = calc_review_stats(reviews)
    accuracy = get_accuracy_stats(cards)
    table = Table(title="Review Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total reviews", str(stats["total_reviews"]))
    table.add_row("Average performance", f"{stats['average_performance']:.2f}")
    table.add_row("Retention rate", f"{stats['retention_rate']}%")
    table.add_row("Time spent", f"{stats['time_spent']:.0f}s")
    table.add_row("Answers", f"{accuracy['correct_count']}/{accuracy['total_answered']}")
    table.add_row("Accuracy", f"{accuracy['accuracy']}%")
    console.print(table)


def cmd_forecast(cards: list[Card], settings: SchedulerSettings) -> None:
    forecast = get_study_schedule(cards, now_utc(), days=settings.forecast_days)
    table = Table(title=f"Next {settings.forecast_days} Days")
    table.add_column("Date")
    table.add_column("Due", justify="right")
    for day in forecast["schedule"]:
        table.add_row(day["date"].isoformat(), str(day["due_cards"]))
    console.print(table)
    console.print(
        f"  Total: [bold]{forecast['total_due']}[/bold]  |  "
        f"Recommended per day: [bold]{forecast['recommended_per_day']}[/bold]"
    )


def main(argv: Optional[list[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = get_settings()
    except PydanticValidationError as e:
        console.print(f"[red]Invalid settings: {escape(str(e))}[/red]")
        return 1
    configure_logging(settings.log_level)
    deck_path = Path(argv[0]) if argv else settings.deck_path

    try:
        cards, reviews = load_deck(deck_path)
    except FileNotFoundError:
        console.print(f"[red]Deck not found: {deck_path}[/red]")
        return 1
    except (SchedulerError, OSError) as e:
        console.print(f"[red]Could not read deck: {escape(str(e))}[/red]")
        return 1
    logger.info("Loaded %d cards and %d reviews from %s", len(cards), len(reviews), deck_path)

    console.print(Panel(
        f"[bold]{deck_path.name}[/bold]\n[dim]{len(cards)} cards, policy: {settings.policy}[/dim]",
        title="Review Dashboard", border_style="blue",
    ))

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="due").strip().lower()
        try:
            if choice == "due":
                cmd_due(cards, settings)
            elif choice == "stats":
                cmd_stats(cards, reviews)
            elif choice == "forecast":
                cmd_forecast(cards, settings)
            elif choice in ("quit", "exit", "q"):
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except SchedulerError as e:
            console.print(f"[red]Error: {e}[/red]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
