"""Display components for CLI using Rich."""

import json
from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.api.intel.models import Actor, Slugable

console = Console()


def show_error(title: str, message: str) -> None:
    """Display an error message on stderr."""
    err_console = Console(stderr=True)
    err_console.print()
    err_console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_raw_json(raw: bytes) -> None:
    """Re-indent a raw JSON reply and print it.

    Raises:
        json.JSONDecodeError: If the reply is not valid JSON.
    """
    data = json.loads(raw)
    console.print_json(json.dumps(data, indent=2))


def _slugs(items: list[Slugable]) -> str:
    return ", ".join(item.value for item in items)


def _date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else "-"


def show_actor_table(actors: list[Actor], total: int | None = None) -> None:
    """Display actors as a table.

    Args:
        actors: Actors to display.
        total: Total number of matches reported by the server.
    """
    if not actors:
        console.print("[yellow]No actors to display[/]")
        return

    table = Table(title="[bold]Threat Actors[/]", show_lines=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Known As")
    table.add_column("Description", width=40)
    table.add_column("Motivations")
    table.add_column("Origins")
    table.add_column("Target Countries")
    table.add_column("Target Industries")
    table.add_column("First Activity", no_wrap=True)
    table.add_column("Last Activity", no_wrap=True)

    for actor in actors:
        table.add_row(
            str(actor.id),
            escape(actor.name),
            escape(actor.known_as),
            escape(actor.short_description),
            escape(_slugs(actor.motivations)),
            escape(_slugs(actor.origins)),
            escape(_slugs(actor.target_countries)),
            escape(_slugs(actor.target_industries)),
            _date(actor.first_activity_at),
            _date(actor.last_activity_at),
        )

    console.print(table)
    if total is not None:
        console.print(f"[dim]Showing {len(actors)} of {total} actor(s)[/]")
