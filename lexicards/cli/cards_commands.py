"""
CLI Card Commands.

Commands:
    lexicards cards list        - Browse cards (newest first, search, category, pages)
    lexicards cards add         - Add a card
    lexicards cards edit <id>   - Edit a card
    lexicards cards delete <id> - Delete a card and its audio
    lexicards cards categories  - Categories in use and presets
    lexicards cards shuffle     - Show the deck in random order
"""
from __future__ import annotations

from typing import List, Optional

import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from lexicards.cli.context import build_context
from lexicards.models import Card, CardCreate, CardUpdate
from lexicards.practice import shuffle
from lexicards.study import ALL_CATEGORIES, filter_cards, paginate
from lexicards.storage import CardNotFoundError, StorageError

console = Console()

cards_app = typer.Typer(
    name="cards",
    help="Create, edit, delete and browse flashcards",
    no_args_is_help=True,
)


def _split_tags(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def _card_table(cards: List[Card], title: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Term", style="bold cyan")
    table.add_column("Meaning")
    table.add_column("Category", style="magenta")
    table.add_column("Tags", style="dim")
    table.add_column("Audio", justify="center")
    for card in cards:
        table.add_row(
            card.id[:8],
            card.term,
            card.meaning,
            card.category,
            ", ".join(card.tags) or "-",
            "[green]yes[/green]" if card.has_audio else "-",
        )
    return table


def _resolve_id(cards: List[Card], prefix: str) -> str:
    """Accept a full id or an unambiguous prefix, as shown in the list table."""
    matches = [c.id for c in cards if c.id == prefix] or [c.id for c in cards if c.id.startswith(prefix)]
    if len(matches) != 1:
        rprint(f"[red]Error:[/red] {'No' if not matches else 'Ambiguous'} card id '{prefix}'")
        raise typer.Exit(code=1)
    return matches[0]


@cards_app.command("list")
def list_cards(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Match term, meaning or tag"),
    category: str = typer.Option(ALL_CATEGORIES, "--category", "-c", help="Category or 'all'"),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
) -> None:
    """Browse your cards, newest first."""
    ctx = build_context()
    username = ctx.require_user()
    try:
        cards = ctx.card_store.list_cards(username)
    except StorageError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if not cards:
        rprint("[yellow]No cards yet.[/yellow] Add one with [cyan]lexicards cards add[/cyan]")
        return

    result = paginate(filter_cards(cards, search, category), page, ctx.settings.cards_per_page)
    console.print(_card_table(result.items, f"Cards ({result.total})"))
    rprint(f"[dim]Page {result.page}/{result.pages}[/dim]")


@cards_app.command("add")
def add_card(
    term: str = typer.Option(..., "--term", "-t", prompt=True, help="Word or phrase being learned"),
    meaning: str = typer.Option(..., "--meaning", "-m", prompt=True, help="Translation"),
    hint: str = typer.Option("", "--hint", help="Optional hint"),
    category: str = typer.Option("General", "--category", "-c", help="Category, e.g. A1-1"),
    tags: str = typer.Option("", "--tags", help="Comma-separated tags"),
    card_type: str = typer.Option("word", "--type", help="word or phrase"),
) -> None:
    """Add a card."""
    ctx = build_context()
    username = ctx.require_user()
    try:
        payload = CardCreate(
            term=term, meaning=meaning, hint=hint, category=category, tags=_split_tags(tags), type=card_type
        )
        card = ctx.card_store.add_card(username, payload)
    except ValidationError:
        rprint("[red]Error:[/red] Term and meaning are required")
        raise typer.Exit(code=1)
    except StorageError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    rprint(f"[green]Added[/green] {card.term} = {card.meaning} [dim]({card.id})[/dim]")


@cards_app.command("edit")
def edit_card(
    card_id: str = typer.Argument(..., help="Card id or id prefix"),
    term: Optional[str] = typer.Option(None, "--term", "-t"),
    meaning: Optional[str] = typer.Option(None, "--meaning", "-m"),
    hint: Optional[str] = typer.Option(None, "--hint"),
    category: Optional[str] = typer.Option(None, "--category", "-c"),
    tags: Optional[str] = typer.Option(None, "--tags", help="Comma-separated tags (replaces existing)"),
    card_type: Optional[str] = typer.Option(None, "--type"),
) -> None:
    """Edit a card. Options not given keep their current values."""
    ctx = build_context()
    username = ctx.require_user()
    cards = ctx.card_store.list_cards(username)
    full_id = _resolve_id(cards, card_id)
    current = next(c for c in cards if c.id == full_id)

    try:
        payload = CardUpdate(
            term=term if term is not None else current.term,
            meaning=meaning if meaning is not None else current.meaning,
            hint=hint if hint is not None else current.hint,
            category=category if category is not None else current.category,
            tags=_split_tags(tags) if tags is not None else current.tags,
            type=card_type,
        )
        card = ctx.card_store.update_card(username, full_id, payload)
    except ValidationError:
        rprint("[red]Error:[/red] Term and meaning must not be blank")
        raise typer.Exit(code=1)
    except CardNotFoundError:
        rprint("[red]Error:[/red] Card not found")
        raise typer.Exit(code=1)

    rprint(f"[green]Updated[/green] {card.term} = {card.meaning}")


@cards_app.command("delete")
def delete_card(
    card_id: str = typer.Argument(..., help="Card id or id prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a card and its audio clip."""
    ctx = build_context()
    username = ctx.require_user()
    cards = ctx.card_store.list_cards(username)
    full_id = _resolve_id(cards, card_id)
    card = next(c for c in cards if c.id == full_id)

    if not yes and not typer.confirm(f"Delete '{card.term}'?"):
        raise typer.Abort()

    ctx.card_store.delete_card(username, full_id)
    rprint(f"[green]Deleted[/green] {card.term}")


@cards_app.command("categories")
def list_categories() -> None:
    """Show categories in use and the preset list."""
    ctx = build_context()
    username = ctx.require_user()
    used = ctx.card_store.categories(username)
    rprint(f"[bold]In use:[/bold] {', '.join(used) if used else '-'}")
    rprint(f"[bold]Presets:[/bold] {', '.join(ctx.settings.preset_categories)}")


@cards_app.command("shuffle")
def shuffle_cards(
    category: str = typer.Option(ALL_CATEGORIES, "--category", "-c", help="Category or 'all'"),
) -> None:
    """Show your cards in random order (first page)."""
    ctx = build_context()
    username = ctx.require_user()
    cards = filter_cards(ctx.card_store.list_cards(username), category=category)
    result = paginate(shuffle(cards), 1, ctx.settings.cards_per_page)
    console.print(_card_table(result.items, f"Shuffled ({result.total})"))
