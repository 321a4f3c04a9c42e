"""
CLI Audio Commands.

Commands:
    lexicards audio attach <id> <file> - Store a pronunciation clip for a card
    lexicards audio remove <id>        - Delete a card's clip
    lexicards audio play <id>          - Play a card's clip with the configured player
"""
from __future__ import annotations

from pathlib import Path

import typer
from rich import print as rprint

from lexicards.cli.context import build_context
from lexicards.storage import CardNotFoundError, StorageError

audio_app = typer.Typer(
    name="audio",
    help="Pronunciation clips for cards",
    no_args_is_help=True,
)


def _lookup(ctx, username: str, card_id: str):
    try:
        return ctx.card_store.get_card(username, card_id)
    except CardNotFoundError:
        rprint(f"[red]Error:[/red] Card '{card_id}' not found")
        raise typer.Exit(code=1)


@audio_app.command("attach")
def attach_audio(
    card_id: str = typer.Argument(..., help="Card id"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Audio file"),
) -> None:
    """Store a clip for a card, replacing any existing one."""
    ctx = build_context()
    username = ctx.require_user()
    card = _lookup(ctx, username, card_id)

    data = file.read_bytes()
    if not data:
        rprint("[red]Error:[/red] Audio file is empty")
        raise typer.Exit(code=1)
    if len(data) > ctx.settings.audio_max_bytes:
        rprint(f"[red]Error:[/red] Audio file larger than {ctx.settings.audio_max_bytes} bytes")
        raise typer.Exit(code=1)

    try:
        ctx.audio_store.save(username, card.id, data)
        ctx.card_store.set_has_audio(username, card.id, True)
    except StorageError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    rprint(f"[green]Audio attached[/green] to {card.term}")


@audio_app.command("remove")
def remove_audio(card_id: str = typer.Argument(..., help="Card id")) -> None:
    """Delete a card's clip."""
    ctx = build_context()
    username = ctx.require_user()
    card = _lookup(ctx, username, card_id)
    ctx.audio_store.delete(username, card.id)
    ctx.card_store.set_has_audio(username, card.id, False)
    rprint(f"[green]Audio removed[/green] from {card.term}")


@audio_app.command("play")
def play_audio(card_id: str = typer.Argument(..., help="Card id")) -> None:
    """Play a card's clip."""
    ctx = build_context()
    username = ctx.require_user()
    card = _lookup(ctx, username, card_id)
    if not card.has_audio:
        rprint("[yellow]No audio recorded for this card.[/yellow]")
        return
    ctx.play_audio(username, card.id)
