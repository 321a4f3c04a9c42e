"""
Interactive practice in the terminal.

The learner sees a card's meaning and types the term. While answering:
    :hint   show the hint
    :audio  play the pronunciation clip
    :next   skip to the next card without checking
    :quit   abandon the run

After a check: Enter goes on, ``r`` retypes the same card (not re-scored).
"""
from __future__ import annotations

from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from lexicards.cli.context import CLIContext, build_context
from lexicards.practice import (
    Feedback,
    InvalidLimitError,
    NoCardsError,
    PracticeEngine,
    PracticeSnapshot,
    ViewState,
)

console = Console()

COMMAND_HINT = "[dim]:hint  :audio  :next  :quit[/dim]"


def _choose_limit(engine: PracticeEngine, presets: list[int], default: int) -> str:
    """Setup screen: pick a preset size, all cards, or type a custom number."""
    available = len(engine.cards)
    rprint(f"\n[bold cyan]Practice Setup[/bold cyan]  [dim]{available} cards available[/dim]")
    options = [str(n) for n in presets if n <= available or n == presets[0]]
    rprint(f"  Sizes: {', '.join(options)}, [bold]all[/bold] ({available}), or any number")
    return Prompt.ask("[cyan]How many words?[/cyan]", default=str(min(default, available)))


def _render_card(snapshot: PracticeSnapshot) -> None:
    card = snapshot.current_card
    assert card is not None
    content = Text()
    content.append(f"{card.meaning}\n", style="bold")
    if snapshot.show_hint and card.hint:
        content.append(f"\nHint: {card.hint}\n", style="yellow")
    if card.has_audio:
        content.append("\n[audio available]", style="dim")
    console.print(
        Panel(
            content,
            title=f"[bold]Card {snapshot.position + 1}/{snapshot.queue_length}[/bold]",
            subtitle=f"{snapshot.correct}/{snapshot.total} correct",
            border_style="blue",
        )
    )


def _render_feedback(snapshot: PracticeSnapshot) -> None:
    card = snapshot.current_card
    assert card is not None
    if snapshot.feedback is Feedback.CORRECT:
        rprint("[bold green]✓ CORRECT![/bold green]")
    else:
        rprint("[bold red]✗ INCORRECT[/bold red]")
        rprint(f"  You typed: [red]{snapshot.last_answer or '(nothing)'}[/red]")
        rprint(f"  Answer:    [green]{card.term}[/green]")


def _render_results(snapshot: PracticeSnapshot) -> None:
    accuracy = "-" if snapshot.accuracy is None else f"{snapshot.accuracy}%"
    summary = Text()
    summary.append(f"Score: {snapshot.correct}/{snapshot.total}\n", style="bold")
    summary.append(f"Accuracy: {accuracy}\n")
    if snapshot.skipped:
        summary.append(f"Skipped without checking: {snapshot.skipped}\n", style="yellow")
    console.print(Panel(summary, title="[bold]Session Complete[/bold]", border_style="green"))

    if not snapshot.errors:
        rprint("[green]Perfect - no errors to review![/green]")
        return

    table = Table(title="Review Your Errors", show_header=True)
    table.add_column("Meaning")
    table.add_column("Your answer", style="red")
    table.add_column("Correct", style="green")
    table.add_column("Audio", justify="center")
    for entry in snapshot.errors:
        table.add_row(
            entry.card.meaning,
            entry.user_answer or "-",
            entry.card.term,
            "yes" if entry.card.has_audio else "-",
        )
    console.print(table)


def run_session(engine: PracticeEngine) -> bool:
    """
    Drive one active run to results or exit.

    Returns:
        True if the run finished, False if the learner quit
    """
    while engine.state is ViewState.ACTIVE:
        snapshot = engine.snapshot()
        _render_card(snapshot)
        rprint(COMMAND_HINT)
        answer = Prompt.ask("[cyan]Term[/cyan]", default="", show_default=False)
        command = answer.strip().lower()

        if command == ":quit":
            engine.exit()
            return False
        if command == ":hint":
            hint = engine.reveal_hint()
            if not hint:
                rprint("[dim]No hint for this card.[/dim]")
            continue
        if command == ":audio":
            if not engine.play_audio():
                rprint("[dim]No audio for this card.[/dim]")
            continue
        if command == ":next":
            engine.advance()
            continue

        engine.submit(answer)
        _render_feedback(engine.snapshot())
        choice = Prompt.ask("[dim]Enter = next, r = retype, q = quit[/dim]", default="", show_default=False)
        choice = choice.strip().lower()
        if choice == "q":
            engine.exit()
            return False
        if choice == "r":
            engine.retype()
            continue
        engine.advance()

    return engine.state is ViewState.RESULTS


def practice(
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Number of cards in the run"),
    all_cards: bool = typer.Option(False, "--all", "-a", help="Practice every card"),
) -> None:
    """
    Practice: type the term for each meaning, then review your errors.

    Examples:
        lexicards practice            # Choose a size interactively
        lexicards practice -n 20      # 20 random cards
        lexicards practice --all      # Whole deck
    """
    ctx: CLIContext = build_context()
    username = ctx.require_user()
    engine = PracticeEngine(
        lambda: ctx.card_store.list_cards(username),
        play_audio=lambda card_id: ctx.play_audio(username, card_id),
    )

    if engine.is_empty:
        rprint("[yellow]No cards available for practice![/yellow]")
        rprint("Add some words first with [cyan]lexicards cards add[/cyan]")
        raise typer.Exit(code=1)

    requested: object = "all" if all_cards else limit
    while True:
        if requested is None:
            requested = _choose_limit(engine, ctx.settings.session_limit_presets, ctx.settings.default_session_limit)
        try:
            if isinstance(requested, str) and requested.strip().lower() == "all":
                engine.start_all()
            else:
                engine.start(requested)
        except InvalidLimitError as e:
            rprint(f"[red]{e}[/red]")
            requested = None
            continue
        except NoCardsError as e:
            rprint(f"[yellow]{e}[/yellow]")
            raise typer.Exit(code=1)
        break

    while True:
        if not run_session(engine):
            rprint("[dim]Session abandoned.[/dim]")
            return
        _render_results(engine.snapshot())
        if not Confirm.ask("Practice again?", default=False):
            engine.restart()
            return
        engine.again()
