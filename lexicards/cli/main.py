"""
Typer CLI for lexicards.

Commands:
    lexicards signup              - Create an account
    lexicards login               - Log in (stores a signed session token)
    lexicards logout              - Forget the stored session
    lexicards whoami              - Show the logged-in user
    lexicards cards ...           - Card management (list, add, edit, delete, ...)
    lexicards audio ...           - Pronunciation clips (attach, remove, play)
    lexicards practice            - Interactive typed-answer practice
    lexicards serve               - Run the HTTP API

Usage:
    lexicards --help
    lexicards signup
    lexicards cards add -t Apfel -m "تفاحة" -c A1-1
    lexicards practice -n 20
"""

from __future__ import annotations

import os
import sys

# Fix Windows encoding issues for Unicode characters (Arabic text, box drawing)
if sys.platform == "win32":
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

import typer
from rich import print as rprint

from config import get_settings
from lexicards import __version__
from lexicards.cli.audio_commands import audio_app
from lexicards.cli.cards_commands import cards_app
from lexicards.cli.context import build_context
from lexicards.cli.practice_commands import practice
from lexicards.logging_setup import configure_logging
from lexicards.storage import InvalidCredentialsError, InvalidUsernameError, StorageError, UserExistsError

app = typer.Typer(
    help="lexicards: personal vocabulary flashcards with typed-answer practice",
    no_args_is_help=True,
)

app.add_typer(cards_app, name="cards")
app.add_typer(audio_app, name="audio")
app.command("practice")(practice)


# ========================================
# ACCOUNT COMMANDS
# ========================================


@app.command("signup")
def signup(
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create an account and log in."""
    ctx = build_context()
    try:
        ctx.user_store.create(username, password)
    except (UserExistsError, InvalidUsernameError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    except StorageError as e:
        rprint(f"[red]Error:[/red] Failed to create user: {e}")
        raise typer.Exit(code=1)

    ctx.save_login(username)
    rprint(f"[green]Welcome, {username}![/green] You are logged in.")


@app.command("login")
def login(
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
) -> None:
    """Log in."""
    ctx = build_context()
    try:
        ctx.user_store.authenticate(username, password)
    except InvalidCredentialsError:
        rprint("[red]Error:[/red] Invalid credentials")
        raise typer.Exit(code=1)
    except StorageError as e:
        rprint(f"[red]Error:[/red] Failed to read users: {e}")
        raise typer.Exit(code=1)

    ctx.save_login(username)
    rprint(f"[green]Logged in as {username}[/green]")


@app.command("logout")
def logout() -> None:
    """Forget the stored session."""
    ctx = build_context()
    if ctx.clear_login():
        rprint("Logged out.")
    else:
        rprint("[dim]Not logged in.[/dim]")


@app.command("whoami")
def whoami() -> None:
    """Show the logged-in user."""
    ctx = build_context()
    username = ctx.require_user()
    count = len(ctx.card_store.list_cards(username))
    rprint(f"{username} [dim]({count} cards)[/dim]")


@app.command("version")
def version() -> None:
    """Show the version."""
    rprint(f"lexicards {__version__}")


# ========================================
# SERVER
# ========================================


@app.command("serve")
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from settings)"),
    port: int = typer.Option(None, "--port", help="Port (default from settings)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "lexicards.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings(), console_level="WARNING")
    app()


if __name__ == "__main__":
    main()
