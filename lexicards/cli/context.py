"""
CLI dependency container and login state.

The CLI talks to the data directory directly (no server needed). After
``lexicards login`` a signed token is written to ``cli_session_file``; commands
that need a user read it back through ``CLIContext.require_user``.
"""

from __future__ import annotations

import shlex
import subprocess

import typer
from loguru import logger
from rich import print as rprint

from config import Settings, get_settings
from lexicards.auth.tokens import create_session_token, verify_session_token
from lexicards.storage import AudioStore, CardStore, UserStore


class CLIContext:
    """
    Dependency injection container for CLI commands.

    Lazily initializes stores from settings.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._user_store: UserStore | None = None
        self._card_store: CardStore | None = None
        self._audio_store: AudioStore | None = None

    @property
    def user_store(self) -> UserStore:
        if self._user_store is None:
            self._user_store = UserStore(self.settings.users_file, self.settings.password_hash_iterations)
        return self._user_store

    @property
    def audio_store(self) -> AudioStore:
        if self._audio_store is None:
            self._audio_store = AudioStore(self.settings.audio_dir, self.settings.audio_extension)
        return self._audio_store

    @property
    def card_store(self) -> CardStore:
        if self._card_store is None:
            self._card_store = CardStore(self.settings.cards_dir, self.audio_store)
        return self._card_store

    # ========================================
    # Session file
    # ========================================

    def current_user(self) -> str | None:
        path = self.settings.cli_session_file
        if not path.exists():
            return None
        token = path.read_text(encoding="utf-8").strip()
        return verify_session_token(token, self.settings.session_secret, max_age=self.settings.session_max_age_seconds)

    def is_authenticated(self) -> bool:
        return self.current_user() is not None

    def require_user(self) -> str:
        """Username of the logged-in user, or exit with a hint to log in."""
        username = self.current_user()
        if username is None:
            rprint("[red]Error:[/red] Not logged in. Run [cyan]lexicards login[/cyan] first.")
            raise typer.Exit(code=1)
        return username

    def save_login(self, username: str) -> None:
        path = self.settings.cli_session_file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(create_session_token(username, self.settings.session_secret), encoding="utf-8")

    def clear_login(self) -> bool:
        path = self.settings.cli_session_file
        if path.exists():
            path.unlink()
            return True
        return False

    # ========================================
    # Audio playback
    # ========================================

    def play_audio(self, username: str, card_id: str) -> None:
        """Start the configured player on a clip and return immediately."""
        path = self.audio_store.path_for(username, card_id)
        if not path.is_file():
            rprint("[yellow]No audio recorded for this card.[/yellow]")
            return
        command = shlex.split(self.settings.audio_player) + [str(path)]
        try:
            subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            logger.warning(f"Audio player failed to start: {e}")
            rprint(f"[yellow]Could not start audio player:[/yellow] {e}")


def build_context() -> CLIContext:
    """Build CLI context with dependency injection."""
    return CLIContext()
