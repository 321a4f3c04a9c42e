"""Pronunciation clips, one file per card under ``<data_dir>/audio/<username>/``."""
from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from lexicards.storage.errors import AudioNotFoundError, StorageError
from lexicards.storage.user_store import validate_username

_SAFE_ID = str.maketrans({"/": "_", "\\": "_"})


class AudioStore:
    def __init__(self, audio_dir: Path, extension: str = "webm"):
        self.audio_dir = Path(audio_dir)
        self.extension = extension.lstrip(".")

    def path_for(self, username: str, card_id: str) -> Path:
        validate_username(username)
        safe_id = card_id.translate(_SAFE_ID)
        if not safe_id or safe_id.startswith(".") or any(ord(ch) < 32 or ord(ch) == 127 for ch in safe_id):
            raise AudioNotFoundError(f"Invalid card id: {card_id!r}")
        return self.audio_dir / username / f"{safe_id}.{self.extension}"

    def exists(self, username: str, card_id: str) -> bool:
        return self.path_for(username, card_id).is_file()

    def save(self, username: str, card_id: str, data: bytes) -> Path:
        """Store (or overwrite) the clip for a card."""
        path = self.path_for(username, card_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        try:
            tmp.write_bytes(data)
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError(f"Cannot write audio for {card_id}: {e}") from e
        logger.debug(f"Saved {len(data)} bytes of audio for {username}/{card_id}")
        return path

    def load(self, username: str, card_id: str) -> bytes:
        path = self.path_for(username, card_id)
        if not path.is_file():
            raise AudioNotFoundError("Audio not found")
        return path.read_bytes()

    def delete(self, username: str, card_id: str) -> bool:
        """Remove a clip; returns False when there was nothing to remove."""
        path = self.path_for(username, card_id)
        if not path.is_file():
            return False
        path.unlink()
        logger.debug(f"Deleted audio for {username}/{card_id}")
        return True
