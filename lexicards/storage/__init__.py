"""
Flat-file storage for users, cards and audio clips.

Layout under the configured data directory:
- users.json
- cards/<username>.json
- audio/<username>/<card_id>.<ext>
"""

from lexicards.storage.audio_store import AudioStore
from lexicards.storage.card_store import CardStore
from lexicards.storage.errors import (
    AudioNotFoundError,
    CardNotFoundError,
    InvalidCredentialsError,
    InvalidUsernameError,
    StorageError,
    UserExistsError,
)
from lexicards.storage.user_store import UserStore, validate_username

__all__ = [
    "AudioStore",
    "CardStore",
    "UserStore",
    "validate_username",
    "StorageError",
    "InvalidUsernameError",
    "UserExistsError",
    "InvalidCredentialsError",
    "CardNotFoundError",
    "AudioNotFoundError",
]
