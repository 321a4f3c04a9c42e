"""Password hashing and signed session tokens."""

from lexicards.auth.passwords import hash_password, needs_rehash, verify_password
from lexicards.auth.tokens import create_session_token, verify_session_token

__all__ = [
    "hash_password",
    "verify_password",
    "needs_rehash",
    "create_session_token",
    "verify_session_token",
]
