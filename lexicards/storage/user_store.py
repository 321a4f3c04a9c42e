"""
User accounts stored in ``<data_dir>/users.json``.

The file holds a list of ``{"username": ..., "password": <hash>}`` objects.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from loguru import logger

from lexicards.auth.passwords import hash_password, needs_rehash, verify_password
from lexicards.storage.errors import (
    InvalidCredentialsError,
    InvalidUsernameError,
    UserExistsError,
)
from lexicards.storage.json_store import JsonFileStore

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_@-][A-Za-z0-9_.@-]{0,63}$")


def validate_username(username: str) -> str:
    """Usernames double as file names, so only a safe alphabet is accepted."""
    if not USERNAME_PATTERN.match(username or ""):
        raise InvalidUsernameError(
            "Username must be 1-64 characters of letters, digits, '.', '_', '-' or '@'"
        )
    return username


class UserStore:
    """Signup and credential checks against the users file."""

    def __init__(self, users_file: Path, hash_iterations: int = 260_000):
        self._file = JsonFileStore(users_file, default=[])
        self.hash_iterations = hash_iterations

    def get(self, username: str) -> Optional[dict]:
        for user in self._file.read():
            if user.get("username") == username:
                return user
        return None

    def exists(self, username: str) -> bool:
        return self.get(username) is not None

    def create(self, username: str, password: str) -> None:
        """
        Register a new user.

        Raises:
            InvalidUsernameError: Username is blank or contains unsafe characters
            ValueError: Password is empty
            UserExistsError: Username is taken
        """
        validate_username(username)
        if not password:
            raise ValueError("Username and password are required")

        with self._file.modify() as users:
            if any(u.get("username") == username for u in users):
                raise UserExistsError("User already exists")
            users.append({"username": username, "password": hash_password(password, self.hash_iterations)})

        logger.info(f"Created user {username}")

    def authenticate(self, username: str, password: str) -> str:
        """
        Verify credentials and return the canonical username.

        Legacy SHA-256 hashes are upgraded in place after a successful check.
        """
        user = self.get(username)
        if user is None or not verify_password(password, user.get("password", "")):
            logger.info(f"Failed login for {username!r}")
            raise InvalidCredentialsError("Invalid credentials")

        if needs_rehash(user["password"]):
            with self._file.modify() as users:
                for stored in users:
                    if stored.get("username") == username:
                        stored["password"] = hash_password(password, self.hash_iterations)
            logger.debug(f"Upgraded password hash for {username}")

        return username
