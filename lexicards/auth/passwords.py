"""
Password hashing.

New hashes come from werkzeug (``pbkdf2:sha256:<iterations>$<salt>$<hex>``).
Bare 64-character hex strings are unsalted SHA-256 digests written by older
versions of the app; they still verify so existing users.json files keep working.
"""
from __future__ import annotations

import hashlib
import hmac
import re

from werkzeug.security import check_password_hash, generate_password_hash

_LEGACY_SHA256 = re.compile(r"^[0-9a-f]{64}$")


def hash_password(password: str, iterations: int = 260_000) -> str:
    """Hash a password for storage."""
    return generate_password_hash(password, method=f"pbkdf2:sha256:{iterations}")


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored hash in either supported format."""
    if _LEGACY_SHA256.match(stored):
        candidate = hashlib.sha256(password.encode("utf-8")).hexdigest()
        return hmac.compare_digest(candidate, stored)

    try:
        return check_password_hash(stored, password)
    except ValueError:
        # unknown hash method or malformed iteration count
        return False


def needs_rehash(stored: str) -> bool:
    """Legacy digests are upgraded on the next successful login."""
    return bool(_LEGACY_SHA256.match(stored))
