"""Signed, timestamped session tokens used for the cookie and the CLI session file."""
from __future__ import annotations

from itsdangerous import BadSignature, URLSafeTimedSerializer

TOKEN_SALT = "lexicards-session"


def _serializer(secret: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret, salt=TOKEN_SALT)


def create_session_token(username: str, secret: str) -> str:
    return _serializer(secret).dumps(username)


def verify_session_token(token: str | None, secret: str, max_age: int | None = None) -> str | None:
    """Return the username a token was issued for, or None if it is missing, forged or expired."""
    if not token:
        return None
    try:
        username = _serializer(secret).loads(token, max_age=max_age)
    except BadSignature:
        return None
    if not isinstance(username, str) or not username:
        return None
    return username
