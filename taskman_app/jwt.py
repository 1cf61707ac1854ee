"""
Bearer tokens for the task API.

The process that issues a token is the one that checks it, so tokens are
signed with one symmetric secret (HS256) taken from ``JWT_SECRET_KEY``.
Nothing is stored server-side; a token is good until its ``exp``.

Claims: ``user_id`` (int), ``username`` (str), ``iat`` and ``exp`` (epoch
seconds, UTC).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from .errors import InvalidOrExpiredTokenError

SIGNING_ALGORITHM = "HS256"
IDENTITY_CLAIMS = ("user_id", "username")
TIME_CLAIMS = ("iat", "exp")


def _valid_identity(user_id: Any, username: Any) -> bool:
    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
        return False
    return isinstance(username, str) and bool(username.strip())


def create_token(
    user_id: int,
    username: str,
    secret_key: str,
    expiry_hours: int | float,
    issued_at: datetime | None = None,
) -> str:
    """
    Sign a token for ``username`` that lapses ``expiry_hours`` after issue.

    ``issued_at`` defaults to now.  Raises ``ValueError`` for a non-positive
    id or a blank username; such a token could never pass ``verify_token``.
    """
    if not _valid_identity(user_id, username):
        raise ValueError(f"cannot issue a token for user {user_id!r}/{username!r}")

    issued_at = issued_at or datetime.now(timezone.utc)
    lifetime = timedelta(hours=expiry_hours)
    claims = dict(zip(IDENTITY_CLAIMS, (user_id, username)))
    claims["iat"] = int(issued_at.timestamp())
    claims["exp"] = int((issued_at + lifetime).timestamp())
    return jwt.encode(claims, secret_key, algorithm=SIGNING_ALGORITHM)


def verify_token(token: str, secret_key: str, leeway: int = 0) -> dict[str, Any]:
    """
    Return the claims of a token signed by ``create_token``.

    Signature, algorithm, expiry (with ``leeway`` seconds of skew), the
    presence of all four claims and the identity claim types are checked.
    Every failure raises the same ``InvalidOrExpiredTokenError``.
    """
    try:
        claims = jwt.decode(
            token,
            secret_key,
            algorithms=[SIGNING_ALGORITHM],
            options={"require": [*IDENTITY_CLAIMS, *TIME_CLAIMS]},
            leeway=leeway,
        )
    except jwt.InvalidTokenError as exc:
        raise InvalidOrExpiredTokenError() from exc

    if not _valid_identity(claims.get("user_id"), claims.get("username")):
        raise InvalidOrExpiredTokenError()
    return claims
