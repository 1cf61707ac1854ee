"""
Bearer-token guard for mutating endpoints.

``require_auth`` extracts ``Authorization: Bearer <token>``, verifies it
with the process-wide signing key and stores the caller's identity on
``flask.g`` (``g.user_id``, ``g.username``).  Failures short-circuit the
request with a 401 before the view runs, which means before any payload
validation or repository access.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from flask import current_app, g, request

from .errors import MissingTokenError
from .jwt import verify_token


def extract_bearer_token() -> str | None:
    """Return the token from the current request, or ``None`` if absent."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header[7:].strip()
    return token or None


def require_auth(view_func: Callable):
    """
    Decorator that enforces Bearer-token authentication on a view.

    Raises:
        MissingTokenError: No header, wrong scheme or empty token.
        InvalidOrExpiredTokenError: Verification failed.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        token = extract_bearer_token()
        if token is None:
            raise MissingTokenError()

        payload = verify_token(
            token,
            current_app.config["JWT_SECRET_KEY"],
            leeway=int(current_app.config.get("JWT_CLOCK_SKEW_SECONDS", 0)),
        )

        # Authorization is all-or-nothing; the identity is recorded for
        # logging but no view scopes data by it.
        g.user_id = payload["user_id"]
        g.username = payload["username"]
        return view_func(*args, **kwargs)

    return wrapper
