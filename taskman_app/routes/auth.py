"""
Registration and login endpoints.

Endpoints:
    POST /auth/register  -- Create a user; returns ``{id, username}``.
    POST /auth/login     -- Exchange credentials for a bearer token.

Both are public.  Login failures always answer ``"Invalid credentials"``
whether the username is unknown or the password is wrong.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, request

from .. import envelope, get_credential_store
from ..jwt import create_token

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple[Response, int]:
    """
    Register a new user account.

    Returns:
        201 with ``{id, username}`` on success.
        400 if either field is missing or the username is taken.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        data = {}

    user = get_credential_store().register(data.get("username"), data.get("password"))
    return envelope("User registered", user.to_dict(), 201)


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple[Response, int]:
    """
    Authenticate a user and issue a token valid for ``JWT_EXPIRY_HOURS``.

    Returns:
        200 with ``{token}`` on success, 401 otherwise.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        data = {}

    user = get_credential_store().verify_credentials(data.get("username"), data.get("password"))
    token = create_token(
        user_id=user.id,
        username=user.username,
        secret_key=current_app.config["JWT_SECRET_KEY"],
        expiry_hours=current_app.config["JWT_EXPIRY_HOURS"],
    )
    logger.info("User %s logged in", user.username)
    return envelope("Login successful", {"token": token})
