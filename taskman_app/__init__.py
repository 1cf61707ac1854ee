"""
Task manager Flask application factory.

``create_app`` builds the service: it loads configuration, resolves the
token signing key, constructs the single ``TaskRepository`` and
``CredentialStore`` owned by the app, registers the blueprints and
installs request logging plus JSON error handlers.

Handlers reach the shared state through ``get_repository()`` and
``get_credential_store()`` rather than module globals, so every app
instance (and every test) has its own tasks file and user list.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from flask import Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import get_config, load_signing_key
from .credentials import CredentialStore
from .errors import TaskmanError
from .repository import TaskRepository

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

EXTENSION_KEY = "taskman"


def envelope(
    message: str, data: Any = None, status_code: int = 200, success: bool = True
) -> tuple[Response, int]:
    """
    Build the ``{success, message, data?}`` JSON body every endpoint returns.

    ``data`` is omitted from the body when it is ``None``.
    """
    body: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    return jsonify(body), status_code


def error_envelope(message: str, status_code: int) -> tuple[Response, int]:
    return envelope(message, status_code=status_code, success=False)


def get_repository() -> TaskRepository:
    return current_app.extensions[EXTENSION_KEY]["repository"]


def get_credential_store() -> CredentialStore:
    return current_app.extensions[EXTENSION_KEY]["credentials"]


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(TaskmanError)
    def handle_taskman_error(error: TaskmanError) -> tuple[Response, int]:
        return error_envelope(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException) -> tuple[Response, int]:
        messages = {
            400: "Bad request",
            404: "Resource not found",
            405: "Method not allowed",
        }
        status_code = error.code or 500
        return error_envelope(messages.get(status_code, error.name), status_code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception) -> tuple[Response, int]:
        logger.exception("Unhandled error: %s", error)
        return error_envelope("Internal server error", 500)


def create_app(
    config_name: str | None = None, overrides: Mapping[str, Any] | None = None
) -> Flask:
    """
    Create and configure the task manager application.

    Args:
        config_name: Configuration environment to load (``"development"``,
            ``"testing"``, ``"production"``).  When ``None``, the value is
            read from ``FLASK_ENV``.
        overrides: Extra settings applied after the configuration class,
            e.g. a per-test ``TASKS_FILE``.

    Returns:
        A configured Flask application with its repository loaded from
        disk.

    Raises:
        RuntimeError: No JWT signing key is configured.
    """
    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    if not app.config.get("JWT_SECRET_KEY"):
        app.config["JWT_SECRET_KEY"] = load_signing_key(testing=bool(app.config.get("TESTING")))

    logger.info("Creating task manager app with config: %s", config_class.__name__)

    tasks_file = app.config.get("TASKS_FILE") or os.path.join(app.instance_path, "tasks.json")
    app.config["TASKS_FILE"] = tasks_file

    app.extensions[EXTENSION_KEY] = {
        "repository": TaskRepository(tasks_file),
        "credentials": CredentialStore(app.config["PASSWORD_HASH_METHOD"]),
    }

    @app.before_request
    def log_request() -> None:
        logger.info("%s %s", request.method, request.full_path.rstrip("?"))

    _register_error_handlers(app)

    from .routes.auth import auth_bp
    from .routes.tasks import tasks_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(tasks_bp)

    return app
