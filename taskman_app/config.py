"""
Configuration classes for the task manager service.

A shared ``Config`` base class holds defaults and environment-specific
subclasses override only what differs.  ``get_config`` resolves the
class at runtime from an explicit name or the ``FLASK_ENV`` variable.

The JWT signing key is deliberately *not* a class attribute: it is
resolved once by ``load_signing_key`` inside the application factory,
and a missing key aborts startup instead of falling back to a
well-known default.
"""

from __future__ import annotations

import os
from pathlib import Path


def _load_key(raw_env_var: str, path_env_var: str) -> str:
    """
    Load a signing secret from a raw environment variable or a file path.

    The raw variable takes precedence over the path variable so
    orchestrators can inject secrets directly without mounting files.
    """
    raw_key = os.environ.get(raw_env_var, "").strip()
    if raw_key:
        return raw_key

    key_path = os.environ.get(path_env_var, "").strip()
    if key_path:
        try:
            key = Path(key_path).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise RuntimeError(
                f"Unable to read JWT secret file at '{key_path}' from {path_env_var}."
            ) from exc
        if key:
            return key
        raise RuntimeError(f"JWT secret file at '{key_path}' is empty.")

    raise RuntimeError(
        f"Missing JWT secret configuration: set {raw_env_var} or {path_env_var}."
    )


def _has_key_source(raw_env_var: str, path_env_var: str) -> bool:
    """Return True when at least one key source variable is configured."""
    return bool(
        os.environ.get(raw_env_var, "").strip()
        or os.environ.get(path_env_var, "").strip()
    )


def load_signing_key(*, testing: bool) -> str:
    """
    Resolve the HS256 token signing key for the selected environment.

    In testing mode the ``TEST_*`` variables win when configured; otherwise
    the standard ``JWT_SECRET_KEY`` / ``JWT_SECRET_KEY_PATH`` pair is used.

    Raises:
        RuntimeError: If no key source is configured or the key file
            cannot be read.
    """
    if testing and _has_key_source("TEST_JWT_SECRET_KEY", "TEST_JWT_SECRET_KEY_PATH"):
        return _load_key("TEST_JWT_SECRET_KEY", "TEST_JWT_SECRET_KEY_PATH")
    return _load_key("JWT_SECRET_KEY", "JWT_SECRET_KEY_PATH")


class Config:
    """
    Base configuration shared by all environments.

    Attributes:
        TASKS_FILE: Path of the JSON document holding the task list.  When
            empty, the application factory uses ``<instance>/tasks.json``.
        JWT_EXPIRY_HOURS: Lifetime of an issued bearer token.
        JWT_CLOCK_SKEW_SECONDS: Tolerance applied to ``exp`` on verification.
            Issuer and verifier are the same process, so the default is 0.
        PASSWORD_HASH_METHOD: Werkzeug hash method string including its
            work factor.  Fixed per deployment.
        PORT: Port used by ``wsgi.py`` when run directly.
    """

    TASKS_FILE: str = os.environ.get("TASKS_FILE", "")

    JWT_EXPIRY_HOURS: int = int(os.environ.get("JWT_EXPIRY_HOURS", "2"))
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("JWT_CLOCK_SKEW_SECONDS", "0"))

    PASSWORD_HASH_METHOD: str = os.environ.get(
        "PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000"
    )

    PORT: int = int(os.environ.get("PORT", "5000"))


class DevelopmentConfig(Config):
    """Local development: debug mode on, testing flag off."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Configuration for the automated test suite.

    Uses a separate tasks file so test runs never touch development data,
    and a cheap hash work factor so registration-heavy tests stay fast.
    """

    DEBUG: bool = True
    TESTING: bool = True
    TASKS_FILE: str = os.environ.get("TEST_TASKS_FILE", "")
    PASSWORD_HASH_METHOD: str = "pbkdf2:sha256:1000"


class ProductionConfig(Config):
    """Production deployments: no debug, secrets only from the environment."""

    DEBUG: bool = False
    TESTING: bool = False


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Resolve a configuration class by environment name.

    Args:
        env: One of ``"development"``, ``"testing"``, or ``"production"``.
            When ``None``, the ``FLASK_ENV`` environment variable is
            consulted, falling back to ``"development"``.

    Returns:
        The configuration class (not an instance).  Unrecognised names
        resolve to ``DevelopmentConfig``.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
