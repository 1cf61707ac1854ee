"""
Security tests for bearer-token handling at the HTTP boundary.

Every kind of bad token must produce the same 401 body, so a caller
cannot learn whether a token was malformed, forged or merely expired.
Rejected requests must never reach the repository.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from jwt.utils import base64url_encode
import pytest

from taskman_app import create_app
from taskman_app.jwt import create_token

pytestmark = pytest.mark.security

INVALID_BODY = {"success": False, "message": "Invalid or expired token"}


def _claims(user_id: int = 1, username: str = "user_one", **overrides) -> dict:
    now = datetime.now(timezone.utc)
    claims = {
        "user_id": user_id,
        "username": username,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=1)).timestamp()),
    }
    claims.update(overrides)
    return claims


@pytest.fixture
def bad_tokens(secret_key) -> dict[str, str]:
    valid = create_token(user_id=1, username="user_one", secret_key=secret_key, expiry_hours=1)
    header, payload, signature = valid.split(".")
    forged_payload = base64url_encode(
        b'{"user_id":1,"username":"admin","iat":1,"exp":9999999999}'
    ).decode()
    return {
        "expired": create_token(user_id=1, username="user_one", secret_key=secret_key, expiry_hours=-1),
        "forged-payload": ".".join([header, forged_payload, signature]),
        "wrong-secret": jwt.encode(_claims(), "attacker-chosen-secret-with-enough-bytes", algorithm="HS256"),
        "alg-none": jwt.encode(_claims(), None, algorithm="none"),
        "truncated": valid[: len(valid) // 2],
        "garbage": "definitely-not-a-token",
    }


@pytest.mark.parametrize(
    "kind",
    ["expired", "forged-payload", "wrong-secret", "alg-none", "truncated", "garbage"],
)
def test_bad_tokens_share_one_response(client, sample_task, tasks_file, bad_tokens, kind):
    """Every invalid token yields the identical 401 and leaves storage untouched."""
    # Arrange
    before = tasks_file.read_text(encoding="utf-8")

    # Act
    response = client.delete(
        f"/tasks/{sample_task.id}",
        headers={"Authorization": f"Bearer {bad_tokens[kind]}"},
    )

    # Assert
    assert response.status_code == 401
    assert response.get_json() == INVALID_BODY
    assert tasks_file.read_text(encoding="utf-8") == before


def test_token_valid_until_expiry(client, secret_key, sample_task):
    """A token with a short remaining lifetime is still accepted."""
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        _claims(exp=int((now + timedelta(seconds=60)).timestamp())),
        secret_key,
        algorithm="HS256",
    )

    response = client.put(
        f"/tasks/{sample_task.id}",
        json={"status": "completed"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 200


def test_login_token_is_rejected_by_app_with_other_key(client, tmp_path):
    client.post("/auth/register", json={"username": "alice", "password": "secret123"})
    token = client.post(
        "/auth/login", json={"username": "alice", "password": "secret123"}
    ).get_json()["data"]["token"]

    other = create_app(
        "testing",
        overrides={
            "TASKS_FILE": str(tmp_path / "other.json"),
            "JWT_SECRET_KEY": "a-completely-different-signing-secret-0123",
        },
    )
    with other.test_client() as other_client:
        response = other_client.post(
            "/tasks",
            json={"title": "t", "description": "d"},
            headers={"Authorization": f"Bearer {token}"},
        )

    assert response.status_code == 401
    assert response.get_json() == INVALID_BODY
