"""
Domain models for the task manager service.

Plain dataclasses replace ORM rows here: the task list is owned by
``TaskRepository`` and the user list by ``CredentialStore``, and both hand
out copies rather than live references.

Key points:
- ``Task.to_dict`` / ``Task.from_dict`` define the JSON shape used both on
  the wire and in the tasks file (camelCase ``createdAt``).
- ``User.to_dict`` deliberately omits ``password_hash``.
- Timestamps are always timezone-aware UTC.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from werkzeug.security import check_password_hash, generate_password_hash


class TaskStatus(str, Enum):
    """Enumeration of possible task statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


class SortOrder(str, Enum):
    """Sort direction for ``createdAt`` when listing tasks."""

    ASC = "asc"
    DESC = "desc"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Normalize datetimes to timezone-aware UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """
    Render a datetime as ISO-8601 UTC with millisecond precision.

    Produces the ``2026-01-15T08:30:00.123Z`` form so clients written
    against JavaScript ``Date.toISOString`` parse it unchanged.
    """
    return ensure_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into a UTC datetime."""
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


@dataclass
class Task:
    """
    A single to-do item.

    Attributes:
        id: Repository-assigned identifier, strictly increasing.
        title: Short title, never blank.
        description: Free-text description, never blank.
        status: Current ``TaskStatus``.
        created_at: Creation time in UTC; never changes after creation.
    """

    id: int
    title: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """
        Build a task from its stored JSON form.

        Raises:
            KeyError: A required key is missing.
            ValueError: ``status`` or ``createdAt`` has an unknown value.
            TypeError: A value has the wrong type.
        """
        task_id = data["id"]
        if not isinstance(task_id, int) or isinstance(task_id, bool):
            raise TypeError(f"task id must be an integer, got {task_id!r}")
        title = data["title"]
        description = data["description"]
        created_at = data["createdAt"]
        if not isinstance(title, str) or not isinstance(description, str):
            raise TypeError("title and description must be strings")
        if not isinstance(created_at, str):
            raise TypeError(f"createdAt must be a string, got {created_at!r}")
        return cls(
            id=task_id,
            title=title,
            description=description,
            status=TaskStatus(data.get("status", TaskStatus.PENDING.value)),
            created_at=parse_timestamp(created_at),
        )

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title}>"


@dataclass
class User:
    """
    A registered identity.

    Passwords are never stored in plain text; only a salted one-way hash
    produced by Werkzeug is kept.
    """

    id: int
    username: str
    password_hash: str = field(default="", repr=False)

    def set_password(self, password: str, method: str) -> None:
        """
        Hash and store a plain-text password.

        Args:
            password: The plain-text password to hash.
            method: Werkzeug method string, including its work factor
                (e.g. ``"pbkdf2:sha256:600000"``).  A random salt is
                generated per call.
        """
        self.password_hash = generate_password_hash(password, method=method)

    def check_password(self, password: str) -> bool:
        """Verify a candidate password against the stored hash."""
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}
