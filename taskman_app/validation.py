"""Payload checks applied to task requests before they reach the repository."""

from __future__ import annotations

from typing import Any

from .errors import InvalidInputError
from .models import TaskStatus

TEXT_FIELDS = ("title", "description")


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_task_data(data: Any, *, creating: bool) -> None:
    """
    Validate a task payload.

    On creation ``title`` and ``description`` must both be present and
    non-blank.  On update they are optional, but a non-null value must
    still be a non-blank string.  A non-null ``status`` must be one of the
    ``TaskStatus`` values in either case.  Fields other than these three
    are ignored.

    Raises:
        InvalidInputError: With the client-facing message for the first
            problem found.
    """
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")

    if creating:
        if any(_is_blank(data.get(field)) for field in TEXT_FIELDS):
            raise InvalidInputError("Title and description are required")
    else:
        for field in TEXT_FIELDS:
            value = data.get(field)
            if value is not None and _is_blank(value):
                raise InvalidInputError(f"'{field}' must be a non-empty string")

    status = data.get("status")
    if status is not None and status not in TaskStatus.values():
        raise InvalidInputError(
            f"Invalid status. Allowed: {', '.join(TaskStatus.values())}"
        )
