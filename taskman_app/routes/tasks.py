"""
Task endpoints.

Reads are public; every mutation goes through ``require_auth`` first and
then ``validate_task_data`` before touching the repository.

Endpoints:
    GET    /health          - Service health check
    GET    /tasks           - List tasks (``status`` filter, ``sort=asc|desc``)
    GET    /tasks/<id>      - Get a single task
    POST   /tasks           - Create a task (auth)
    PUT    /tasks/<id>      - Partially update a task (auth)
    DELETE /tasks/<id>      - Delete a task (auth)
"""

from __future__ import annotations

import logging
import os

from flask import Blueprint, Response, g, request

from .. import envelope, get_repository
from ..auth import require_auth
from ..validation import validate_task_data

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__)


@tasks_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """Health check endpoint for deployment verification."""
    return envelope("Service is healthy", {
        "status": "healthy",
        "environment": os.getenv("ENVIRONMENT", "unknown"),
        "tasks": len(get_repository()),
    })


@tasks_bp.route("/tasks", methods=["GET"])
def get_tasks() -> tuple[Response, int]:
    """
    List tasks.

    Query Parameters:
        status: Exact status match (pending, in-progress, completed)
        sort: ``asc`` or ``desc`` by creation time; otherwise insertion order
    """
    tasks = get_repository().list(
        status=request.args.get("status"),
        sort=request.args.get("sort"),
    )
    return envelope("Tasks retrieved successfully", [task.to_dict() for task in tasks])


@tasks_bp.route("/tasks/<int:task_id>", methods=["GET"])
def get_task(task_id: int) -> tuple[Response, int]:
    task = get_repository().get(task_id)
    return envelope("Task retrieved successfully", task.to_dict())


@tasks_bp.route("/tasks", methods=["POST"])
@require_auth
def create_task() -> tuple[Response, int]:
    """
    Create a new task.

    Request Body (JSON):
        title: Task title (required)
        description: Task description (required)
        status: Task status (optional, default: pending)
    """
    data = request.get_json(silent=True)
    validate_task_data(data, creating=True)

    task = get_repository().create(
        title=data["title"],
        description=data["description"],
        status=data.get("status"),
    )
    logger.info("Task %s created by user %s", task.id, g.username)
    return envelope("Task created successfully", task.to_dict(), 201)


@tasks_bp.route("/tasks/<int:task_id>", methods=["PUT"])
@require_auth
def update_task(task_id: int) -> tuple[Response, int]:
    """
    Update an existing task.

    Only fields present and non-null in the body change; ``id`` and
    ``createdAt`` in the body are ignored.  A missing body changes nothing.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    validate_task_data(data, creating=False)

    task = get_repository().update(
        task_id,
        title=data.get("title"),
        description=data.get("description"),
        status=data.get("status"),
    )
    logger.info("Task %s updated by user %s", task_id, g.username)
    return envelope("Task updated successfully", task.to_dict())


@tasks_bp.route("/tasks/<int:task_id>", methods=["DELETE"])
@require_auth
def delete_task(task_id: int) -> tuple[Response, int]:
    task = get_repository().delete(task_id)
    logger.info("Task %s deleted by user %s", task_id, g.username)
    return envelope("Task deleted successfully", task.to_dict())
