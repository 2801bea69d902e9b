# src/chore_ledger/core/codec.py

"""
Dict <-> model conversion.

Uses the camelCase field names of the JSON API and the local-storage
layout (assignedTo, dueDate, createdAt, ...). Shared by the JSON backend and
the request handlers.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from ..errors import ValidationError
from .models import Member, Priority, Task, TaskDraft, TaskStatus

# wire name -> model field name
WIRE_TO_FIELD: dict[str, str] = {
    "_id": "id",
    "id": "id",
    "title": "title",
    "assignedTo": "assigned_to",
    "dueDate": "due_date",
    "priority": "priority",
    "status": "status",
    "points": "points",
    "description": "description",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "completedAt": "completed_at",
}


def task_to_dict(task: Task) -> dict[str, Any]:
    out: dict[str, Any] = {
        "_id": task.id,
        "title": task.title,
        "assignedTo": task.assigned_to,
        "dueDate": task.due_date.isoformat(),
        "priority": task.priority.value,
        "status": task.status.value,
        "points": task.points,
        "description": task.description,
        "createdAt": task.created_at,
        "updatedAt": task.updated_at,
    }
    if task.completed_at is not None:
        out["completedAt"] = task.completed_at
    return out


def task_from_dict(data: dict[str, Any]) -> Task:
    """Rebuild a stored task. Raises ValidationError on a malformed record."""
    try:
        completed_at = data.get("completedAt")
        return Task(
            id=str(data.get("_id") or data["id"]),
            title=str(data["title"]),
            assigned_to=str(data["assignedTo"]),
            due_date=date.fromisoformat(str(data["dueDate"])[:10]),
            points=int(data["points"]),
            priority=Priority(data.get("priority") or Priority.MEDIUM.value),
            status=TaskStatus(data.get("status") or TaskStatus.PENDING.value),
            description=data.get("description"),
            created_at=float(data.get("createdAt") or 0.0),
            updated_at=float(data.get("updatedAt") or 0.0),
            completed_at=float(completed_at) if completed_at is not None else None,
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ValidationError({"task": f"malformed record: {e}"}) from e


def member_to_dict(member: Member) -> dict[str, Any]:
    return {"name": member.name, "points": member.points, "avatar": member.avatar}


def member_from_dict(data: dict[str, Any]) -> Member:
    try:
        return Member(
            name=str(data["name"]),
            points=int(data.get("points") or 0),
            avatar=str(data.get("avatar") or ""),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ValidationError({"member": f"malformed record: {e}"}) from e


def draft_from_body(body: dict[str, Any]) -> TaskDraft:
    """
    Build a TaskDraft from a request body.

    Any status / id / timestamps in the body are ignored: new tasks always
    start Pending with store-assigned identity.
    """
    return TaskDraft(
        title=body.get("title"),
        assigned_to=body.get("assignedTo"),
        due_date=body.get("dueDate"),
        points=body.get("points"),
        priority=body.get("priority") or Priority.MEDIUM,
        description=body.get("description"),
    )


def patch_from_body(body: dict[str, Any]) -> dict[str, Any]:
    """Translate wire names to model field names; unknown keys pass through for validation."""
    return {WIRE_TO_FIELD.get(k, k): v for k, v in body.items()}
