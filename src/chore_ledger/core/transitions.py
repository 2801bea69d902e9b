# src/chore_ledger/core/transitions.py

"""
Pure state transitions.

Every function here takes the current Snapshot plus an action and returns the
next Snapshot (and whatever the caller needs to report). Nothing here touches
storage, clocks or locks: ids and timestamps are passed in. HouseholdState
commits the returned snapshot.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from ..errors import NotFoundError, ValidationError
from .models import Member, Priority, Snapshot, Task, TaskDraft, TaskStatus

EDITABLE_FIELDS = frozenset(
    {"title", "assigned_to", "due_date", "priority", "status", "points", "description"}
)
READONLY_FIELDS = frozenset({"id", "created_at", "updated_at", "completed_at"})


@dataclass(frozen=True, slots=True)
class ToggleOutcome:
    task: Task
    previous_status: TaskStatus
    credited: int
    ledger_skipped: bool


# ---- field parsing ----


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_text(value: Any, field_name: str, errors: dict[str, str]) -> str | None:
    if _missing(value):
        errors[field_name] = "is required"
        return None
    if not isinstance(value, str):
        errors[field_name] = "must be a string"
        return None
    return value.strip()


def parse_due_date(value: Any, errors: dict[str, str]) -> date | None:
    if _missing(value):
        errors["due_date"] = "is required"
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            return date.fromisoformat(raw[:10])
        except ValueError:
            errors["due_date"] = f"not an ISO date: {raw!r}"
            return None
    errors["due_date"] = "must be a date"
    return None


def parse_points(value: Any, errors: dict[str, str]) -> int | None:
    if _missing(value):
        errors["points"] = "is required"
        return None
    if isinstance(value, bool):
        errors["points"] = "must be an integer"
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            errors["points"] = "must be an integer"
            return None
    if not isinstance(value, int):
        errors["points"] = "must be an integer"
        return None
    if value < 1:
        errors["points"] = "must be at least 1"
        return None
    return value


def parse_priority(value: Any, errors: dict[str, str]) -> Priority | None:
    if _missing(value):
        return Priority.MEDIUM
    try:
        return Priority(str(value).strip().capitalize())
    except ValueError:
        errors["priority"] = f"must be one of {', '.join(p.value for p in Priority)}"
        return None


def parse_status(value: Any, errors: dict[str, str]) -> TaskStatus | None:
    try:
        return TaskStatus(str(value).strip().capitalize())
    except ValueError:
        errors["status"] = f"must be one of {', '.join(s.value for s in TaskStatus)}"
        return None


def parse_description(value: Any, errors: dict[str, str]) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        errors["description"] = "must be a string"
        return None
    return value.strip() or None


# ---- task transitions ----


def apply_create(
    snapshot: Snapshot, draft: TaskDraft, *, task_id: str, now: float
) -> tuple[Snapshot, Task]:
    errors: dict[str, str] = {}
    title = parse_text(draft.title, "title", errors)
    assigned_to = parse_text(draft.assigned_to, "assigned_to", errors)
    due_date = parse_due_date(draft.due_date, errors)
    points = parse_points(draft.points, errors)
    priority = parse_priority(draft.priority, errors)
    description = parse_description(draft.description, errors)
    if errors:
        raise ValidationError(errors)
    if task_id in snapshot.tasks:
        raise ValidationError({"id": f"already exists: {task_id}"})

    task = Task(
        id=task_id,
        title=title,  # type: ignore[arg-type]
        assigned_to=assigned_to,  # type: ignore[arg-type]
        due_date=due_date,  # type: ignore[arg-type]
        points=points,  # type: ignore[arg-type]
        priority=priority,  # type: ignore[arg-type]
        status=TaskStatus.PENDING,
        description=description,
        created_at=now,
        updated_at=now,
    )
    return snapshot.with_task(task), task


def _get_task(snapshot: Snapshot, task_id: str) -> Task:
    task = snapshot.tasks.get(task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


def apply_update(
    snapshot: Snapshot, task_id: str, patch: Mapping[str, Any], *, now: float
) -> tuple[Snapshot, Task]:
    task = _get_task(snapshot, task_id)

    errors: dict[str, str] = {}
    changes: dict[str, Any] = {}
    for key, value in patch.items():
        if key in READONLY_FIELDS:
            errors[key] = "is not editable"
        elif key not in EDITABLE_FIELDS:
            errors[key] = "unknown field"
        elif key in ("title", "assigned_to"):
            changes[key] = parse_text(value, key, errors)
        elif key == "due_date":
            changes[key] = parse_due_date(value, errors)
        elif key == "points":
            changes[key] = parse_points(value, errors)
        elif key == "priority":
            if _missing(value):
                errors[key] = "is required"
            else:
                changes[key] = parse_priority(value, errors)
        elif key == "status":
            changes[key] = parse_status(value, errors)
        elif key == "description":
            changes[key] = parse_description(value, errors)
    if errors:
        raise ValidationError(errors)

    # A status edit never credits; only the completion toggle does.
    if changes.get("status") is TaskStatus.COMPLETED and task.status is not TaskStatus.COMPLETED:
        changes["completed_at"] = now

    updated = dataclasses.replace(task, **changes, updated_at=now)
    return snapshot.with_task(updated), updated


def apply_delete(snapshot: Snapshot, task_id: str) -> tuple[Snapshot, Task]:
    task = _get_task(snapshot, task_id)
    return snapshot.without_task(task_id), task


# ---- ledger transitions ----


def apply_add_member(
    snapshot: Snapshot, name: Any, *, points: Any = 0, avatar: str = ""
) -> tuple[Snapshot, Member]:
    errors: dict[str, str] = {}
    clean = parse_text(name, "name", errors)
    if clean is not None and clean in snapshot.members:
        errors["name"] = f"already exists: {clean}"
    if isinstance(points, bool) or not isinstance(points, int) or points < 0:
        errors["points"] = "must be a non-negative integer"
    if errors:
        raise ValidationError(errors)

    member = Member(name=clean, points=points, avatar=avatar or "")  # type: ignore[arg-type]
    return snapshot.with_member(member), member


def apply_credit(snapshot: Snapshot, name: str, amount: int) -> tuple[Snapshot, Member]:
    member = snapshot.members.get(name)
    if member is None:
        raise NotFoundError("Member", name)
    credited = dataclasses.replace(member, points=member.points + amount)
    return snapshot.with_member(credited), credited


# ---- completion toggle ----


def apply_toggle(snapshot: Snapshot, task_id: str, *, now: float) -> tuple[Snapshot, ToggleOutcome]:
    """
    Flip a task between Pending and Completed.

    Pending -> Completed stamps completed_at and credits the assignee in the
    same returned snapshot. An unknown assignee skips the credit but the task
    still completes. Completed -> Pending does not debit and keeps the old
    completed_at.
    """
    task = _get_task(snapshot, task_id)
    previous = task.status

    if previous is TaskStatus.COMPLETED:
        reverted = dataclasses.replace(task, status=TaskStatus.PENDING, updated_at=now)
        outcome = ToggleOutcome(reverted, previous, credited=0, ledger_skipped=False)
        return snapshot.with_task(reverted), outcome

    completed = dataclasses.replace(
        task, status=TaskStatus.COMPLETED, completed_at=now, updated_at=now
    )
    nxt = snapshot.with_task(completed)
    try:
        nxt, _member = apply_credit(nxt, task.assigned_to, task.points)
    except NotFoundError:
        outcome = ToggleOutcome(completed, previous, credited=0, ledger_skipped=True)
        return nxt, outcome

    return nxt, ToggleOutcome(completed, previous, credited=task.points, ledger_skipped=False)
