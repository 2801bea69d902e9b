# src/chore_ledger/core/models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from types import MappingProxyType
from typing import Any

ALL = "All"


class TaskStatus(StrEnum):
    """Completion status. The only allowed transition is a toggle between the two."""

    PENDING = "Pending"
    COMPLETED = "Completed"

    def toggled(self) -> TaskStatus:
        return TaskStatus.COMPLETED if self is TaskStatus.PENDING else TaskStatus.PENDING


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    assigned_to: str
    due_date: date
    points: int

    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    description: str | None = None

    created_at: float = 0.0
    updated_at: float = 0.0
    completed_at: float | None = None

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED


@dataclass(frozen=True, slots=True)
class Member:
    name: str
    points: int = 0
    avatar: str = ""


@dataclass(frozen=True, slots=True)
class TaskDraft:
    """
    Input for TaskStore.create.

    Fields are loosely typed on purpose: the store validates them and raises
    ValidationError with per-field messages.
    """

    title: Any = None
    assigned_to: Any = None
    due_date: Any = None
    points: Any = None
    priority: Any = Priority.MEDIUM
    description: Any = None


@dataclass(frozen=True, slots=True)
class TaskFilter:
    status: TaskStatus | str = ALL
    assigned_to: str = ALL


def _freeze(d: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(d))


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Immutable view of the whole household at one instant.

    tasks are keyed by task id, members by member name.
    """

    tasks: Mapping[str, Task] = field(default_factory=dict)
    members: Mapping[str, Member] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tasks", _freeze(self.tasks))
        object.__setattr__(self, "members", _freeze(self.members))

    def with_task(self, task: Task) -> Snapshot:
        tasks = dict(self.tasks)
        tasks[task.id] = task
        return Snapshot(tasks=tasks, members=self.members)

    def without_task(self, task_id: str) -> Snapshot:
        tasks = dict(self.tasks)
        tasks.pop(task_id, None)
        return Snapshot(tasks=tasks, members=self.members)

    def with_member(self, member: Member) -> Snapshot:
        members = dict(self.members)
        members[member.name] = member
        return Snapshot(tasks=self.tasks, members=members)
