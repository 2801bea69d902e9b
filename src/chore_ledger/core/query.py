# src/chore_ledger/core/query.py

"""Read-only views over a snapshot: filtering, ordering, counts."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .models import ALL, Member, Task, TaskStatus

STATUS_OPTIONS: tuple[str, ...] = (ALL, TaskStatus.PENDING.value, TaskStatus.COMPLETED.value)


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    pending: int
    completed: int


def _sort_key(task: Task) -> tuple[int, object]:
    return (0 if task.status is TaskStatus.PENDING else 1, task.due_date)


def filtered_sorted(
    tasks: Iterable[Task],
    status_filter: str = ALL,
    assignee_filter: str = ALL,
) -> list[Task]:
    """
    Apply the status filter, then the assignee filter, then order:
    Pending before Completed, each bucket by due date ascending.
    sorted() is stable, so equal keys keep their input order.
    """
    out = list(tasks)
    if status_filter != ALL:
        out = [t for t in out if t.status == status_filter]
    if assignee_filter != ALL:
        out = [t for t in out if t.assigned_to == assignee_filter]
    return sorted(out, key=_sort_key)


def stats(tasks: Iterable[Task]) -> TaskStats:
    items = list(tasks)
    total = len(items)
    completed = sum(1 for t in items if t.status is TaskStatus.COMPLETED)
    return TaskStats(total=total, pending=total - completed, completed=completed)


def total_points(members: Iterable[Member]) -> int:
    return sum(m.points for m in members)


def assignee_options(members: Iterable[Member]) -> list[str]:
    return [ALL, *(m.name for m in members)]
