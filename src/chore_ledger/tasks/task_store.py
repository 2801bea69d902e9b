# src/chore_ledger/tasks/task_store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Mapping
from functools import partial
from typing import Any

from ..core.models import ALL, Task, TaskDraft, TaskFilter
from ..core.state import HouseholdState
from ..core.transitions import apply_create, apply_delete, apply_update, parse_status
from ..errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _new_task_id() -> str:
    return str(uuid.uuid4())


class TaskStore:
    """
    Task CRUD over the shared HouseholdState.

    Only touches the task half of the snapshot; member balances belong to
    MemberLedger and the completion toggle to CompletionCoordinator.
    """

    def __init__(
        self,
        state: HouseholdState,
        *,
        id_factory: Callable[[], str] = _new_task_id,
    ) -> None:
        self._state = state
        self._id_factory = id_factory

    def get(self, task_id: str) -> Task:
        task = self._state.snapshot().tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def list(self, task_filter: TaskFilter | None = None) -> list[Task]:
        """
        Tasks matching the filter, ordered by due date ascending.

        "All" (the default) disables either filter.
        """
        task_filter = task_filter or TaskFilter()
        status = task_filter.status
        if status != ALL:
            errors: dict[str, str] = {}
            status = parse_status(status, errors)
            if errors:
                raise ValidationError(errors)

        tasks = list(self._state.snapshot().tasks.values())
        if status != ALL:
            tasks = [t for t in tasks if t.status == status]
        if task_filter.assigned_to != ALL:
            tasks = [t for t in tasks if t.assigned_to == task_filter.assigned_to]
        tasks.sort(key=lambda t: t.due_date)
        return tasks

    def create(self, draft: TaskDraft) -> Task:
        task_id = self._id_factory()
        task = self._state.mutate(
            partial(apply_create, draft=draft, task_id=task_id, now=self._state.now())
        )
        logger.info(
            "Task created id=%s assigned_to=%s due=%s points=%s",
            task.id,
            task.assigned_to,
            task.due_date,
            task.points,
        )
        return task

    def update(self, task_id: str, patch: Mapping[str, Any]) -> Task:
        task = self._state.mutate(
            partial(apply_update, task_id=task_id, patch=dict(patch), now=self._state.now())
        )
        logger.info("Task updated id=%s fields=%s", task_id, sorted(patch))
        return task

    def delete(self, task_id: str) -> None:
        self._state.mutate(partial(apply_delete, task_id=task_id))
        logger.info("Task deleted id=%s", task_id)

    def count(self) -> int:
        return len(self._state.snapshot().tasks)
