# src/chore_ledger/tasks/task_api.py

from __future__ import annotations

"""
Framework-free request handlers for the tasks API.

Each handler maps one route of the HTTP contract onto a core call and returns
an ApiResponse(status_code, body). Any web framework can mount these by
translating its request into (path params, query, JSON body).

    GET    tasks?status=&assignedTo=   -> list_tasks
    POST   tasks                       -> create_task
    PATCH  tasks/{id}                  -> update_task
    PATCH  tasks/complete/{id}         -> toggle_task
    DELETE tasks/{id}                  -> delete_task
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..core.codec import draft_from_body, member_to_dict, patch_from_body, task_to_dict
from ..core.models import ALL
from ..core.query import filtered_sorted
from ..core.state import AppState
from ..errors import NotFoundError, StorageUnavailable, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApiResponse:
    status_code: int
    body: Any


def _call(action: str, fn: Callable[[], ApiResponse]) -> ApiResponse:
    try:
        return fn()
    except ValidationError as e:
        logger.info("%s rejected: %s", action, e)
        body = {"message": f"Error {action} (validation failed)", "error": str(e), "errors": e.errors}
        return ApiResponse(400, body)
    except NotFoundError as e:
        logger.info("%s: %s", action, e)
        return ApiResponse(404, {"message": f"{e.kind} not found", "error": str(e)})
    except StorageUnavailable as e:
        logger.exception("%s failed: storage unavailable", action)
        return ApiResponse(503, {"message": f"Error {action} (storage unavailable)", "error": str(e)})


def list_tasks(state: AppState, query: Mapping[str, str] | None = None) -> ApiResponse:
    """
    Filtered list. Pending tasks come first, then by due date.

    Unknown status values match nothing rather than failing.
    """
    query = query or {}
    status = query.get("status") or ALL
    assignee = query.get("assignedTo") or ALL

    def _run() -> ApiResponse:
        tasks = filtered_sorted(state.tasks.list(), status, assignee)
        return ApiResponse(200, [task_to_dict(t) for t in tasks])

    return _call("fetching tasks", _run)


def _require_member(state: AppState, assignee: Any) -> None:
    """An assignee must name a household member. Blank or non-string values are left to the store."""
    if isinstance(assignee, str) and assignee.strip():
        try:
            state.ledger.get(assignee.strip())
        except NotFoundError:
            raise ValidationError({"assignedTo": f"unknown member: {assignee}"}) from None


def create_task(state: AppState, body: Mapping[str, Any]) -> ApiResponse:
    def _run() -> ApiResponse:
        _require_member(state, body.get("assignedTo"))
        task = state.tasks.create(draft_from_body(dict(body)))
        return ApiResponse(201, task_to_dict(task))

    return _call("creating task", _run)


def update_task(state: AppState, task_id: str, body: Mapping[str, Any]) -> ApiResponse:
    def _run() -> ApiResponse:
        if "assignedTo" in body:
            _require_member(state, body["assignedTo"])
        task = state.tasks.update(task_id, patch_from_body(dict(body)))
        return ApiResponse(200, task_to_dict(task))

    return _call("updating task", _run)


def toggle_task(state: AppState, task_id: str) -> ApiResponse:
    def _run() -> ApiResponse:
        result = state.coordinator.toggle_completion(task_id)
        return ApiResponse(
            200,
            {
                "task": task_to_dict(result.task),
                "members": [member_to_dict(m) for m in result.members],
                "ledgerSkipped": result.ledger_skipped,
            },
        )

    return _call("completing task", _run)


def delete_task(state: AppState, task_id: str) -> ApiResponse:
    def _run() -> ApiResponse:
        state.tasks.delete(task_id)
        return ApiResponse(200, {"message": "Task deleted successfully", "id": task_id})

    return _call("deleting task", _run)


def list_members(state: AppState) -> ApiResponse:
    return ApiResponse(200, [member_to_dict(m) for m in state.ledger.list()])
