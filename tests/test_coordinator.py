# tests/test_coordinator.py

from __future__ import annotations

import threading

import pytest

from chore_ledger.core.models import TaskDraft, TaskStatus
from chore_ledger.errors import NotFoundError, StorageUnavailable


def _walk_dog(state, **overrides):
    fields = dict(title="Walk dog", assigned_to="Junior", due_date="2025-09-30", points=10)
    fields.update(overrides)
    return state.tasks.create(TaskDraft(**fields))


def test_completing_walk_dog_credits_junior(state) -> None:
    task = _walk_dog(state)

    result = state.coordinator.toggle_completion(task.id)

    assert result.task.status is TaskStatus.COMPLETED
    assert result.task.completed_at is not None
    assert result.task.updated_at >= result.task.completed_at
    assert result.ledger_skipped is False
    assert state.ledger.get("Junior").points == 60
    assert {m.name: m.points for m in result.members} == {"Mom": 150, "Dad": 100, "Junior": 60}


def test_credit_uses_points_after_edit(state) -> None:
    task = _walk_dog(state)
    state.tasks.update(task.id, {"points": 5})

    state.coordinator.toggle_completion(task.id)

    assert state.ledger.get("Junior").points == 55


def test_toggle_twice_restores_status_but_keeps_points(state) -> None:
    task = _walk_dog(state)

    first = state.coordinator.toggle_completion(task.id)
    second = state.coordinator.toggle_completion(task.id)

    assert first.task.status is TaskStatus.COMPLETED
    assert second.task.status is TaskStatus.PENDING
    # Reverting does not debit: the balance stays at the credited value.
    assert state.ledger.get("Junior").points == 60
    # completed_at is left as it was.
    assert second.task.completed_at == first.task.completed_at


def test_toggle_unknown_task_raises_not_found(state) -> None:
    with pytest.raises(NotFoundError):
        state.coordinator.toggle_completion("missing")


def test_unknown_assignee_still_completes(state) -> None:
    task = _walk_dog(state, assigned_to="Grandma")

    result = state.coordinator.toggle_completion(task.id)

    assert result.ledger_skipped is True
    assert result.task.status is TaskStatus.COMPLETED
    assert sum(m.points for m in result.members) == 300


def test_failed_commit_changes_neither_task_nor_balance(state, backend) -> None:
    task = _walk_dog(state)
    backend.fail_saves = True

    with pytest.raises(StorageUnavailable):
        state.coordinator.toggle_completion(task.id)

    assert state.tasks.get(task.id).status is TaskStatus.PENDING
    assert state.ledger.get("Junior").points == 50
    assert backend.stored.tasks[task.id].status is TaskStatus.PENDING

    backend.fail_saves = False
    state.coordinator.toggle_completion(task.id)
    assert state.ledger.get("Junior").points == 60


def test_guarded_complete_is_idempotent(state) -> None:
    task = _walk_dog(state)

    assert state.coordinator.complete(task.id) is not None
    assert state.coordinator.complete(task.id) is None
    assert state.tasks.get(task.id).status is TaskStatus.COMPLETED
    assert state.ledger.get("Junior").points == 60


def test_concurrent_toggles_serialize(state) -> None:
    task = _walk_dog(state)
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        state.coordinator.toggle_completion(task.id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # Eight toggles alternate the status; four of them were Pending -> Completed.
    assert state.tasks.get(task.id).status is TaskStatus.PENDING
    assert state.ledger.get("Junior").points == 50 + 4 * 10


def test_concurrent_guarded_completes_credit_once(state) -> None:
    task = _walk_dog(state)
    barrier = threading.Barrier(6)
    results = []

    def worker() -> None:
        barrier.wait()
        results.append(state.coordinator.complete(task.id))

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(1 for r in results if r is not None) == 1
    assert state.ledger.get("Junior").points == 60
