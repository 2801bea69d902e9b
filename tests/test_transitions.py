# tests/test_transitions.py

from __future__ import annotations

from datetime import date

import pytest

from chore_ledger.core.models import Member, Priority, Snapshot, TaskDraft, TaskStatus
from chore_ledger.core.transitions import apply_create, apply_toggle, apply_update
from chore_ledger.errors import NotFoundError, ValidationError


def _snapshot() -> Snapshot:
    return Snapshot(members={"Junior": Member("Junior", 50)})


def _draft(**overrides) -> TaskDraft:
    fields = dict(title="Walk dog", assigned_to="Junior", due_date="2025-09-30", points=10)
    fields.update(overrides)
    return TaskDraft(**fields)


def test_create_is_pure_and_forces_pending() -> None:
    before = _snapshot()
    after, task = apply_create(before, _draft(), task_id="t1", now=100.0)

    assert before.tasks == {}
    assert after.tasks["t1"] is task
    assert task.status is TaskStatus.PENDING
    assert task.priority is Priority.MEDIUM
    assert task.due_date == date(2025, 9, 30)
    assert task.created_at == task.updated_at == 100.0
    assert task.completed_at is None


def test_create_collects_field_errors() -> None:
    with pytest.raises(ValidationError) as exc:
        apply_create(_snapshot(), TaskDraft(title="  ", points=0), task_id="t1", now=1.0)

    assert set(exc.value.errors) == {"title", "assigned_to", "due_date", "points"}
    assert exc.value.errors["points"] == "must be at least 1"


@pytest.mark.parametrize("points", [0, -3, "abc", 2.5, True])
def test_create_rejects_bad_points(points) -> None:
    with pytest.raises(ValidationError) as exc:
        apply_create(_snapshot(), _draft(points=points), task_id="t1", now=1.0)
    assert "points" in exc.value.errors


def test_create_rejects_bad_priority_and_date() -> None:
    with pytest.raises(ValidationError) as exc:
        apply_create(
            _snapshot(), _draft(priority="Urgent", due_date="tomorrow"), task_id="t1", now=1.0
        )
    assert set(exc.value.errors) == {"priority", "due_date"}


def test_update_revalidates_and_protects_identity() -> None:
    snap, _ = apply_create(_snapshot(), _draft(), task_id="t1", now=1.0)

    with pytest.raises(ValidationError) as exc:
        apply_update(snap, "t1", {"points": 0, "status": "Done", "id": "x"}, now=2.0)
    assert set(exc.value.errors) == {"points", "status", "id"}

    with pytest.raises(ValidationError):
        apply_update(snap, "t1", {"created_at": 0.0}, now=2.0)

    with pytest.raises(NotFoundError):
        apply_update(snap, "missing", {"title": "x"}, now=2.0)


def test_update_merges_and_stamps() -> None:
    snap, original = apply_create(_snapshot(), _draft(), task_id="t1", now=1.0)
    snap2, updated = apply_update(snap, "t1", {"priority": "high", "description": " yard "}, now=5.0)

    assert updated.priority is Priority.HIGH
    assert updated.description == "yard"
    assert updated.title == original.title
    assert updated.created_at == 1.0
    assert updated.updated_at == 5.0
    assert snap.tasks["t1"] is original


def test_toggle_produces_task_and_credit_in_one_snapshot() -> None:
    snap, _ = apply_create(_snapshot(), _draft(), task_id="t1", now=1.0)
    after, outcome = apply_toggle(snap, "t1", now=9.0)

    assert outcome.previous_status is TaskStatus.PENDING
    assert outcome.credited == 10
    assert after.tasks["t1"].status is TaskStatus.COMPLETED
    assert after.tasks["t1"].completed_at == 9.0
    assert after.members["Junior"].points == 60
    # input snapshot untouched
    assert snap.members["Junior"].points == 50
    assert snap.tasks["t1"].status is TaskStatus.PENDING


def test_toggle_unknown_assignee_skips_credit() -> None:
    snap, _ = apply_create(_snapshot(), _draft(assigned_to="Grandma"), task_id="t1", now=1.0)
    after, outcome = apply_toggle(snap, "t1", now=2.0)

    assert outcome.ledger_skipped is True
    assert after.tasks["t1"].status is TaskStatus.COMPLETED
    assert dict(after.members) == dict(snap.members)


def test_status_edit_to_completed_stamps_completed_at_without_credit() -> None:
    snap, _ = apply_create(_snapshot(), _draft(), task_id="t1", now=1.0)

    after, updated = apply_update(snap, "t1", {"status": "Completed"}, now=7.0)

    assert updated.status is TaskStatus.COMPLETED
    assert updated.completed_at == 7.0
    assert after.members["Junior"].points == 50

    # Editing an already completed task keeps the first completion time.
    _, again = apply_update(after, "t1", {"status": "Completed", "title": "Walk the dog"}, now=9.0)
    assert again.completed_at == 7.0
