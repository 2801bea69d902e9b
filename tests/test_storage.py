# tests/test_storage.py

from __future__ import annotations

import json
import sqlite3
from datetime import date
from pathlib import Path

import pytest

from chore_ledger.core.models import Member, Priority, Snapshot, Task, TaskStatus
from chore_ledger.core.state import HouseholdState
from chore_ledger.errors import StorageUnavailable
from chore_ledger.storage.json_backend import JsonSnapshotBackend
from chore_ledger.storage.sqlite_backend import SqliteSnapshotBackend


def _sample() -> Snapshot:
    task = Task(
        id="t1",
        title="Grocery shopping",
        assigned_to="Dad",
        due_date=date(2025, 10, 5),
        points=50,
        priority=Priority.HIGH,
        status=TaskStatus.COMPLETED,
        description="Need milk, eggs, bread, and fruits.",
        created_at=10.0,
        updated_at=20.0,
        completed_at=20.0,
    )
    return Snapshot(tasks={"t1": task}, members={"Dad": Member("Dad", 150, "👨")})


def test_sqlite_backend_persists_across_instances(tmp_path: Path) -> None:
    db = tmp_path / "chores.sqlite3"
    SqliteSnapshotBackend(db).save(_sample())

    loaded = SqliteSnapshotBackend(db).load()
    assert dict(loaded.tasks) == dict(_sample().tasks)
    assert dict(loaded.members) == dict(_sample().members)


def test_sqlite_save_replaces_previous_snapshot(tmp_path: Path) -> None:
    backend = SqliteSnapshotBackend(tmp_path / "chores.sqlite3")
    backend.save(_sample())
    backend.save(Snapshot(members={"Mom": Member("Mom", 1)}))

    loaded = backend.load()
    assert dict(loaded.tasks) == {}
    assert list(loaded.members) == ["Mom"]


def test_sqlite_unusable_path_raises_storage_unavailable(tmp_path: Path) -> None:
    # A directory where the database file should be.
    target = tmp_path / "db"
    target.mkdir()
    with pytest.raises(StorageUnavailable):
        SqliteSnapshotBackend(target)


def test_json_backend_layout_and_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "chores.json"
    JsonSnapshotBackend(path).save(_sample())

    data = json.loads(path.read_text("utf-8"))
    assert data["members"] == [{"name": "Dad", "points": 150, "avatar": "👨"}]
    assert data["tasks"][0]["assignedTo"] == "Dad"
    assert data["tasks"][0]["dueDate"] == "2025-10-05"
    assert data["tasks"][0]["status"] == "Completed"

    loaded = JsonSnapshotBackend(path).load()
    assert dict(loaded.tasks) == dict(_sample().tasks)


def test_json_backend_missing_or_empty_file_is_empty_snapshot(tmp_path: Path) -> None:
    path = tmp_path / "chores.json"
    assert dict(JsonSnapshotBackend(path).load().tasks) == {}
    path.write_text("", "utf-8")
    assert dict(JsonSnapshotBackend(path).load().tasks) == {}


def test_json_backend_corrupt_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "chores.json"
    path.write_text("{not json", "utf-8")
    with pytest.raises(StorageUnavailable):
        JsonSnapshotBackend(path).load()

    path.write_text(json.dumps({"tasks": [{"title": "no id"}]}), "utf-8")
    with pytest.raises(StorageUnavailable):
        JsonSnapshotBackend(path).load()


def test_household_state_reloads_what_it_saved(tmp_path: Path) -> None:
    backend = SqliteSnapshotBackend(tmp_path / "chores.sqlite3")
    household = HouseholdState(backend)
    household.mutate(lambda snap: (snap.with_member(Member("Mom", 150)), None))

    assert list(HouseholdState(backend).snapshot().members) == ["Mom"]


def test_json_backend_non_list_sections_raise(tmp_path: Path) -> None:
    path = tmp_path / "chores.json"
    path.write_text(json.dumps({"tasks": "oops", "members": []}), encoding="utf-8")
    with pytest.raises(StorageUnavailable):
        JsonSnapshotBackend(path).load()


def test_json_backend_non_object_task_record_raises(tmp_path: Path) -> None:
    path = tmp_path / "chores.json"
    path.write_text(json.dumps({"tasks": ["oops"], "members": []}), encoding="utf-8")
    with pytest.raises(StorageUnavailable):
        JsonSnapshotBackend(path).load()


def test_sqlite_corrupt_row_raises_storage_unavailable(tmp_path: Path) -> None:
    db = tmp_path / "chores.sqlite3"
    backend = SqliteSnapshotBackend(db)
    backend.save(_sample())

    conn = sqlite3.connect(db)
    try:
        conn.execute("UPDATE tasks SET due_date = 'someday', status = 'Finished' WHERE id = 't1'")
        conn.commit()
    finally:
        conn.close()

    with pytest.raises(StorageUnavailable):
        backend.load()
