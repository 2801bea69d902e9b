# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from chore_ledger.core.coordinator import CompletionCoordinator
from chore_ledger.core.models import Member, Snapshot
from chore_ledger.core.state import AppState, HouseholdState
from chore_ledger.members.member_ledger import MemberLedger
from chore_ledger.tasks.task_store import TaskStore

from .fakes import FakeBackend, FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="chores-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_backend="sqlite",
        db_path=tmp_path / "chores.sqlite3",
        json_path=tmp_path / "chores.json",
        storage_timeout_seconds=1.0,
        default_members=["Mom:150:👩", "Dad:100:👨", "Junior:50:👦"],
        seed_demo_data=False,
    )


@pytest.fixture()
def backend() -> FakeBackend:
    members = {
        "Mom": Member("Mom", 150, "👩"),
        "Dad": Member("Dad", 100, "👨"),
        "Junior": Member("Junior", 50, "👦"),
    }
    return FakeBackend(Snapshot(members=members))


@pytest.fixture()
def household(backend: FakeBackend) -> HouseholdState:
    return HouseholdState(backend, clock=FakeClock())


@pytest.fixture()
def state(settings: SimpleNamespace, household: HouseholdState) -> AppState:
    """AppState over the in-memory backend, seeded with Mom / Dad / Junior."""
    return AppState(
        settings=settings,
        household=household,
        tasks=TaskStore(household),
        ledger=MemberLedger(household),
        coordinator=CompletionCoordinator(household),
    )
