# src/chore_ledger/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the snapshot backend and builds HouseholdState,
- wires TaskStore / MemberLedger / CompletionCoordinator into AppState,
- seeds the default household (and optional demo chores) on first run.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from ..config import get_settings
from ..core.coordinator import CompletionCoordinator
from ..core.models import Member, Priority, TaskDraft
from ..core.ports import SnapshotBackend
from ..core.state import AppState, HouseholdState
from ..members.member_ledger import MemberLedger
from ..storage.json_backend import JsonSnapshotBackend
from ..storage.sqlite_backend import SqliteSnapshotBackend
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.json_path.parent.mkdir(parents=True, exist_ok=True)


def parse_member_spec(raw: str) -> Member:
    """
    "Name:points:avatar" -> Member. points and avatar are optional.

    Raises ValueError on a bad points value.
    """
    parts = [p.strip() for p in raw.split(":", 2)]
    name = parts[0]
    if not name:
        raise ValueError(f"empty member name in {raw!r}")
    points = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    avatar = parts[2] if len(parts) > 2 else ""
    return Member(name=name, points=points, avatar=avatar)


def build_backend(settings) -> SnapshotBackend:
    if settings.storage_backend == "json":
        return JsonSnapshotBackend(settings.json_path)
    return SqliteSnapshotBackend(settings.db_path, timeout=settings.storage_timeout_seconds)


def demo_drafts(today: date) -> list[TaskDraft]:
    """The sample chores the app used to start with, due relative to today."""
    return [
        TaskDraft(
            title="Clean living room",
            assigned_to="Mom",
            due_date=today + timedelta(days=10),
            priority=Priority.HIGH,
            points=30,
            description="Vacuum, dust, and tidy up the sofa.",
        ),
        TaskDraft(
            title="Walk the dog",
            assigned_to="Junior",
            due_date=today,
            priority=Priority.MEDIUM,
            points=10,
            description="Morning walk before 8 AM.",
        ),
        TaskDraft(
            title="Grocery shopping",
            assigned_to="Dad",
            due_date=today + timedelta(days=5),
            priority=Priority.HIGH,
            points=50,
            description="Need milk, eggs, bread, and fruits.",
        ),
        TaskDraft(
            title="Mow the lawn",
            assigned_to="Dad",
            due_date=today + timedelta(days=15),
            priority=Priority.LOW,
            points=20,
            description="Front and backyard.",
        ),
    ]


def seed_household(state: AppState) -> None:
    """First-run seeding: default members if the ledger is empty, demo chores if enabled."""
    settings = state.settings
    members: list[Member] = []
    for raw in getattr(settings, "default_members", []) or []:
        try:
            members.append(parse_member_spec(raw))
        except ValueError:
            logger.warning("Ignoring bad default member spec %r", raw)

    added = state.ledger.ensure_members(members)
    if added:
        logger.info("Seeded %d default members", added)

    if getattr(settings, "seed_demo_data", False) and state.tasks.count() == 0:
        for draft in demo_drafts(date.today()):
            state.tasks.create(draft)
        logger.info("Seeded demo chores")


def create_initial_state(*, settings=None, backend: SnapshotBackend | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the backend injectable makes the app easier to test
    and avoids hidden global state. If settings is None, falls back to
    get_settings().
    """
    if settings is None:
        settings = get_settings()

    if backend is None:
        _ensure_local_dirs(settings)
        backend = build_backend(settings)

    household = HouseholdState(backend)
    state = AppState(
        settings=settings,
        household=household,
        tasks=TaskStore(household),
        ledger=MemberLedger(household),
        coordinator=CompletionCoordinator(household),
    )
    seed_household(state)
    return state
