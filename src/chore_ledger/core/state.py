# src/chore_ledger/core/state.py

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from ..errors import StorageUnavailable
from .models import Snapshot
from .ports import SnapshotBackend

if TYPE_CHECKING:
    from ..members.member_ledger import MemberLedger
    from ..tasks.task_store import TaskStore
    from .coordinator import CompletionCoordinator

logger = logging.getLogger(__name__)

R = TypeVar("R")
Transition = Callable[[Snapshot], tuple[Snapshot, R]]


class HouseholdState:
    """
    Single owner of the current household snapshot.

    Writers go through mutate(): the transition runs under one lock, the
    backend saves the resulting snapshot, and only then does the in-memory
    snapshot swap. A failed save leaves the previous snapshot in place, so a
    caller never observes half of a multi-entity change.

    Readers call snapshot() and get an immutable reference; they never wait
    for the backend.
    """

    def __init__(
        self,
        backend: SnapshotBackend,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self._lock = threading.RLock()
        self._snapshot = backend.load()
        logger.info(
            "HouseholdState ready tasks=%d members=%d",
            len(self._snapshot.tasks),
            len(self._snapshot.members),
        )

    @property
    def backend(self) -> SnapshotBackend:
        return self._backend

    def now(self) -> float:
        return self._clock()

    def snapshot(self) -> Snapshot:
        return self._snapshot

    def mutate(self, transition: Transition[R]) -> R:
        with self._lock:
            current = self._snapshot
            nxt, result = transition(current)
            if nxt is current:
                return result
            try:
                self._backend.save(nxt)
            except StorageUnavailable:
                logger.warning("Snapshot save failed; keeping previous state.")
                raise
            self._snapshot = nxt
            return result

    def reload(self) -> Snapshot:
        """Re-read the backend, dropping the in-memory snapshot."""
        with self._lock:
            self._snapshot = self._backend.load()
            return self._snapshot


@dataclass
class AppState:
    # Settings are kept on the state for easy access by front-ends.
    settings: Any

    household: HouseholdState
    tasks: TaskStore
    ledger: MemberLedger
    coordinator: CompletionCoordinator
