# src/chore_ledger/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps persistence swappable (SQLite, JSON file, in-memory fakes in tests).
"""

from typing import Protocol

from .models import Snapshot


class SnapshotBackend(Protocol):
    """
    Durable home of the household snapshot.

    Implementations must raise StorageUnavailable (not a raw driver error)
    when they cannot complete, and save() must be all-or-nothing.
    """

    def load(self) -> Snapshot: ...
    def save(self, snapshot: Snapshot) -> None: ...
