# src/chore_ledger/errors.py

from __future__ import annotations

"""
Error taxonomy shared by the stores, the coordinator and the gateway.

- ValidationError: malformed or missing fields (caller's fault, 4xx).
- NotFoundError: referenced task id / member name is absent (4xx, never retried).
- StorageUnavailable: transient backend failure (safe to retry with backoff).
"""

from typing import Any


class ChoreLedgerError(Exception):
    """Base class for all errors raised by the core."""


class ValidationError(ChoreLedgerError):
    def __init__(self, errors: dict[str, str], message: str | None = None) -> None:
        self.errors = dict(errors)
        if message is None:
            details = "; ".join(f"{k}: {v}" for k, v in self.errors.items())
            message = f"Validation failed ({details})" if details else "Validation failed"
        super().__init__(message)


class NotFoundError(ChoreLedgerError):
    def __init__(self, kind: str, key: Any) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class StorageUnavailable(ChoreLedgerError):
    """Backend could not load or save a snapshot. The in-memory state is unchanged."""
