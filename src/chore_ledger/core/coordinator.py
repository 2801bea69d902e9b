# src/chore_ledger/core/coordinator.py

"""
Completion coordinator.

The completion toggle is the one operation that changes two entities: the
task's status and the assignee's point balance. Both changes are produced by a
single pure transition (transitions.apply_toggle) and committed through one
HouseholdState.mutate() call, so either both are persisted or neither is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import Member, Snapshot, Task, TaskStatus
from .state import HouseholdState
from .transitions import ToggleOutcome, apply_toggle

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToggleResult:
    task: Task
    members: list[Member]
    ledger_skipped: bool = False


class CompletionCoordinator:
    def __init__(self, state: HouseholdState) -> None:
        self._state = state

    def toggle_completion(self, task_id: str) -> ToggleResult:
        """
        Pending -> Completed (credit assignee) or Completed -> Pending (no debit).

        Raises NotFoundError if the task is absent and StorageUnavailable if the
        commit fails; in the latter case neither the status nor the balance
        changed.
        """
        now = self._state.now()

        def _toggle(snapshot: Snapshot):
            nxt, outcome = apply_toggle(snapshot, task_id, now=now)
            return nxt, (outcome, list(nxt.members.values()))

        outcome, members = self._state.mutate(_toggle)
        self._log_outcome(outcome)
        return ToggleResult(task=outcome.task, members=members, ledger_skipped=outcome.ledger_skipped)

    def complete(self, task_id: str) -> ToggleResult | None:
        """
        Guarded completion: toggle only while the task is still Pending.

        Returns None when it is already Completed. The status check and the
        toggle share one critical section, so a double click credits once.
        """
        now = self._state.now()

        def _complete(snapshot: Snapshot):
            task = snapshot.tasks.get(task_id)
            if task is not None and task.is_completed:
                return snapshot, None
            nxt, outcome = apply_toggle(snapshot, task_id, now=now)
            return nxt, (outcome, list(nxt.members.values()))

        result = self._state.mutate(_complete)
        if result is None:
            logger.debug("Task already completed id=%s; nothing to do", task_id)
            return None
        outcome, members = result
        self._log_outcome(outcome)
        return ToggleResult(task=outcome.task, members=members, ledger_skipped=outcome.ledger_skipped)

    @staticmethod
    def _log_outcome(outcome: ToggleOutcome) -> None:
        task = outcome.task
        if outcome.previous_status is TaskStatus.COMPLETED:
            logger.info("Task reverted to pending id=%s (points kept)", task.id)
        elif outcome.ledger_skipped:
            logger.warning(
                "Task completed id=%s but assignee %r is not in the ledger; credit skipped",
                task.id,
                task.assigned_to,
            )
        else:
            logger.info(
                "Task completed id=%s assigned_to=%s credited=%s",
                task.id,
                task.assigned_to,
                outcome.credited,
            )
