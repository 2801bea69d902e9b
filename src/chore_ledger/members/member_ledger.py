# src/chore_ledger/members/member_ledger.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import partial

from ..core.models import Member
from ..core.state import HouseholdState
from ..core.transitions import apply_add_member, apply_credit
from ..errors import NotFoundError

logger = logging.getLogger(__name__)


class MemberLedger:
    """Member records and their point balances."""

    def __init__(self, state: HouseholdState) -> None:
        self._state = state

    def list(self) -> list[Member]:
        return list(self._state.snapshot().members.values())

    def get(self, name: str) -> Member:
        member = self._state.snapshot().members.get(name)
        if member is None:
            raise NotFoundError("Member", name)
        return member

    def add_member(self, name: str, points: int = 0, avatar: str = "") -> Member:
        member = self._state.mutate(
            partial(apply_add_member, name=name, points=points, avatar=avatar)
        )
        logger.info("Member added name=%s points=%s", member.name, member.points)
        return member

    def credit_points(self, name: str, amount: int) -> Member:
        """
        Add amount to a member's balance.

        Raises NotFoundError for an unknown member. The completion toggle does
        not go through here: it credits inside its own transition so the task
        and the balance commit together.
        """
        member = self._state.mutate(partial(apply_credit, name=name, amount=amount))
        logger.info("Points credited name=%s amount=%s balance=%s", name, amount, member.points)
        return member

    def ensure_members(self, members: Iterable[Member]) -> int:
        """Add the given members if the ledger is empty. Returns how many were added."""
        if self._state.snapshot().members:
            return 0
        added = 0
        for m in members:
            self.add_member(m.name, points=m.points, avatar=m.avatar)
            added += 1
        return added
