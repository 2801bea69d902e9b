# tests/test_member_ledger.py

from __future__ import annotations

import pytest

from chore_ledger.errors import NotFoundError, ValidationError


def test_credit_points_adds_to_balance(state) -> None:
    member = state.ledger.credit_points("Dad", 15)
    assert member.points == 115
    assert state.ledger.get("Dad").points == 115


def test_credit_unknown_member_raises(state, backend) -> None:
    with pytest.raises(NotFoundError) as exc:
        state.ledger.credit_points("Grandma", 5)
    assert exc.value.kind == "Member"
    assert backend.saves == []


def test_add_member_validates(state) -> None:
    state.ledger.add_member("Grandma", points=5, avatar="👵")
    assert [m.name for m in state.ledger.list()] == ["Mom", "Dad", "Junior", "Grandma"]

    with pytest.raises(ValidationError):
        state.ledger.add_member("Mom")
    with pytest.raises(ValidationError):
        state.ledger.add_member("  ")
    with pytest.raises(ValidationError):
        state.ledger.add_member("Kid", points=-1)


def test_ensure_members_only_fills_an_empty_ledger(state) -> None:
    assert state.ledger.ensure_members(state.ledger.list()) == 0
