"""Tests for the expense store and user lookup."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from finance_tracker import crud, models


def _add(session, owner, day: date, amount: str = "10.00", category: str = "Food") -> models.Expense:
    expense = models.Expense(
        owner_id=owner.id,
        entry_type=models.EntryType.EXPENSE,
        category=category,
        amount=Decimal(amount),
        date=day,
    )
    return crud.save_expense(session, expense)


def test_save_assigns_unique_ids(db_session, alice) -> None:
    first = _add(db_session, alice, date(2025, 9, 1))
    second = _add(db_session, alice, date(2025, 9, 1))
    assert first.id is not None
    assert second.id is not None
    assert first.id != second.id


def test_list_by_owner_is_scoped_and_newest_first(db_session, alice, bob) -> None:
    old = _add(db_session, alice, date(2025, 1, 5))
    new = _add(db_session, alice, date(2025, 3, 1))
    _add(db_session, bob, date(2025, 2, 1))

    rows = crud.list_expenses_by_owner(db_session, alice.id)

    assert [row.id for row in rows] == [new.id, old.id]
    assert all(row.owner_id == alice.id for row in rows)


def test_equal_dates_order_by_id_descending(db_session, alice) -> None:
    first = _add(db_session, alice, date(2025, 5, 5))
    second = _add(db_session, alice, date(2025, 5, 5))
    third = _add(db_session, alice, date(2025, 5, 5))

    rows = crud.list_expenses_by_owner(db_session, alice.id)
    assert [row.id for row in rows] == [third.id, second.id, first.id]


def test_range_is_inclusive_on_both_ends(db_session, alice, bob) -> None:
    _add(db_session, alice, date(2025, 8, 31))
    start = _add(db_session, alice, date(2025, 9, 1))
    middle = _add(db_session, alice, date(2025, 9, 15))
    end = _add(db_session, alice, date(2025, 9, 30))
    _add(db_session, alice, date(2025, 10, 1))
    _add(db_session, bob, date(2025, 9, 15))

    rows = crud.list_expenses_by_owner_and_range(db_session, alice.id, date(2025, 9, 1), date(2025, 9, 30))

    assert [row.id for row in rows] == [end.id, middle.id, start.id]


def test_single_day_range(db_session, alice) -> None:
    hit = _add(db_session, alice, date(2025, 9, 8))
    _add(db_session, alice, date(2025, 9, 9))

    rows = crud.list_expenses_by_owner_and_range(db_session, alice.id, date(2025, 9, 8), date(2025, 9, 8))
    assert [row.id for row in rows] == [hit.id]


def test_reversed_range_raises(db_session, alice) -> None:
    with pytest.raises(crud.InvalidRange):
        crud.list_expenses_by_owner_and_range(db_session, alice.id, date(2025, 9, 30), date(2025, 9, 1))
    with pytest.raises(crud.InvalidRange):
        crud.list_expenses_by_range(db_session, date(2025, 9, 30), date(2025, 9, 1))


def test_unscoped_listing_spans_owners(db_session, alice, bob) -> None:
    a = _add(db_session, alice, date(2025, 9, 1))
    b = _add(db_session, bob, date(2025, 9, 2))

    assert [row.id for row in crud.list_all_expenses(db_session)] == [b.id, a.id]
    ranged = crud.list_expenses_by_range(db_session, date(2025, 9, 2), date(2025, 9, 30))
    assert [row.id for row in ranged] == [b.id]


def test_user_lookup(db_session, alice) -> None:
    assert crud.get_user_by_username(db_session, "alice").id == alice.id
    assert crud.get_user_by_username(db_session, "nobody") is None
    assert crud.get_user(db_session, alice.id).username == "alice"
    with pytest.raises(crud.EntityNotFoundError):
        crud.get_user(db_session, alice.id + 1000)


def test_duplicate_username_conflicts(db_session, alice) -> None:
    with pytest.raises(crud.EntityConflictError):
        crud.create_user(db_session, "alice")
