"""Expense store and user lookup built on SQLAlchemy sessions.

Every read that serves an authenticated caller takes an owner id. The
unscoped ``list_all_expenses`` and ``list_expenses_by_range`` exist for
administrative tooling only and are not wired to any HTTP route.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models


class EntityNotFoundError(RuntimeError):
    """Raised when an entity cannot be located in the database."""


class EntityConflictError(RuntimeError):
    """Raised when a unique constraint is violated."""


class InvalidRange(ValueError):
    """Raised when a date range starts after it ends."""

    def __init__(self, start: date, end: date) -> None:
        super().__init__(f"Invalid range: start {start.isoformat()} is after end {end.isoformat()}")
        self.start = start
        self.end = end


def _check_range(start: date, end: date) -> None:
    if start > end:
        raise InvalidRange(start, end)


def _newest_first(stmt):
    return stmt.order_by(models.Expense.date.desc(), models.Expense.id.desc())


def get_user(session: Session, user_id: int) -> models.User:
    user = session.get(models.User, user_id)
    if user is None:
        raise EntityNotFoundError(f"User {user_id} not found")
    return user


def get_user_by_username(session: Session, username: str) -> Optional[models.User]:
    stmt = select(models.User).where(models.User.username == username)
    return session.scalars(stmt).first()


def create_user(session: Session, username: str) -> models.User:
    if get_user_by_username(session, username) is not None:
        raise EntityConflictError(f"Username {username!r} is already taken")
    user = models.User(username=username)
    session.add(user)
    try:
        session.flush()
    except IntegrityError as exc:  # pragma: no cover - concurrent insert race
        raise EntityConflictError(f"Username {username!r} is already taken") from exc
    session.refresh(user)
    return user


def save_expense(session: Session, expense: models.Expense) -> models.Expense:
    """Persist ``expense`` and return it with its store-assigned id."""
    session.add(expense)
    session.flush()
    session.refresh(expense)
    return expense


def list_expenses_by_owner(session: Session, owner_id: int) -> List[models.Expense]:
    stmt = select(models.Expense).where(models.Expense.owner_id == owner_id)
    return list(session.scalars(_newest_first(stmt)))


def list_expenses_by_owner_and_range(
    session: Session,
    owner_id: int,
    start: date,
    end: date,
) -> List[models.Expense]:
    """Entries of ``owner_id`` dated within ``[start, end]``, newest first."""
    _check_range(start, end)
    stmt = select(models.Expense).where(
        models.Expense.owner_id == owner_id,
        models.Expense.date >= start,
        models.Expense.date <= end,
    )
    return list(session.scalars(_newest_first(stmt)))


def list_all_expenses(session: Session) -> List[models.Expense]:
    return list(session.scalars(_newest_first(select(models.Expense))))


def list_expenses_by_range(session: Session, start: date, end: date) -> List[models.Expense]:
    _check_range(start, end)
    stmt = select(models.Expense).where(
        models.Expense.date >= start,
        models.Expense.date <= end,
    )
    return list(session.scalars(_newest_first(stmt)))
