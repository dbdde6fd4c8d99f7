"""Turn validated creation requests into owned expense records."""
from __future__ import annotations

from decimal import Decimal
from typing import Final

from . import dates, models, schemas

INCOME_LABEL: Final[str] = "รายได้"
EXPENSE_LABEL: Final[str] = "ค่าใช้จ่าย"


def resolve_entry_type(label: str | None) -> models.EntryType:
    """Map a free-text type label to an entry type.

    Only the exact income label yields ``INCOME``; every other value,
    unknown labels included, is an ``EXPENSE``.
    """
    if label == INCOME_LABEL:
        return models.EntryType.INCOME
    return models.EntryType.EXPENSE


def build_expense(expense_in: schemas.ExpenseCreate, owner: models.User) -> models.Expense:
    """Build an unsaved expense owned by ``owner``.

    Raises :class:`finance_tracker.dates.InvalidDateFormat` when the request
    date matches no supported format.
    """
    return models.Expense(
        owner_id=owner.id,
        type=expense_in.type,
        entry_type=resolve_entry_type(expense_in.type),
        category=expense_in.category,
        amount=Decimal(expense_in.amount),
        note=expense_in.note,
        place=expense_in.place,
        date=dates.parse_date(expense_in.date),
        payment_method=expense_in.payment_method,
        icon_key=expense_in.icon_key,
    )
