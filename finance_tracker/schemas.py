"""Pydantic schemas for the request and response payloads."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import EntryType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ORMModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ExpenseCreate(CamelModel):
    """Creation request as sent by the client.

    ``date`` stays a raw string here; it is parsed when the entry is built so
    that every supported format reaches the same parser. Keys not declared
    below, such as a client-asserted owner, are dropped.
    """

    type: str = Field(..., max_length=50)
    category: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    note: Optional[str] = None
    place: Optional[str] = Field(None, max_length=255)
    date: str = Field(..., min_length=1, max_length=50)
    payment_method: Optional[str] = Field(None, max_length=100)
    icon_key: Optional[str] = Field(None, max_length=100)


class ExpenseRead(ORMModel):
    id: int
    owner_id: int
    type: str
    entry_type: EntryType
    category: str
    amount: Decimal
    note: Optional[str] = None
    place: Optional[str] = None
    date: dt.date
    payment_method: Optional[str] = None
    icon_key: Optional[str] = None
