"""SQLAlchemy models for the finance tracker backend."""
from __future__ import annotations

import enum
import datetime as dt
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .database import Base


class EntryType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class User(Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)
    username: str = Column(String(100), unique=True, nullable=False, index=True)
    created_at: datetime = Column(DateTime, nullable=False, default=datetime.utcnow)

    expenses = relationship("Expense", back_populates="owner")


class Expense(Base):
    __tablename__ = "expenses"
    __table_args__ = (Index("ix_expenses_user_id_date", "user_id", "date"),)

    id: int = Column(Integer, primary_key=True, index=True)
    # Set once from the resolved session owner, never from the request body.
    owner_id: int = Column("user_id", Integer, ForeignKey("users.id"), nullable=False)
    # Raw client label; entry_type is derived from it.
    type: str = Column(String(50), nullable=False, default="")
    entry_type: EntryType = Column(Enum(EntryType, name="entry_type"), nullable=False)
    category: str = Column(String(100), nullable=False)
    amount: Decimal = Column(Numeric(12, 2), nullable=False)
    note: Optional[str] = Column(Text, nullable=True)
    place: Optional[str] = Column(String(255), nullable=True)
    date: dt.date = Column(Date, nullable=False)
    payment_method: Optional[str] = Column(String(100), nullable=True)
    icon_key: Optional[str] = Column(String(100), nullable=True)
    created_at: datetime = Column(DateTime, nullable=False, default=datetime.utcnow)

    owner = relationship("User", back_populates="expenses")
