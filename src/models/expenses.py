"""
Expense tracking entities: transactions, categories, cards and budgets.
"""

from typing import Any, Optional

from sqlalchemy import Boolean, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, JSONType
from src.models.mixins import OwnedMixin, TimestampMixin


class ExpenseTransaction(Base, TimestampMixin, OwnedMixin):
    """
    Income or expense line.

    ``amount_in_global_currency`` and ``exchange_rate`` record the
    conversion applied when the transaction currency differs from the
    user's display currency.
    """

    __tablename__ = "expense_transactions"

    type: Mapped[str] = mapped_column(String(10), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    amount_in_global_currency: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    exchange_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    category: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    card_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurring_frequency: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    recurring_start_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    recurring_end_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    related_account_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    tags: Mapped[list[Any]] = mapped_column(JSONType, nullable=False, default=list)


class Category(Base, TimestampMixin, OwnedMixin):
    """
    Expense or income category.

    Default categories store their translation key in both ``name`` and
    ``name_key``; the client translates them.
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_key: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False, default="Expense")
    icon: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Card(Base, TimestampMixin, OwnedMixin):
    """Payment card referenced by expense transactions."""

    __tablename__ = "cards"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_four_digits: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False, default="credit")
    network: Mapped[str] = mapped_column(String(20), nullable=False, default="visa")
    color: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Budget(Base, TimestampMixin, OwnedMixin):
    """Spending limit for one category and period."""

    __tablename__ = "budgets"

    category: Mapped[str] = mapped_column(String(255), nullable=False)
    monthly_limit: Mapped[float] = mapped_column(Float, nullable=False)
    alert_threshold: Mapped[float] = mapped_column(Float, nullable=False, default=80)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    period: Mapped[str] = mapped_column(String(10), nullable=False, default="monthly")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
