"""
Planning entities: financial goals and notes.
"""

from typing import Any, Optional

from sqlalchemy import Boolean, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, JSONType
from src.models.mixins import OwnedMixin, TimestampMixin


class FinancialGoal(Base, TimestampMixin, OwnedMixin):
    """Savings target with progress tracking."""

    __tablename__ = "financial_goals"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    target_amount: Mapped[float] = mapped_column(Float, nullable=False)
    current_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    target_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False, default="savings")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Note(Base, TimestampMixin, OwnedMixin):
    """Free-text note. ``is_shared`` notes are visible to workspace members."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="Untitled")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#5C8374")
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_shared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    tags: Mapped[list[Any]] = mapped_column(JSONType, nullable=False, default=list)
