"""
Layout entities: dashboard widgets and per-page widget layouts.
"""

from typing import Any

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, JSONType
from src.models.mixins import OwnedMixin, TimestampMixin


class DashboardWidget(Base, TimestampMixin, OwnedMixin):
    """Widget placement on the dashboard grid with free-form settings."""

    __tablename__ = "dashboard_widgets"

    widget_type: Mapped[str] = mapped_column(String(100), nullable=False)
    x: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    y: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    w: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    h: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    settings: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)


class PageLayout(Base, TimestampMixin, OwnedMixin):
    """Widget placement on a named page other than the dashboard."""

    __tablename__ = "page_layouts"

    page_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    widget_type: Mapped[str] = mapped_column(String(100), nullable=False)
    x: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    y: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    w: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    h: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
