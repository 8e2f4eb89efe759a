"""
Goal, note and layout entity schemas.
"""

from typing import Any, Literal

from pydantic import Field

from src.schemas.common import CamelModel
from src.schemas.entity import EntityRead


class FinancialGoalCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    target_amount: float = Field(gt=0)
    current_amount: float = 0
    target_date: str | None = None
    category: Literal[
        "savings", "investment", "retirement", "purchase", "emergency", "other"
    ] = "savings"
    notes: str = ""
    is_completed: bool = False


class FinancialGoalRead(FinancialGoalCreate, EntityRead):
    pass


class NoteCreate(CamelModel):
    title: str = Field(default="Untitled", max_length=255)
    content: str = ""
    color: str = "#5C8374"
    is_pinned: bool = False
    is_shared: bool = True
    tags: list[Any] = Field(default_factory=list)


class NoteRead(NoteCreate, EntityRead):
    pass


class DashboardWidgetCreate(CamelModel):
    widget_type: str = Field(min_length=1)
    x: int = 0
    y: int = 0
    w: int = Field(default=1, ge=1)
    h: int = Field(default=1, ge=1)
    enabled: bool = True
    settings: dict[str, Any] = Field(default_factory=dict)


class DashboardWidgetRead(DashboardWidgetCreate, EntityRead):
    pass


class PageLayoutCreate(CamelModel):
    page_name: str = Field(min_length=1)
    widget_type: str = Field(min_length=1)
    x: int = 0
    y: int = 0
    w: int = Field(default=1, ge=1)
    h: int = Field(default=1, ge=1)
    enabled: bool = True


class PageLayoutRead(PageLayoutCreate, EntityRead):
    pass
