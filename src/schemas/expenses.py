"""
Expense entity schemas (transactions, categories, cards, budgets).
"""

from typing import Any, Literal

from pydantic import Field

from src.schemas.common import CamelModel
from src.schemas.entity import EntityRead


class ExpenseTransactionCreate(CamelModel):
    """
    Writable expense transaction fields.

    Recurring transactions carry ``recurring_frequency`` and an optional
    start/end date window.
    """

    type: Literal["Income", "Expense"]
    amount: float
    currency: str = Field(default="USD", max_length=10)
    amount_in_global_currency: float | None = None
    exchange_rate: float | None = None
    category: str = Field(min_length=1)
    description: str = ""
    date: str = Field(min_length=1)
    payment_method: str = ""
    card_id: str | None = None
    is_recurring: bool = False
    recurring_frequency: Literal["daily", "weekly", "monthly", "yearly"] | None = None
    recurring_start_date: str | None = None
    recurring_end_date: str | None = None
    related_account_id: str | None = None
    tags: list[Any] = Field(default_factory=list)


class ExpenseTransactionRead(ExpenseTransactionCreate, EntityRead):
    pass


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    name_key: str | None = None
    type: Literal["Income", "Expense", "Both"] = "Expense"
    icon: str | None = None
    color: str | None = None
    is_default: bool = False


class CategoryRead(CategoryCreate, EntityRead):
    pass


class CardCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    last_four_digits: str | None = Field(default=None, pattern=r"^\d{4}$")
    type: Literal["credit", "debit", "prepaid"] = "credit"
    network: Literal["visa", "mastercard", "amex", "discover", "other"] = "visa"
    color: str | None = None
    is_active: bool = True


class CardRead(CardCreate, EntityRead):
    pass


class BudgetCreate(CamelModel):
    category: str = Field(min_length=1)
    monthly_limit: float = Field(ge=0)
    alert_threshold: float = Field(default=80, ge=0, le=100)
    currency: str = Field(default="USD", max_length=10)
    period: Literal["weekly", "monthly", "yearly"] = "monthly"
    is_active: bool = True


class BudgetRead(BudgetCreate, EntityRead):
    pass
