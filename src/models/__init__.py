"""
Database models for the Ascent Finance API.

This module exports all SQLAlchemy models and the declarative base.
Import models from this module to ensure every table is registered on
``Base.metadata`` (Alembic and the test suite rely on it).
"""

from src.models.base import Base
from src.models.dashboard import DashboardWidget, PageLayout
from src.models.enums import AuthProvider, MemberRole, MemberStatus, Permission
from src.models.expenses import Budget, Card, Category, ExpenseTransaction
from src.models.mixins import OwnedMixin, TimestampMixin
from src.models.planning import FinancialGoal, Note
from src.models.portfolio import (
    Account,
    DayTrade,
    PortfolioSnapshot,
    PortfolioTransaction,
    Position,
)
from src.models.shared_user import SharedUser
from src.models.user import User
from src.models.workspace import Workspace, WorkspaceMember

__all__ = [
    # Base
    "Base",
    # Mixins
    "TimestampMixin",
    "OwnedMixin",
    # Enums
    "AuthProvider",
    "MemberRole",
    "MemberStatus",
    "Permission",
    # Identity and sharing
    "User",
    "Workspace",
    "WorkspaceMember",
    "SharedUser",
    # Portfolio
    "Account",
    "Position",
    "DayTrade",
    "PortfolioSnapshot",
    "PortfolioTransaction",
    # Expenses
    "ExpenseTransaction",
    "Category",
    "Card",
    "Budget",
    # Planning
    "FinancialGoal",
    "Note",
    # Layout
    "DashboardWidget",
    "PageLayout",
]
