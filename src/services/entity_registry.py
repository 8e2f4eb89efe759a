"""
Registry of the collections served by ``/api/entities/{collection}``.

Each entry binds a URL collection name to its model, its schemas and the
feature permissions that gate reads and writes.
"""

from dataclasses import dataclass

from pydantic import BaseModel

from src.exceptions import NotFoundError
from src.models.base import Base
from src.models.dashboard import DashboardWidget, PageLayout
from src.models.enums import Permission
from src.models.expenses import Budget, Card, Category, ExpenseTransaction
from src.models.planning import FinancialGoal, Note
from src.models.portfolio import (
    Account,
    DayTrade,
    PortfolioSnapshot,
    PortfolioTransaction,
    Position,
)
from src.models.shared_user import SharedUser
from src.schemas.expenses import (
    BudgetCreate,
    BudgetRead,
    CardCreate,
    CardRead,
    CategoryCreate,
    CategoryRead,
    ExpenseTransactionCreate,
    ExpenseTransactionRead,
)
from src.schemas.planning import (
    DashboardWidgetCreate,
    DashboardWidgetRead,
    FinancialGoalCreate,
    FinancialGoalRead,
    NoteCreate,
    NoteRead,
    PageLayoutCreate,
    PageLayoutRead,
)
from src.schemas.portfolio import (
    AccountCreate,
    AccountRead,
    DayTradeCreate,
    DayTradeRead,
    PortfolioSnapshotCreate,
    PortfolioSnapshotRead,
    PortfolioTransactionCreate,
    PortfolioTransactionRead,
    PositionCreate,
    PositionRead,
)
from src.schemas.shared_user import SharedUserCreate, SharedUserRead
from src.services.category_defaults import default_category_rows


@dataclass(frozen=True)
class EntityDefinition:
    """
    Description of one generic collection.

    Attributes:
        name: Collection name used in the URL (e.g. ``"day-trades"``)
        model: SQLAlchemy model
        create_schema: Schema validating new records and merged updates
        read_schema: Schema serializing stored records
        view_permission: Feature key required to read (None: ungated)
        edit_permission: Feature key required to write (None: ungated)
        owner_field: Column holding the owner key
        owner_scoped: Whether reads and writes are filtered by owner
        seed_defaults: Whether an empty unfiltered list seeds default rows
    """

    name: str
    model: type[Base]
    create_schema: type[BaseModel]
    read_schema: type[BaseModel]
    view_permission: Permission | None
    edit_permission: Permission | None
    owner_field: str = "created_by"
    owner_scoped: bool = True
    seed_defaults: bool = False

    def default_rows(self) -> list[dict]:
        """Rows to seed for a new owner; only categories have any."""
        if self.model is Category:
            return default_category_rows()
        return []


_PORTFOLIO = (Permission.view_portfolio, Permission.edit_portfolio)
_EXPENSES = (Permission.view_expenses, Permission.edit_expenses)


ENTITY_DEFINITIONS: dict[str, EntityDefinition] = {
    definition.name: definition
    for definition in (
        EntityDefinition("accounts", Account, AccountCreate, AccountRead, *_PORTFOLIO),
        EntityDefinition("positions", Position, PositionCreate, PositionRead, *_PORTFOLIO),
        EntityDefinition("day-trades", DayTrade, DayTradeCreate, DayTradeRead, *_PORTFOLIO),
        EntityDefinition(
            "snapshots",
            PortfolioSnapshot,
            PortfolioSnapshotCreate,
            PortfolioSnapshotRead,
            *_PORTFOLIO,
        ),
        EntityDefinition(
            "portfolio-transactions",
            PortfolioTransaction,
            PortfolioTransactionCreate,
            PortfolioTransactionRead,
            *_PORTFOLIO,
        ),
        EntityDefinition(
            "transactions",
            ExpenseTransaction,
            ExpenseTransactionCreate,
            ExpenseTransactionRead,
            *_EXPENSES,
        ),
        EntityDefinition(
            "categories",
            Category,
            CategoryCreate,
            CategoryRead,
            *_EXPENSES,
            seed_defaults=True,
        ),
        EntityDefinition("cards", Card, CardCreate, CardRead, *_EXPENSES),
        EntityDefinition(
            "budgets",
            Budget,
            BudgetCreate,
            BudgetRead,
            Permission.view_budgets,
            Permission.edit_budgets,
        ),
        EntityDefinition(
            "goals",
            FinancialGoal,
            FinancialGoalCreate,
            FinancialGoalRead,
            Permission.view_goals,
            Permission.edit_goals,
        ),
        EntityDefinition(
            "notes", Note, NoteCreate, NoteRead, Permission.view_notes, Permission.edit_notes
        ),
        EntityDefinition(
            "dashboard-widgets",
            DashboardWidget,
            DashboardWidgetCreate,
            DashboardWidgetRead,
            None,
            Permission.view_settings,
        ),
        EntityDefinition(
            "page-layouts",
            PageLayout,
            PageLayoutCreate,
            PageLayoutRead,
            None,
            Permission.view_settings,
        ),
        EntityDefinition(
            "shared-users",
            SharedUser,
            SharedUserCreate,
            SharedUserRead,
            Permission.manage_users,
            Permission.manage_users,
        ),
    )
}


def get_entity_definition(collection: str) -> EntityDefinition:
    """
    Look up a collection by URL name.

    Raises:
        NotFoundError: Unknown collection
    """
    definition = ENTITY_DEFINITIONS.get(collection)
    if definition is None:
        raise NotFoundError(message=f"Unknown entity collection: {collection}")
    return definition
