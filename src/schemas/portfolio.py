"""
Portfolio entity schemas (accounts, positions, day trades, snapshots,
portfolio transactions).
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from src.schemas.common import CamelModel
from src.schemas.entity import EntityRead

AccountType = Literal[
    "Investment", "Brokerage", "IRA", "Roth IRA", "401k", "Pension", "Savings", "Crypto", "Other"
]
AssetType = Literal[
    "Stock", "ETF", "Bond", "Crypto", "Cash", "Real Estate", "Commodity", "Option", "Other"
]


# =============================================================================
# Accounts
# =============================================================================


class AccountCreate(CamelModel):
    """Writable account fields."""

    name: str = Field(min_length=1, max_length=255)
    type: AccountType
    base_currency: str = Field(default="USD", max_length=10)
    institution: str | None = None
    notes: str | None = None
    initial_investment: float = 0


class AccountRead(AccountCreate, EntityRead):
    pass


# =============================================================================
# Positions
# =============================================================================


class PositionCreate(CamelModel):
    """
    Writable position fields.

    Option positions use ``strike_price``, ``expiration_date``,
    ``option_type`` (Call/Put), ``option_action`` (Buy/Sell),
    ``premium_price`` and ``stock_price_at_purchase``.
    """

    account_id: str = Field(min_length=1)
    symbol: str = Field(min_length=1, max_length=32)
    asset_type: AssetType
    strike_price: float | None = None
    expiration_date: str | None = None
    option_type: Literal["Call", "Put"] | None = None
    option_action: Literal["Buy", "Sell"] | None = None
    premium_price: float | None = None
    stock_price_at_purchase: float | None = None
    quantity: float
    average_buy_price: float
    current_price: float | None = None
    currency: str = Field(default="USD", max_length=10)
    date: str = Field(min_length=1)
    last_price_update: datetime | None = None
    notes: str = ""


class PositionRead(PositionCreate, EntityRead):
    pass


# =============================================================================
# Day trades
# =============================================================================


class DayTradeCreate(CamelModel):
    account_id: str = Field(min_length=1)
    symbol: str = Field(min_length=1, max_length=32)
    date: str = Field(min_length=1)
    entry_price: float
    exit_price: float
    quantity: float
    profit_loss: float
    side: Literal["long", "short"] = "long"
    notes: str = ""


class DayTradeRead(DayTradeCreate, EntityRead):
    pass


# =============================================================================
# Snapshots
# =============================================================================


class PortfolioSnapshotCreate(CamelModel):
    date: str = Field(min_length=1)
    total_value: float
    total_cost_basis: float = 0
    total_pnl: float = Field(default=0, alias="totalPnL")


class PortfolioSnapshotRead(PortfolioSnapshotCreate, EntityRead):
    pass


# =============================================================================
# Portfolio transactions
# =============================================================================


class PortfolioTransactionCreate(CamelModel):
    account_id: str = Field(min_length=1)
    type: Literal["buy", "sell", "deposit", "withdrawal"]
    symbol: str | None = None
    asset_type: str | None = None
    quantity: float
    price_per_unit: float = 1
    total_amount: float
    currency: str = Field(default="USD", max_length=10)
    date: str = Field(min_length=1)
    notes: str = ""
    position_id: str | None = None


class PortfolioTransactionRead(PortfolioTransactionCreate, EntityRead):
    pass
