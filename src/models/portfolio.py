"""
Portfolio entities: accounts, positions, day trades, snapshots and
portfolio cash/asset movements.

Cross references (``account_id``, ``position_id``) are loose strings: the
client may create records in any order and nothing cascades.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base
from src.models.mixins import OwnedMixin, TimestampMixin


class Account(Base, TimestampMixin, OwnedMixin):
    """Investment or savings account (Brokerage, IRA, 401k, Crypto, ...)."""

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    base_currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    institution: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    initial_investment: Mapped[float] = mapped_column(Float, nullable=False, default=0)


class Position(Base, TimestampMixin, OwnedMixin):
    """Holding of one symbol inside an account. Options carry extra fields."""

    __tablename__ = "positions"

    account_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    symbol: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    asset_type: Mapped[str] = mapped_column(String(32), nullable=False)

    # Options
    strike_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    expiration_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    option_type: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    option_action: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    premium_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    stock_price_at_purchase: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    average_buy_price: Mapped[float] = mapped_column(Float, nullable=False)
    current_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    date: Mapped[str] = mapped_column(String(32), nullable=False)
    last_price_update: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")


class DayTrade(Base, TimestampMixin, OwnedMixin):
    """Closed intraday trade with its realized profit or loss."""

    __tablename__ = "day_trades"

    account_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    symbol: Mapped[str] = mapped_column(String(32), nullable=False)
    date: Mapped[str] = mapped_column(String(32), nullable=False)
    entry_price: Mapped[float] = mapped_column(Float, nullable=False)
    exit_price: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    profit_loss: Mapped[float] = mapped_column(Float, nullable=False)
    side: Mapped[str] = mapped_column(String(8), nullable=False, default="long")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")


class PortfolioSnapshot(Base, TimestampMixin, OwnedMixin):
    """Daily portfolio valuation used by history charts."""

    __tablename__ = "portfolio_snapshots"

    date: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    total_value: Mapped[float] = mapped_column(Float, nullable=False)
    total_cost_basis: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    total_pnl: Mapped[float] = mapped_column(Float, nullable=False, default=0)


class PortfolioTransaction(Base, TimestampMixin, OwnedMixin):
    """Buy, sell, deposit or withdrawal recorded against an account."""

    __tablename__ = "portfolio_transactions"

    account_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    symbol: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    asset_type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    price_per_unit: Mapped[float] = mapped_column(Float, nullable=False, default=1)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    date: Mapped[str] = mapped_column(String(32), nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    position_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
