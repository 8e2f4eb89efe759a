"""
Base model class for all database models.

This module provides the declarative base and common model configuration.
All SQLAlchemy models should inherit from Base.
"""

import uuid

from sqlalchemy import JSON, MetaData, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Naming convention for constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """
    Base class for all database models.

    Provides:
    - UUID primary key (id column), native on PostgreSQL, CHAR(32) on SQLite
    - Naming convention for constraints

    Usage:
        class Note(Base, TimestampMixin, OwnedMixin):
            __tablename__ = "notes"
            title: Mapped[str] = mapped_column(String(255))
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    __name__: str

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"
