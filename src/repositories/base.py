"""
Generic async repository.

Subclasses bind a model and add their own lookups; the entity layer uses
``BaseRepository(model, session)`` directly for every owned collection.
Repositories flush but never commit: the calling service owns the unit of
work.
"""

import uuid
from collections.abc import Iterable, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Persistence helpers shared by every table.

    Filtering is expressed as plain SQLAlchemy boolean clauses, e.g.::

        await repo.find(
            [Note.created_by == owner, Note.is_pinned.is_(True)],
            order_by=[Note.created_date.desc()],
            limit=50,
        )
    """

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def _flush_and_refresh(self, *instances: ModelType) -> None:
        await self.session.flush()
        for instance in instances:
            await self.session.refresh(instance)

    async def add(self, instance: ModelType) -> ModelType:
        """Insert one row; server defaults and timestamps are loaded back."""
        self.session.add(instance)
        await self._flush_and_refresh(instance)
        return instance

    async def add_all(self, instances: Sequence[ModelType]) -> list[ModelType]:
        self.session.add_all(instances)
        await self._flush_and_refresh(*instances)
        return list(instances)

    async def get_by_id(self, id: uuid.UUID) -> ModelType | None:
        return await self.session.get(self.model, id)

    async def find(
        self,
        criteria: Iterable[ColumnElement[bool]] = (),
        order_by: Sequence[Any] = (),
        limit: int | None = None,
    ) -> list[ModelType]:
        """Rows matching all ``criteria``, ordered and capped as asked."""
        stmt = select(self.model).where(*criteria).order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list((await self.session.scalars(stmt)).all())

    async def find_one(self, criteria: Iterable[ColumnElement[bool]]) -> ModelType | None:
        matches = await self.find(criteria, limit=1)
        return matches[0] if matches else None

    async def update(self, instance: ModelType) -> ModelType:
        """Flush attribute changes the caller already applied to ``instance``."""
        await self._flush_and_refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        await self.session.delete(instance)
        await self.session.flush()

    async def exists(self, id: uuid.UUID) -> bool:
        return await self.get_by_id(id) is not None
