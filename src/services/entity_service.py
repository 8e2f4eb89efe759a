"""
Generic entity access.

One service serves every collection in the entity registry. All reads and
writes are scoped to the owner key computed by the ownership resolver and
gated by the collection's feature permissions.

Query parameters understood by ``list_records``:
    - ``sort``: field list, comma or space separated, ``-`` prefix for
      descending (default ``-created_date``)
    - ``limit``: maximum rows (default 1000, capped at 10000)
    - ``_single``: with ``id``, return one record instead of a list
    - anything else: equality filter on that field (API or column name)
"""

import logging
import re
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from src.core.handlers import format_validation_errors
from src.exceptions import ForbiddenError, NotFoundError, ValidationError
from src.repositories.base import BaseRepository
from src.schemas.entity import strip_server_fields
from src.services.entity_registry import EntityDefinition
from src.services.ownership_service import OwnerContext
from src.services.permission_service import PermissionService

logger = logging.getLogger(__name__)

RESERVED_PARAMS = frozenset({"sort", "limit", "_single"})
DEFAULT_SORT = "-created_date"
DEFAULT_LIMIT = 1000
MAX_LIMIT = 10000

_SORT_SPLIT = re.compile(r"[,\s]+")
_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


class UnknownFieldError(LookupError):
    """A filter or sort key that names no column of the collection."""


class EntityService:
    """
    CRUD over any registered collection.

    Usage:
        service = EntityService(session)
        records = await service.list_records(definition, context, {"category": "food"})
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize EntityService.

        Args:
            session: Async database session
        """
        self.session = session

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    async def list_records(
        self,
        definition: EntityDefinition,
        context: OwnerContext,
        params: dict[str, str],
    ) -> list[dict[str, Any]]:
        """
        List records of a collection.

        Args:
            definition: Collection definition
            context: Resolved owner context
            params: Query parameters (filters plus sort/limit)

        Returns:
            Serialized records, always a list (possibly empty)

        Raises:
            InsufficientPermissionsError: View permission missing
            ValidationError: Bad filter value or unknown sort field
        """
        PermissionService.require(context.grant, definition.view_permission)
        repo = BaseRepository(definition.model, self.session)

        filters = {k: v for k, v in params.items() if k not in RESERVED_PARAMS}
        try:
            criteria = [self._filter_clause(definition, k, v) for k, v in filters.items()]
        except UnknownFieldError as e:
            logger.debug(f"Filter on unknown field {e} in {definition.name}; empty result")
            return []

        criteria.extend(self._owner_criteria(definition, context))
        order_by = self._parse_sort(definition, params.get("sort"))
        limit = self._parse_limit(params.get("limit"))

        records = await repo.find(criteria, order_by=order_by, limit=limit)

        if not records and not filters and definition.seed_defaults:
            records = await self._seed_defaults(definition, context, order_by, limit)

        return [self._serialize(definition, record) for record in records]

    async def get(
        self,
        definition: EntityDefinition,
        context: OwnerContext,
        record_id: str,
    ) -> dict[str, Any]:
        """
        Get one record by id within the owner scope.

        Raises:
            NotFoundError: No record with that id in scope
        """
        PermissionService.require(context.grant, definition.view_permission)
        record = await self._find_scoped(definition, context, record_id)
        if record is None:
            raise NotFoundError(self._label(definition))
        return self._serialize(definition, record)

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    async def create(
        self,
        definition: EntityDefinition,
        context: OwnerContext,
        body: Any,
    ) -> dict[str, Any] | list[dict[str, Any]]:
        """
        Create one record, or several when the body is a list.

        Every record is stamped with the resolved owner key; client-supplied
        ``id``, ``created_by`` and timestamps are ignored.

        Args:
            definition: Collection definition
            context: Resolved owner context
            body: JSON object or array of objects

        Returns:
            Serialized record, or list of records for a bulk body

        Raises:
            ValidationError: Empty body or schema violations
            InsufficientPermissionsError: Edit permission missing
        """
        PermissionService.require(context.grant, definition.edit_permission)

        if not body:
            raise ValidationError("Request body is required")

        bulk = isinstance(body, list)
        items = body if bulk else [body]
        if not all(isinstance(item, dict) and item for item in items):
            raise ValidationError("Each record must be a non-empty JSON object")

        instances = []
        errors: list[dict[str, Any]] = []
        for index, item in enumerate(items):
            try:
                validated = definition.create_schema.model_validate(strip_server_fields(item))
            except PydanticValidationError as e:
                for error in e.errors():
                    loc = ((index,) if bulk else ()) + tuple(error["loc"])
                    errors.append({**error, "loc": loc})
                continue
            instances.append(self._build(definition, context, validated))

        if errors:
            raise ValidationError(format_validation_errors(errors))

        repo = BaseRepository(definition.model, self.session)
        created = await repo.add_all(instances)
        await self.session.commit()

        logger.info(
            f"Created {len(created)} {definition.name} record(s) for owner {context.owner_key}"
        )

        serialized = [self._serialize(definition, record) for record in created]
        return serialized if bulk else serialized[0]

    async def update(
        self,
        definition: EntityDefinition,
        context: OwnerContext,
        record_id: str | None,
        body: Any,
    ) -> dict[str, Any]:
        """
        Partially update a record.

        The patch is merged onto the stored values and the result is
        validated as a whole, so constraints on untouched fields still hold.

        Raises:
            ValidationError: Missing id, empty body or schema violations
            ForbiddenError: Record exists but belongs to another owner
            NotFoundError: No record with that id
        """
        PermissionService.require(context.grant, definition.edit_permission)

        if not record_id:
            raise ValidationError("ID is required for update. Provide ?id=... in URL")
        if not isinstance(body, dict) or not body:
            raise ValidationError("Request body is required")

        record = await self._find_for_write(definition, context, record_id)

        schema = definition.create_schema
        patch = self._to_field_names(schema, strip_server_fields(body))
        if not patch:
            raise ValidationError("No updatable fields supplied")

        current = definition.read_schema.model_validate(record).model_dump()
        merged = {name: current.get(name) for name in schema.model_fields}
        merged.update(patch)

        try:
            validated = schema.model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(format_validation_errors(e.errors())) from e

        for name in patch:
            setattr(record, name, getattr(validated, name))

        repo = BaseRepository(definition.model, self.session)
        record = await repo.update(record)
        await self.session.commit()

        logger.info(f"Updated {definition.name} {record_id} for owner {context.owner_key}")
        return self._serialize(definition, record)

    async def delete(
        self,
        definition: EntityDefinition,
        context: OwnerContext,
        record_id: str | None,
    ) -> dict[str, Any]:
        """
        Delete a record.

        Returns:
            ``{"deleted": True, "id": <id>}``

        Raises:
            ValidationError: Missing id
            ForbiddenError: Record exists but belongs to another owner
            NotFoundError: No record with that id
        """
        PermissionService.require(context.grant, definition.edit_permission)

        if not record_id:
            raise ValidationError("ID is required for delete. Provide ?id=... in URL")

        record = await self._find_for_write(definition, context, record_id)

        repo = BaseRepository(definition.model, self.session)
        await repo.delete(record)
        await self.session.commit()

        logger.info(f"Deleted {definition.name} {record_id} for owner {context.owner_key}")
        return {"deleted": True, "id": record_id}

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _label(definition: EntityDefinition) -> str:
        return definition.model.__name__

    @staticmethod
    def _owner_criteria(
        definition: EntityDefinition,
        context: OwnerContext,
    ) -> list[ColumnElement[bool]]:
        if not definition.owner_scoped:
            return []
        return [getattr(definition.model, definition.owner_field) == context.owner_key]

    @staticmethod
    def _parse_id(record_id: str) -> uuid.UUID | None:
        try:
            return uuid.UUID(str(record_id))
        except ValueError:
            return None

    async def _find_scoped(
        self,
        definition: EntityDefinition,
        context: OwnerContext,
        record_id: str,
    ):
        pk = self._parse_id(record_id)
        if pk is None:
            return None
        repo = BaseRepository(definition.model, self.session)
        return await repo.find_one(
            [definition.model.id == pk, *self._owner_criteria(definition, context)]
        )

    async def _find_for_write(
        self,
        definition: EntityDefinition,
        context: OwnerContext,
        record_id: str,
    ):
        """
        Load a record for update/delete, telling "not yours" from "absent".
        """
        record = await self._find_scoped(definition, context, record_id)
        if record is not None:
            return record

        pk = self._parse_id(record_id)
        if pk is not None:
            repo = BaseRepository(definition.model, self.session)
            if await repo.exists(pk):
                logger.warning(
                    f"Write to {definition.name} {record_id} outside owner scope "
                    f"{context.owner_key}"
                )
                raise ForbiddenError(
                    message=f"You do not have access to this {self._label(definition)}"
                )

        raise NotFoundError(self._label(definition))

    @staticmethod
    def _to_field_names(schema: type[BaseModel], payload: dict[str, Any]) -> dict[str, Any]:
        """Map API (camelCase) or Python keys to schema field names; drop unknowns."""
        lookup: dict[str, str] = {}
        for name, info in schema.model_fields.items():
            lookup[name] = name
            if info.alias:
                lookup[info.alias] = name
        return {lookup[key]: value for key, value in payload.items() if key in lookup}

    @staticmethod
    def _column_for(definition: EntityDefinition, key: str) -> InstrumentedAttribute:
        """
        Resolve an API field name to a model column.

        Raises:
            UnknownFieldError: No such column
        """
        if key in ("id", "_id"):
            return definition.model.id

        name = key
        for field_name, info in definition.read_schema.model_fields.items():
            if info.alias == key or field_name == key:
                name = field_name
                break

        column = getattr(definition.model, name, None)
        if column is None or not isinstance(column, InstrumentedAttribute):
            raise UnknownFieldError(key)
        return column

    def _filter_clause(
        self,
        definition: EntityDefinition,
        key: str,
        raw: str,
    ) -> ColumnElement[bool]:
        column = self._column_for(definition, key)
        return column == self._coerce(column, key, raw)

    @staticmethod
    def _coerce(column: InstrumentedAttribute, key: str, raw: str) -> Any:
        """
        Convert a query-string value to the column's Python type.

        Raises:
            ValidationError: Value cannot be converted, or column is not filterable
        """
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            raise ValidationError(f"Field '{key}' cannot be used as a filter")

        try:
            if python_type is uuid.UUID:
                return uuid.UUID(raw)
            if python_type is bool:
                lowered = raw.strip().lower()
                if lowered in _TRUE_VALUES:
                    return True
                if lowered in _FALSE_VALUES:
                    return False
                raise ValueError(raw)
            if python_type is int:
                return int(raw)
            if python_type is float:
                return float(raw)
            if python_type is datetime:
                return datetime.fromisoformat(raw.replace("Z", "+00:00"))
            if python_type in (dict, list):
                raise ValidationError(f"Field '{key}' cannot be used as a filter")
        except ValueError:
            raise ValidationError(f"Invalid value for filter '{key}': {raw}")
        return raw

    def _parse_sort(self, definition: EntityDefinition, sort: str | None) -> list[Any]:
        """
        Parse a sort expression into ORDER BY clauses.

        Raises:
            ValidationError: Unknown sort field
        """
        spec = (sort or "").strip() or DEFAULT_SORT
        clauses = []
        for token in _SORT_SPLIT.split(spec):
            if not token:
                continue
            descending = token.startswith("-")
            key = token.lstrip("-+")
            try:
                column = self._column_for(definition, key)
            except UnknownFieldError:
                raise ValidationError(f"Invalid sort field: {key}")
            clauses.append(column.desc() if descending else column.asc())
        # Stable order for equal sort keys
        clauses.append(definition.model.id.asc())
        return clauses

    @staticmethod
    def _parse_limit(raw: str | None) -> int:
        try:
            limit = int(raw) if raw is not None else DEFAULT_LIMIT
        except ValueError:
            return DEFAULT_LIMIT
        if limit <= 0:
            return DEFAULT_LIMIT
        return min(limit, MAX_LIMIT)

    @staticmethod
    def _build(definition: EntityDefinition, context: OwnerContext, validated: BaseModel):
        values = validated.model_dump()
        values[definition.owner_field] = context.owner_key
        return definition.model(**values)

    async def _seed_defaults(
        self,
        definition: EntityDefinition,
        context: OwnerContext,
        order_by: list[Any],
        limit: int,
    ) -> list[Any]:
        """Insert the default rows for an owner with none, when allowed to write."""
        if not PermissionService.has_permission(context.grant, definition.edit_permission):
            return []

        rows = definition.default_rows()
        if not rows:
            return []

        instances = [
            definition.model(**row, **{definition.owner_field: context.owner_key})
            for row in rows
        ]
        repo = BaseRepository(definition.model, self.session)
        await repo.add_all(instances)
        await self.session.commit()
        logger.info(
            f"Seeded {len(instances)} default {definition.name} for owner {context.owner_key}"
        )

        return await repo.find(self._owner_criteria(definition, context), order_by, limit)

    @staticmethod
    def _serialize(definition: EntityDefinition, record: Any) -> dict[str, Any]:
        return definition.read_schema.model_validate(record).model_dump(
            mode="json", by_alias=True
        )
