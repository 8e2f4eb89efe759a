"""
Shared pieces of the generic entity schemas.

Every entity exposes three schema roles:
- Create: fields a client may write, with defaults and constraints
- Read: Create fields plus ``id``, ``created_by``, ``created_date`` and
  ``updated_date`` (these four keep their snake_case names on the wire)
- Update: not a separate class; a partial body is merged onto the stored
  record and the result is validated with the Create schema
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from src.schemas.common import CamelModel

# Keys a client may send but that are always controlled by the server
SERVER_CONTROLLED_FIELDS = frozenset(
    {"id", "_id", "created_by", "createdBy", "created_date", "createdDate",
     "updated_date", "updatedDate"}
)


class EntityRead(CamelModel):
    """
    Server-managed fields present on every returned record.

    Attributes:
        id: String form of the primary key
        created_by: Owner key the record is scoped to
        created_date: Creation timestamp (UTC)
        updated_date: Last update timestamp (UTC)
    """

    id: str
    created_by: str = Field(alias="created_by")
    created_date: datetime = Field(alias="created_date")
    updated_date: datetime = Field(alias="updated_date")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> str:
        """Render UUID primary keys as strings."""
        if isinstance(value, uuid.UUID):
            return str(value)
        return value


def strip_server_fields(payload: dict[str, Any]) -> dict[str, Any]:
    """Drop keys that clients are not allowed to set."""
    return {k: v for k, v in payload.items() if k not in SERVER_CONTROLLED_FIELDS}
