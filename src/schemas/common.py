"""
Common Pydantic schemas for API request/response handling.

This module provides:
- The success envelope ``{"success": true, "data": ...}``
- The failure envelope used in OpenAPI docs
- CamelModel, the base for every schema exposed in camelCase
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Type variable for generic responses
DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """
    Base schema exposing fields in camelCase.

    Accepts both the camelCase alias and the Python field name on input.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Generic success response wrapper.

    Type Parameters:
        DataT: Type of the data payload

    Attributes:
        success: Always True
        data: Response payload
    """

    success: bool = Field(default=True)
    data: DataT


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Attributes:
        success: Always False
        error: Human-readable message
        code: Machine-readable code (e.g. VALIDATION_ERROR)
        details: Optional structured details
        retryAfter: Seconds to wait (rate limiting only)
    """

    success: bool = Field(default=False)
    error: str
    code: str
    details: dict[str, Any] | None = None
    retryAfter: int | None = None


def ok(data: Any) -> dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"success": True, "data": data}
