"""Shared schema pieces: camelCase base models and the response envelope.

Learn: Every response looks like {success, message?, data?, errors?}.
Successful responses are built from ApiResponse[...]; error responses
are rendered by taskboard.api.error_handling.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts camelCase or snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(CamelModel):
    """Request bodies reject unknown keys (e.g. a client-sent completedAt)."""

    model_config = ConfigDict(extra="forbid")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


def require_text(
    value: Optional[str],
    *,
    empty: str,
    max_length: int,
    too_long: str,
    min_length: int = 1,
    too_short: Optional[str] = None,
) -> str:
    """Trim a string field and enforce its length bounds."""
    if value is None:
        raise ValueError(empty)
    value = value.strip()
    if not value:
        raise ValueError(empty)
    if len(value) < min_length:
        raise ValueError(too_short or empty)
    if len(value) > max_length:
        raise ValueError(too_long)
    return value
