"""Response envelope shared by all endpoints."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Successful response envelope: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: DataT


class MessageResponse(BaseModel):
    """Successful response carrying only a human-readable message."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    success: bool = False
    error: str = Field(
        description="Error message",
    )
    details: list[dict[str, Any]] | None = Field(
        default=None,
        description="Validation issues, when the request body or query was invalid",
    )
