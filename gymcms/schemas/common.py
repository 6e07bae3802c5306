"""
Shared response shapes: errors, plain messages, list envelopes, health,
and the UtcDateTime type every response timestamp uses.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, Field

from gymcms.models.common import as_utc
from gymcms.services.results import ListResult

ItemT = TypeVar("ItemT")

# Stored timestamps are UTC but SQLite returns them naive; always emit an offset
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    error: str = Field(description="Human-readable error message")
    code: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request ID for support")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Offending field, if any")


class MessageResponse(BaseModel):
    message: str


class ListEnvelope(BaseModel, Generic[ItemT]):
    """A page of items with the visibility-filtered total."""

    items: List[ItemT]
    total: int
    limit: Optional[int] = None
    offset: int = 0

    @classmethod
    def from_result(cls, result: ListResult, **extra: Any):
        return cls(
            items=result.items,
            total=result.total,
            limit=result.limit,
            offset=result.offset,
            **extra,
        )


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
