"""
Shared WHOOP Response Shapes
============================
Base record type and the generic page envelope used by every
collection endpoint (``/v2/cycle``, ``/v2/recovery``, ...).
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator


class WhoopRecord(BaseModel):
    """Immutable mirror of a WHOOP JSON object. Unknown keys are ignored."""

    model_config = {"frozen": True, "extra": "ignore"}


T = TypeVar("T", bound=WhoopRecord)


class PaginatedResponse(WhoopRecord, Generic[T]):
    """One page of records plus the cursor for the next page."""

    records: list[T] = Field(default_factory=list)
    # Absent on the last page
    next_token: Optional[str] = None

    @field_validator("records", mode="before")
    @classmethod
    def _null_records_as_empty(cls, value):
        return [] if value is None else value
