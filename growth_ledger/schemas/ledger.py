"""
Pydantic schemas for ledger operations.

ApplyEventRequest is the input contract of LedgerService.apply_event
and ApplyEventResult is what it hands back. Both outcomes of a
successful call, applied and deduplicated, come back as a result.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_serializer, field_validator

from growth_ledger.models.base import isoformat_utc
from growth_ledger.models.enums import LedgerSource


# Both match the String(255) columns on growth_ledger.
REASON_MAX_LENGTH = 255
EVENT_KEY_MAX_LENGTH = 255


# --- Request Schemas ---

class ApplyEventRequest(BaseModel):
    """
    One point award for one user.

    external_event_key identifies the real-world occurrence.
    Retries of the same occurrence must reuse the same key.
    """
    user_id: int
    delta: int
    reason: str = Field(min_length=1, max_length=REASON_MAX_LENGTH)
    source: str = Field(
        default=LedgerSource.GLEAM.value, min_length=1, max_length=50
    )
    external_event_key: str = Field(
        min_length=1, max_length=EVENT_KEY_MAX_LENGTH
    )
    raw_payload: str | None = None

    @field_validator("delta")
    @classmethod
    def delta_must_be_non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("delta must be non-zero")
        return v


# --- Response Schemas ---

class ApplyEventResult(BaseModel):
    """applied=False means the key was already on the ledger."""
    applied: bool
    total: int
    entry_id: int | None = None


class LedgerEntryResponse(BaseModel):
    """Single entry in API responses."""
    id: int
    user_id: int
    delta: int
    reason: str
    source: str
    external_event_key: str
    raw_payload: str | None
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return isoformat_utc(value)
