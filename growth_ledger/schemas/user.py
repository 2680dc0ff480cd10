"""
Pydantic schemas for user operations.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_serializer

from growth_ledger.models.base import isoformat_utc


class UserCreate(BaseModel):
    # Normalization happens in the service; an empty result is rejected there.
    email: str | None = Field(default=None, max_length=255)


class UserResponse(BaseModel):
    id: int
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return isoformat_utc(value)


class UserCreateResponse(BaseModel):
    ok: bool = True
    user: UserResponse
    existed: bool


class UserTotalResponse(BaseModel):
    ok: bool = True
    email: str
    total: int
