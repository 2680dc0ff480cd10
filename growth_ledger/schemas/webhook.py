"""
Pydantic schemas for the Gleam post-entry webhook.

Gleam payloads carry much more than we use, so every level
allows extra fields. Only user.email, campaign.key, entry.id
and entry.action are read.
"""

from pydantic import BaseModel, ConfigDict

from growth_ledger.models.enums import EventOutcome


class GleamUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: str | None = None


class GleamCampaign(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: str | int | None = None


class GleamEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | int | None = None
    action: str | None = None


class GleamPostEntryPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    user: GleamUser | None = None
    campaign: GleamCampaign | None = None
    entry: GleamEntry | None = None


class IngestResult(BaseModel):
    """What the ingest service did with one webhook delivery."""
    outcome: EventOutcome
    email: str
    action_key: str
    delta: int = 0
    total: int | None = None


class PostEntryResponse(BaseModel):
    """
    Webhook response body.

    Only the fields relevant to the outcome are set; the router
    drops the rest with response_model_exclude_none.
    """
    ok: bool = True
    applied: bool | None = None
    deduped: bool | None = None
    ignored: bool | None = None
    user_not_found: bool | None = None
    email: str | None = None
    action_key: str | None = None
    delta: int | None = None
    total: int | None = None
