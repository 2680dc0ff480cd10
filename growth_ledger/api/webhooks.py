"""
Gleam webhook endpoint: POST /webhooks/gleam/post-entry?token=...

Gleam delivers at least once, so the same entry can arrive
several times. Every delivery that is not rejected gets a 200
so Gleam stops retrying; repeated entries come back with
deduped=true and the unchanged total.
"""

import logging
import secrets
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from growth_ledger.api.dependencies import get_action_catalog
from growth_ledger.config import Settings, get_settings
from growth_ledger.models.base import get_db
from growth_ledger.models.enums import EventOutcome
from growth_ledger.schemas.webhook import PostEntryResponse
from growth_ledger.services.action_catalog import ActionCatalog
from growth_ledger.services.exceptions import InvalidPayload, StorageFailure
from growth_ledger.services.ingest_service import (
    PAYLOAD_HINT,
    GleamIngestService,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks/gleam", tags=["Webhooks"])


def _token_matches(token: str | None, expected: str) -> bool:
    if not expected or token is None:
        return False
    return secrets.compare_digest(token.encode(), expected.encode())


@router.post(
    "/post-entry",
    response_model=PostEntryResponse,
    response_model_exclude_none=True,
)
def gleam_post_entry(
    token: str | None = None,
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    catalog: ActionCatalog = Depends(get_action_catalog),
):
    """
    Award growth points for a Gleam entry.

    1. Check the shared-secret token
    2. Hand the payload to GleamIngestService
    3. Map the outcome to a response
    """
    if not _token_matches(token, settings.GLEAM_WEBHOOK_TOKEN):
        logger.warning("Rejected Gleam webhook with a bad token")
        raise HTTPException(status_code=401, detail="unauthorized")

    service = GleamIngestService(db, catalog, source=settings.LEDGER_SOURCE)
    try:
        result = service.handle(payload)
    except InvalidPayload as e:
        logger.warning("Bad Gleam payload: %s", e)
        raise HTTPException(status_code=400, detail={
            "error": "bad_payload",
            "hint": PAYLOAD_HINT,
            "got": e.got,
        })
    except StorageFailure as e:
        logger.error("Webhook DB insert error: %s", e)
        raise HTTPException(status_code=500, detail="server_error")

    if result.outcome == EventOutcome.IGNORED:
        return PostEntryResponse(ignored=True, action_key=result.action_key)

    if result.outcome == EventOutcome.USER_NOT_FOUND:
        if settings.STRICT_USER_MATCH:
            raise HTTPException(status_code=404, detail="user_not_found")
        return PostEntryResponse(user_not_found=True, email=result.email)

    applied = result.outcome == EventOutcome.APPLIED
    return PostEntryResponse(
        applied=applied,
        deduped=None if applied else True,
        email=result.email,
        action_key=result.action_key,
        delta=result.delta,
        total=result.total,
    )
