"""
Gleam ingest service: turns a post-entry webhook into a ledger event.

Each delivery:
1. Extracts email, campaign key, entry id and action from the payload
2. Looks up the action's points in the catalog (0 means ignore)
3. Resolves the user by email
4. Builds the external event key from campaign and entry
5. Applies the event through LedgerService

Deduplication is resolved inside LedgerService. This service
only ever sees applied, deduplicated, user-not-found or a
hard failure.
"""

import hashlib
import json
import logging
from urllib.parse import quote

from pydantic import ValidationError
from sqlalchemy.orm import Session

from growth_ledger.models.enums import EventOutcome, LedgerSource
from growth_ledger.models.user import normalize_email
from growth_ledger.schemas.ledger import (
    EVENT_KEY_MAX_LENGTH,
    REASON_MAX_LENGTH,
    ApplyEventRequest,
)
from growth_ledger.schemas.webhook import GleamPostEntryPayload, IngestResult
from growth_ledger.services.action_catalog import ActionCatalog
from growth_ledger.services.exceptions import InvalidPayload
from growth_ledger.services.ledger_service import LedgerService
from growth_ledger.services.user_service import UserService

logger = logging.getLogger(__name__)


PAYLOAD_HINT = (
    "Expected payload.user.email, payload.campaign.key, "
    "payload.entry.id, payload.entry.action"
)

EVENT_KEY_SEPARATOR = ":"

# Never produced by percent-encoding, so hashed keys cannot
# collide with plain ones.
HASHED_KEY_PREFIX = "#sha256:"


def build_event_key(campaign_key, entry_id) -> str:
    """
    Compose the external event key for a Gleam entry.

    Both parts are percent-encoded, so a separator inside a
    campaign key or entry id cannot make two different
    (campaign, entry) pairs produce the same key.

    Keys longer than the column allows (long ids, or non-ASCII
    text, which encodes to nine characters per character) are
    replaced by a SHA-256 digest of the encoded key.
    """
    key = EVENT_KEY_SEPARATOR.join(
        quote(str(part), safe="") for part in (campaign_key, entry_id)
    )
    if len(key) <= EVENT_KEY_MAX_LENGTH:
        return key
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
    return f"{HASHED_KEY_PREFIX}{digest}"


class GleamIngestService:

    def __init__(
        self,
        db: Session,
        catalog: ActionCatalog,
        source: str = LedgerSource.GLEAM.value,
    ):
        self.catalog = catalog
        self.source = source
        self.users = UserService(db)
        self.ledger = LedgerService(db)

    def handle(self, payload) -> IngestResult:
        """
        Process one post-entry payload.

        Raises InvalidPayload when a required field is missing,
        and lets StorageFailure from the ledger propagate.
        """
        email, campaign_key, entry_id, action_key = self._extract(payload)

        delta = self.catalog.lookup(action_key)
        if delta <= 0:
            logger.info("Ignoring unrewarded action %s", action_key)
            return IngestResult(
                outcome=EventOutcome.IGNORED,
                email=email,
                action_key=action_key,
            )

        user = self.users.find_by_email(email)
        if user is None:
            logger.info("No user for %s, skipping %s", email, action_key)
            return IngestResult(
                outcome=EventOutcome.USER_NOT_FOUND,
                email=email,
                action_key=action_key,
                delta=delta,
            )

        try:
            request = ApplyEventRequest(
                user_id=user.id,
                delta=delta,
                reason=f"{self.source}:{action_key}"[:REASON_MAX_LENGTH],
                source=self.source,
                external_event_key=build_event_key(campaign_key, entry_id),
                raw_payload=json.dumps(payload),
            )
        except ValidationError as e:
            raise InvalidPayload(
                f"payload cannot be recorded: {e.error_count()} errors",
                got=self._peek_fields(payload),
            ) from e

        result = self.ledger.apply_event(request)

        return IngestResult(
            outcome=(
                EventOutcome.APPLIED if result.applied
                else EventOutcome.DEDUPLICATED
            ),
            email=email,
            action_key=action_key,
            delta=delta,
            total=result.total,
        )

    def _extract(self, payload) -> tuple[str, str, str, str]:
        """Pull the four fields we need, or raise InvalidPayload."""
        if not isinstance(payload, dict):
            raise InvalidPayload("payload must be a JSON object", got={})

        try:
            parsed = GleamPostEntryPayload.model_validate(payload)
        except ValidationError as e:
            raise InvalidPayload(
                f"payload has the wrong shape: {e.error_count()} errors",
                got=self._peek_fields(payload),
            ) from e

        email = normalize_email(parsed.user.email if parsed.user else None)
        campaign_key = parsed.campaign.key if parsed.campaign else None
        entry_id = parsed.entry.id if parsed.entry else None
        action_key = parsed.entry.action if parsed.entry else None

        got = {
            "email": email,
            "campaign_key": campaign_key,
            "entry_id": entry_id,
            "action_key": action_key,
        }
        missing = (
            not email
            or campaign_key in (None, "")
            or entry_id in (None, "")
            or not action_key
        )
        if missing:
            raise InvalidPayload("missing required payload fields", got=got)

        return email, str(campaign_key), str(entry_id), action_key

    @staticmethod
    def _peek_fields(payload: dict) -> dict:
        """Read the four fields from a raw payload, None where absent."""
        def peek(section, field):
            value = payload.get(section)
            if isinstance(value, dict):
                return value.get(field)
            return None

        email = peek("user", "email")
        return {
            "email": normalize_email(email) if isinstance(email, str) else email,
            "campaign_key": peek("campaign", "key"),
            "entry_id": peek("entry", "id"),
            "action_key": peek("entry", "action"),
        }
