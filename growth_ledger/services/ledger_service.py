"""
Ledger service — the core of the growth ledger.

This service enforces the fundamental rules:
1. Each external event is applied at most once
2. Entries are immutable (append-only)
3. Totals are derived from entries, never stored

Idempotency rests on the unique constraint on
growth_ledger.external_event_key. apply_event never asks
"does this key exist?" before writing: two retries racing
through that check would both insert. It inserts, and treats
the uniqueness violation as the duplicate signal.
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from growth_ledger.models.ledger_entry import GrowthLedgerEntry
from growth_ledger.models.user import User
from growth_ledger.schemas.ledger import ApplyEventRequest, ApplyEventResult
from growth_ledger.services.exceptions import StorageFailure, UserNotFound

logger = logging.getLogger(__name__)


class LedgerService:
    """
    All ledger writes pass through this service.

    Unlike the read helpers, apply_event owns its unit of work:
    it commits the new entry itself, or rolls back when the
    commit hits a constraint. Callers must not leave other
    pending changes on the session when calling it.
    """

    def __init__(self, db: Session):
        self.db = db

    def apply_event(self, request: ApplyEventRequest) -> ApplyEventResult:
        """
        Record a point delta for a user exactly once per event key.

        Returns applied=True with the new total when the entry was
        written, or applied=False with the current, unchanged total
        when an entry for the key already exists.

        Raises UserNotFound for an unknown user and StorageFailure
        for any other persistence error.
        """
        self._require_user(request.user_id)

        entry = GrowthLedgerEntry(
            user_id=request.user_id,
            delta=request.delta,
            reason=request.reason,
            source=request.source,
            external_event_key=request.external_event_key,
            raw_payload=request.raw_payload,
        )
        self.db.add(entry)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            return self._resolve_conflict(request, e)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(
                "Ledger insert failed for %s", request.external_event_key
            )
            raise StorageFailure(str(e)) from e

        total = self.get_total(request.user_id)
        logger.info(
            "Applied %+d to user %s for %s (total=%d)",
            request.delta, request.user_id,
            request.external_event_key, total,
        )
        return ApplyEventResult(applied=True, total=total, entry_id=entry.id)

    def _resolve_conflict(
        self, request: ApplyEventRequest, error: IntegrityError
    ) -> ApplyEventResult:
        """
        Classify a failed insert.

        Only a conflict on external_event_key is a duplicate. The
        key is looked up after the failed write, which is safe:
        a committed row for it cannot disappear.
        """
        if self._key_exists(request.external_event_key):
            total = self.get_total(request.user_id)
            logger.info(
                "Deduplicated %s for user %s (total=%d)",
                request.external_event_key, request.user_id, total,
            )
            return ApplyEventResult(applied=False, total=total)

        # The user was deleted between the lookup and the insert.
        self._require_user(request.user_id)

        logger.error(
            "Ledger insert for %s violated a constraint: %s",
            request.external_event_key, error,
        )
        raise StorageFailure(str(error)) from error

    def _require_user(self, user_id: int) -> None:
        """Raise UserNotFound unless the user exists."""
        try:
            user = self.db.get(User, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(str(e)) from e
        if user is None:
            raise UserNotFound(user_id)

    def _key_exists(self, external_event_key: str) -> bool:
        try:
            row = self.db.execute(
                select(GrowthLedgerEntry.id).where(
                    GrowthLedgerEntry.external_event_key == external_event_key
                )
            ).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(str(e)) from e
        return row is not None

    def get_total(self, user_id: int) -> int:
        """
        Sum of all deltas for a user.

        A user with no entries has a total of 0. The total is
        never stored, so it always agrees with the ledger.
        """
        self._require_user(user_id)

        try:
            total = self.db.execute(
                select(func.coalesce(func.sum(GrowthLedgerEntry.delta), 0))
                .where(GrowthLedgerEntry.user_id == user_id)
            ).scalar()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(str(e)) from e
        return int(total)

    def get_entries(self, user_id: int) -> list[GrowthLedgerEntry]:
        """Return all entries for a user, newest first."""
        self._require_user(user_id)

        try:
            entries = self.db.execute(
                select(GrowthLedgerEntry)
                .where(GrowthLedgerEntry.user_id == user_id)
                .order_by(
                    GrowthLedgerEntry.created_at.desc(),
                    GrowthLedgerEntry.id.desc(),
                )
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(str(e)) from e
        return list(entries)
