"""
Growth ledger entry model.

Each entry records one point award for one user. Entries are
immutable: once written they are never modified or deleted,
except by the cascade when their owning user is deleted.

external_event_key is unique across all sources. That unique
constraint is what makes applying an event idempotent.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from growth_ledger.models.base import Base, utcnow


class GrowthLedgerEntry(Base):
    """
    An append-only point delta owned by a user.

    A user's total is the sum of delta over their entries.
    It is never stored.
    """

    __tablename__ = "growth_ledger"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    delta: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    source: Mapped[str] = mapped_column(String(50), nullable=False)
    external_event_key: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False
    )
    # Audit copy of the incoming payload, never interpreted.
    raw_payload: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    user: Mapped["User"] = relationship(back_populates="ledger_entries")

    def __repr__(self) -> str:
        return (
            f"<GrowthLedgerEntry {self.external_event_key} "
            f"{self.delta:+d} ({self.source})>"
        )
