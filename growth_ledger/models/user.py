"""
User model.

A user is identified by a normalized email address: trimmed
and lowercased. The unique constraint is on the stored value,
so every write and read path must normalize first.
"""

from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from growth_ledger.models.base import Base, utcnow


def normalize_email(email) -> str:
    """Trim and lowercase an email. None becomes an empty string."""
    if email is None:
        return ""
    return str(email).strip().lower()


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    # Entries are owned by the user. passive_deletes leaves the
    # removal to the ON DELETE CASCADE foreign key.
    ledger_entries: Mapped[list["GrowthLedgerEntry"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
