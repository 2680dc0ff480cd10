"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from growth_ledger.models.base import Base
from growth_ledger.models.enums import LedgerSource, EventOutcome
from growth_ledger.models.user import User, normalize_email
from growth_ledger.models.ledger_entry import GrowthLedgerEntry

__all__ = [
    "Base",
    "LedgerSource",
    "EventOutcome",
    "User",
    "normalize_email",
    "GrowthLedgerEntry",
]
