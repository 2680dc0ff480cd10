"""
Shared enumerations.

LedgerSource values are stored as plain strings on ledger
entries so new sources can be added without a migration.
"""

import enum


class LedgerSource(str, enum.Enum):
    """Where a ledger entry came from."""
    GLEAM = "gleam"


class EventOutcome(str, enum.Enum):
    """What happened to one incoming growth event."""
    APPLIED = "applied"
    DEDUPLICATED = "deduplicated"
    IGNORED = "ignored"
    USER_NOT_FOUND = "user_not_found"
