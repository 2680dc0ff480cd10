"""Business logic services."""

from growth_ledger.services.action_catalog import (
    ActionCatalog,
    StaticActionCatalog,
    load_action_catalog,
)
from growth_ledger.services.exceptions import (
    GrowthLedgerError,
    UserNotFound,
    DuplicateUser,
    StorageFailure,
    InvalidPayload,
)
from growth_ledger.services.ledger_service import LedgerService
from growth_ledger.services.user_service import UserService
from growth_ledger.services.ingest_service import GleamIngestService

__all__ = [
    "ActionCatalog",
    "StaticActionCatalog",
    "load_action_catalog",
    "GrowthLedgerError",
    "UserNotFound",
    "DuplicateUser",
    "StorageFailure",
    "InvalidPayload",
    "LedgerService",
    "UserService",
    "GleamIngestService",
]
