"""
Errors raised by the services.

Routers translate these into HTTP responses. A repeated event
is not an error: LedgerService.apply_event reports it as a
result with applied=False.
"""


class GrowthLedgerError(Exception):
    """Base class for every error the services raise."""


class UserNotFound(GrowthLedgerError):
    def __init__(self, user_ref):
        self.user_ref = user_ref
        super().__init__(f"User {user_ref} not found")


class DuplicateUser(GrowthLedgerError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User with email '{email}' already exists")


class StorageFailure(GrowthLedgerError):
    """A persistence error other than the expected uniqueness violation."""


class InvalidPayload(GrowthLedgerError):
    """A webhook payload is missing one of the fields we need."""

    def __init__(self, message: str, got: dict):
        self.got = got
        super().__init__(message)
