"""
User service — the user directory.

Maps an email to an internal user id. Emails are normalized
(trimmed, lowercased) on every path before they touch the
database, because the unique constraint is on the stored value.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from growth_ledger.models.user import User, normalize_email
from growth_ledger.services.exceptions import (
    DuplicateUser,
    StorageFailure,
    UserNotFound,
)

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email) -> User | None:
        """Return the user for an email, or None."""
        normalized = normalize_email(email)
        if not normalized:
            return None
        try:
            return self.db.execute(
                select(User).where(User.email == normalized)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(str(e)) from e

    def get_user(self, user_id: int) -> User:
        """Get a user by ID."""
        try:
            user = self.db.get(User, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(str(e)) from e
        if not user:
            raise UserNotFound(user_id)
        return user

    def create_user(self, email) -> User:
        """
        Insert a new user.

        Raises DuplicateUser when the normalized email is taken.
        The session is rolled back in that case, so callers must
        not have other pending work on it.
        """
        normalized = normalize_email(email)
        if not normalized:
            raise ValueError("email is required")

        user = User(email=normalized)
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateUser(normalized) from e
        return user

    def find_or_create_user(self, email) -> tuple[User, bool]:
        """
        Return (user, existed) for an email, creating it if needed.

        Two concurrent callers can both miss on the lookup. The
        loser of the insert race gets DuplicateUser, re-reads the
        row the winner committed and returns it as existing.
        """
        existing = self.find_by_email(email)
        if existing:
            return existing, True

        try:
            user = self.create_user(email)
            self.db.commit()
        except DuplicateUser:
            user = self.find_by_email(email)
            if user is None:
                raise StorageFailure(
                    "User insert conflicted but no row was found"
                )
            logger.info("Lost create race for %s, using existing user", user.email)
            return user, True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(str(e)) from e

        logger.info("Created user %s (%s)", user.id, user.email)
        return user, False

    def delete_user(self, user_id: int) -> None:
        """
        Delete a user together with every ledger entry they own.

        The entries go through the ON DELETE CASCADE foreign key.
        """
        user = self.get_user(user_id)
        self.db.delete(user)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailure(str(e)) from e
        logger.info("Deleted user %s", user_id)
