"""
User endpoints for testing and administration.

These simulate the product's user base: a user must exist
before a webhook event can award points to it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from growth_ledger.models.base import get_db
from growth_ledger.models.user import normalize_email
from growth_ledger.schemas.ledger import LedgerEntryResponse
from growth_ledger.schemas.user import (
    UserCreate,
    UserCreateResponse,
    UserResponse,
    UserTotalResponse,
)
from growth_ledger.services.exceptions import StorageFailure
from growth_ledger.services.ledger_service import LedgerService
from growth_ledger.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/test/users", tags=["Users"])


@router.post("", response_model=UserCreateResponse, status_code=201)
def create_user(
    request: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Find or create a user by email.

    Returns 201 for a new user and 200 with existed=true when
    the (normalized) email is already known.
    """
    if not normalize_email(request.email):
        raise HTTPException(status_code=400, detail="email_required")

    service = UserService(db)
    try:
        user, existed = service.find_or_create_user(request.email)
    except StorageFailure as e:
        logger.exception("Could not create user")
        raise HTTPException(status_code=500, detail="db_error") from e

    if existed:
        response.status_code = 200
    return UserCreateResponse(
        user=UserResponse.model_validate(user),
        existed=existed,
    )


@router.get("/{email}/total", response_model=UserTotalResponse)
def get_user_total(email: str, db: Session = Depends(get_db)):
    """
    Get a user's growth total.

    The total is summed from the ledger on every call.
    """
    try:
        user = UserService(db).find_by_email(email)
        if not user:
            raise HTTPException(status_code=404, detail="user_not_found")
        total = LedgerService(db).get_total(user.id)
    except StorageFailure as e:
        logger.error("Could not read total for %s: %s", email, e)
        raise HTTPException(status_code=500, detail="server_error") from e

    return UserTotalResponse(email=user.email, total=total)


@router.get("/{email}/entries", response_model=list[LedgerEntryResponse])
def get_user_entries(email: str, db: Session = Depends(get_db)):
    """
    Get all ledger entries for a user, newest first.
    """
    try:
        user = UserService(db).find_by_email(email)
        if not user:
            raise HTTPException(status_code=404, detail="user_not_found")
        return LedgerService(db).get_entries(user.id)
    except StorageFailure as e:
        logger.error("Could not read entries for %s: %s", email, e)
        raise HTTPException(status_code=500, detail="server_error") from e
