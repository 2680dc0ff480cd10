"""
Health check endpoints.

Used by load balancers, monitoring systems, and humans
to verify the application is running and responsive.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from growth_ledger.config import Settings, get_settings
from growth_ledger.models.base import get_db, isoformat_utc, utcnow

router = APIRouter(tags=["Health"])


@router.get("/")
def service_info(settings: Settings = Depends(get_settings)):
    """Identify the service and report the server time."""
    return {
        "ok": True,
        "service": settings.SERVICE_NAME,
        "time": isoformat_utc(utcnow()),
    }


@router.get("/health")
def health_check(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Return application health status including database connectivity.

    If the database probe fails the service reports itself as
    degraded, telling the load balancer this instance is unhealthy.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        db_status = "unhealthy"

    return {
        "ok": db_status == "healthy",
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": settings.SERVICE_NAME,
        "database": db_status,
    }
