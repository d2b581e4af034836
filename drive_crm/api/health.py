"""
Health check endpoint.

Not guarded: load balancers call it without a session.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from drive_crm.logging_config import get_logger
from drive_crm.models.base import get_db

router = APIRouter(tags=["Health"])

log = get_logger("api.health")


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Return application health including database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        log.warning("Database health check failed: %s", e)
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "drive-crm",
        "database": db_status,
    }
