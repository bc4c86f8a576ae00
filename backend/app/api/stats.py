"""
Diagnostics endpoints: collection statistics and health.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db.session import get_db
from app.services import stats_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
def get_stats(db: Session = Depends(get_db)):
    """Totals per collection and event counts per period."""
    return stats_service.get_stats(db)


@router.get("/health")
def health(db: Session = Depends(get_db)):
    """Health check endpoint."""
    try:
        db.execute(text("SELECT 1"))
        database = "Connected"
    except SQLAlchemyError as e:
        logger.error("Database health check failed: %s", e)
        database = "Disconnected"
    return {
        "status": "OK",
        "database": database,
        "environment": get_settings().environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
