"""
Periods API endpoints.

Periods are the top-level eras used for filter buttons and legends.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services import period_service

router = APIRouter()


def period_to_dict(period) -> dict:
    """Convert Period model to the document shape the pages consume."""
    return {
        "_id": period.id,
        "name": period.name,
        "order": period.order,
        "color": period.color,
        "slug": period.slug,
        "startYear": period.start_year,
        "endYear": period.end_year,
        "description": period.description,
    }


@router.get("")
def list_periods(db: Session = Depends(get_db)):
    """All periods, sorted by display order."""
    return [period_to_dict(p) for p in period_service.get_periods(db)]
