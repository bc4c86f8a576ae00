"""
Sub-periods API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services import period_service

router = APIRouter()


def sub_period_to_dict(sub_period) -> dict:
    return {
        "_id": sub_period.id,
        "name": sub_period.name,
        "order": sub_period.order,
        "color": sub_period.color,
        "periodId": sub_period.period_id,
        "startYear": sub_period.start_year,
        "endYear": sub_period.end_year,
        "description": sub_period.description,
    }


@router.get("")
def list_sub_periods(db: Session = Depends(get_db)):
    """All sub-periods, sorted by display order."""
    return [sub_period_to_dict(sp) for sp in period_service.get_sub_periods(db)]


@router.get("/period/{period_id}")
def list_sub_periods_by_period(period_id: str, db: Session = Depends(get_db)):
    """Sub-periods belonging to one period."""
    return [
        sub_period_to_dict(sp)
        for sp in period_service.get_sub_periods_by_period(db, period_id)
    ]
