"""Collection statistics."""
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.event import Event
from app.models.period import Period, SubPeriod


def get_stats(db: Session) -> dict:
    events_by_period = (
        db.query(Event.period_id, func.count(Event.id))
        .group_by(Event.period_id)
        .all()
    )
    return {
        "totalEvents": db.query(func.count(Event.id)).scalar(),
        "totalPeriods": db.query(func.count(Period.id)).scalar(),
        "totalSubPeriods": db.query(func.count(SubPeriod.id)).scalar(),
        "eventsByPeriod": [
            {"_id": period_id, "count": count}
            for period_id, count in events_by_period
        ],
    }
