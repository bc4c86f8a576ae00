"""Period service - read operations for periods and sub-periods."""
from sqlalchemy.orm import Session

from app.models.period import Period, SubPeriod


def get_periods(db: Session) -> list[Period]:
    return db.query(Period).order_by(Period.order).all()


def get_sub_periods(db: Session) -> list[SubPeriod]:
    return db.query(SubPeriod).order_by(SubPeriod.order).all()


def get_sub_periods_by_period(db: Session, period_id: str) -> list[SubPeriod]:
    return (
        db.query(SubPeriod)
        .filter(SubPeriod.period_id == period_id)
        .order_by(SubPeriod.order)
        .all()
    )
