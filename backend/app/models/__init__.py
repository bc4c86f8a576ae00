"""
SQLAlchemy models for the Vietnamese history store.
"""
from app.models.base import Base
from app.models.period import Period, SubPeriod
from app.models.event import Event

__all__ = [
    "Base",
    "Period",
    "SubPeriod",
    "Event",
]
