"""
Event model.

A discrete historical occurrence. Nested parts of the document (date,
location, key figures, tags) are stored as JSON exactly as the frontend
consumes them; `year`, `latitude` and `longitude` are derived copies kept
for range and proximity queries. BC dates use negative years.
"""
from sqlalchemy import Boolean, Column, Float, Integer, JSON, String, Text

from app.models.base import Base, TimestampMixin, new_object_id


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(String(24), primary_key=True, default=new_object_id)
    title = Column(String(500), nullable=False)
    title_vietnamese = Column(String(500))

    # Content
    description = Column(Text)
    short_description = Column(Text)
    significance = Column(Text)
    event_type = Column(String(100))

    # Temporal data: {"year": -257, "month": 0, "day": 1, "displayDate": "..."}
    # month is a 0-based index (0 = January)
    date = Column(JSON, nullable=False)
    end_date = Column(JSON)
    year = Column(Integer, index=True)

    # {"name": ..., "province": ..., "coordinates": {"lat": ..., "lng": ...}}
    location = Column(JSON)
    latitude = Column(Float)
    longitude = Column(Float)

    # References are plain identifiers, a dangling one is not an error
    period_id = Column(String(24), index=True)
    sub_period_id = Column(String(24), index=True)

    key_figures = Column(JSON)
    tags = Column(JSON)
    featured = Column(Boolean, default=False)

    def __repr__(self):
        return f"<Event(id={self.id}, title='{self.title}', year={self.year})>"