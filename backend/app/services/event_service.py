"""
Event service - CRUD and query operations for events.
"""
import logging
from math import radians, cos, sin, asin, sqrt
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.explorer.dates import date_year
from app.explorer.locations import coordinates_of
from app.models.event import Event
from app.schemas.event import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371000
DEFAULT_NEAR_DISTANCE_M = 100000

# Serialized field name -> column attribute
FIELD_COLUMNS = {
    "title": "title",
    "titleVietnamese": "title_vietnamese",
    "description": "description",
    "shortDescription": "short_description",
    "significance": "significance",
    "type": "event_type",
    "date": "date",
    "endDate": "end_date",
    "location": "location",
    "periodId": "period_id",
    "subPeriodId": "sub_period_id",
    "keyFigures": "key_figures",
    "tags": "tags",
    "featured": "featured",
}


def get_events(db: Session) -> list[Event]:
    """All events, unordered like the document store."""
    return db.query(Event).all()


def get_event_by_id(db: Session, event_id: str) -> Optional[Event]:
    return db.query(Event).filter(Event.id == event_id).first()


def get_events_by_period(db: Session, period_id: str) -> list[Event]:
    return (
        db.query(Event)
        .filter(Event.period_id == period_id)
        .order_by(Event.year)
        .all()
    )


def get_events_by_sub_period(db: Session, sub_period_id: str) -> list[Event]:
    return (
        db.query(Event)
        .filter(Event.sub_period_id == sub_period_id)
        .order_by(Event.year)
        .all()
    )


def get_events_in_range(db: Session, year_start: int, year_end: int) -> list[Event]:
    """Events whose start year lies in [year_start, year_end]."""
    return (
        db.query(Event)
        .filter(Event.year >= year_start, Event.year <= year_end)
        .order_by(Event.year)
        .all()
    )


def haversine(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Great circle distance in metres between two points."""
    lon1, lat1, lon2, lat2 = map(radians, [lon1, lat1, lon2, lat2])
    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = sin(dlat/2)**2 + cos(lat1) * cos(lat2) * sin(dlon/2)**2
    c = 2 * asin(sqrt(a))
    return EARTH_RADIUS_M * c


def get_events_near(
    db: Session,
    latitude: float,
    longitude: float,
    max_distance: float = DEFAULT_NEAR_DISTANCE_M,
) -> list[Event]:
    """Events with coordinates within `max_distance` metres, nearest first."""
    candidates = (
        db.query(Event)
        .filter(Event.latitude.isnot(None), Event.longitude.isnot(None))
        .all()
    )
    nearby = []
    for event in candidates:
        distance = haversine(longitude, latitude, event.longitude, event.latitude)
        if distance <= max_distance:
            nearby.append((distance, event))
    nearby.sort(key=lambda item: item[0])
    return [event for _, event in nearby]


def search_events(db: Session, query: str) -> list[Event]:
    """
    Text search. Any term may match title, Vietnamese title or description;
    events matching more distinct terms rank first.
    """
    terms = list(dict.fromkeys(query.lower().split()))
    if not terms:
        return []

    conditions = []
    for term in terms:
        pattern = f"%{term}%"
        conditions.extend([
            Event.title.ilike(pattern),
            Event.title_vietnamese.ilike(pattern),
            Event.description.ilike(pattern),
        ])
    events = db.query(Event).filter(or_(*conditions)).order_by(Event.year).all()

    def matched_terms(event: Event) -> int:
        text = " ".join(
            (value or "").lower()
            for value in (event.title, event.title_vietnamese, event.description)
        )
        return sum(1 for term in terms if term in text)

    return sorted(events, key=matched_terms, reverse=True)


def apply_document_fields(event: Event, values: dict) -> None:
    """Copy serialized (camelCase) fields onto the row and refresh derived columns."""
    for field, value in values.items():
        column = FIELD_COLUMNS.get(field)
        if column is not None:
            setattr(event, column, value)

    event.year = date_year(event.date)
    coords = coordinates_of(event.location)
    event.latitude = coords.lat if coords else None
    event.longitude = coords.lng if coords else None


def create_event(db: Session, data: EventCreate) -> Event:
    event = Event()
    apply_document_fields(event, data.model_dump(by_alias=True, exclude_none=True))
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event %s (%s)", event.id, event.title)
    return event


def update_event(db: Session, event_id: str, data: EventUpdate) -> Optional[Event]:
    """Set only the fields present in `data`; None when the event is missing."""
    event = get_event_by_id(db, event_id)
    if event is None:
        return None
    apply_document_fields(event, data.model_dump(by_alias=True, exclude_unset=True))
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, event_id: str) -> bool:
    event = get_event_by_id(db, event_id)
    if event is None:
        return False
    db.delete(event)
    db.commit()
    logger.info("Deleted event %s", event_id)
    return True
