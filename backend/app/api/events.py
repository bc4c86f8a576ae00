"""
Events API endpoints.

Read routes serve the list, map, timeline and detail pages; POST, PUT and
DELETE are admin mutations. Fixed paths (search, range, near, period,
subperiod) are declared before `/{event_id}` so they are never captured
as identifiers.
"""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.explorer.identifiers import normalize_id
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.event import EventCreate, EventUpdate
from app.services import event_service

router = APIRouter()

REFERENCE_FIELDS = ("periodId", "subPeriodId")

NOT_FOUND = {404: {"model": ErrorResponse}}
BAD_REQUEST = {400: {"model": ErrorResponse}}


def event_to_dict(event) -> dict:
    """Convert Event model to a document; absent optional fields are omitted."""
    document = {
        "_id": event.id,
        "title": event.title,
        "titleVietnamese": event.title_vietnamese,
        "description": event.description,
        "shortDescription": event.short_description,
        "significance": event.significance,
        "type": event.event_type,
        "date": event.date,
        "endDate": event.end_date,
        "location": event.location,
        "periodId": event.period_id,
        "subPeriodId": event.sub_period_id,
        "keyFigures": event.key_figures,
        "tags": event.tags,
    }
    document = {key: value for key, value in document.items() if value is not None}
    document["featured"] = bool(event.featured)
    return document


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"Invalid {location}: {first['msg']}"


def _normalize_references(payload: dict) -> dict:
    """Accept `{"$oid": ...}` references as well as plain identifiers."""
    payload = dict(payload)
    for field in REFERENCE_FIELDS:
        if payload.get(field) is not None:
            payload[field] = normalize_id(payload[field])
    return payload


@router.get("")
def list_events(db: Session = Depends(get_db)):
    """All events (no pagination)."""
    return [event_to_dict(e) for e in event_service.get_events(db)]


@router.get("/search", responses=BAD_REQUEST)
def search_events(
    q: Optional[str] = Query(None, description="Search text"),
    db: Session = Depends(get_db),
):
    """
    Server-side text search.

    Matches any term; events matching more terms rank first. The pages'
    own search requires every word instead.
    """
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query required")
    return [event_to_dict(e) for e in event_service.search_events(db, q)]


@router.get("/period/{period_id}")
def list_events_by_period(period_id: str, db: Session = Depends(get_db)):
    return [event_to_dict(e) for e in event_service.get_events_by_period(db, period_id)]


@router.get("/subperiod/{sub_period_id}")
def list_events_by_sub_period(sub_period_id: str, db: Session = Depends(get_db)):
    return [event_to_dict(e) for e in event_service.get_events_by_sub_period(db, sub_period_id)]


@router.get("/range", responses=BAD_REQUEST)
def list_events_in_range(
    start: Optional[int] = Query(None, description="Start year (negative for BC)"),
    end: Optional[int] = Query(None, description="End year (negative for BC)"),
    db: Session = Depends(get_db),
):
    if start is None or end is None:
        raise HTTPException(status_code=400, detail="Valid start and end years required")
    return [event_to_dict(e) for e in event_service.get_events_in_range(db, start, end)]


@router.get("/near", responses=BAD_REQUEST)
def list_events_near(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    distance: int = Query(event_service.DEFAULT_NEAR_DISTANCE_M, gt=0, description="Metres"),
    db: Session = Depends(get_db),
):
    """Events within `distance` metres of a point, nearest first."""
    if lat is None or lng is None:
        raise HTTPException(status_code=400, detail="Valid latitude and longitude required")
    return [
        event_to_dict(e)
        for e in event_service.get_events_near(db, lat, lng, distance)
    ]


@router.get("/{event_id}", responses=NOT_FOUND)
def get_event(event_id: str, db: Session = Depends(get_db)):
    event = event_service.get_event_by_id(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event_to_dict(event)


@router.post("", status_code=201, responses=BAD_REQUEST)
def create_event(payload: dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Create an event (admin). Title, periodId and date are required."""
    if not payload.get("title") or not payload.get("periodId") or not payload.get("date"):
        raise HTTPException(status_code=400, detail="Title, periodId, and date are required")
    try:
        data = EventCreate.model_validate(_normalize_references(payload))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_validation_message(e))
    return event_to_dict(event_service.create_event(db, data))


@router.put("/{event_id}", response_model=MessageResponse, responses={**NOT_FOUND, **BAD_REQUEST})
def update_event(event_id: str, payload: dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Partial update (admin): only the fields sent are written."""
    try:
        data = EventUpdate.model_validate(_normalize_references(payload))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_validation_message(e))
    if event_service.update_event(db, event_id, data) is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return {"message": "Event updated successfully"}


@router.delete("/{event_id}", response_model=MessageResponse, responses=NOT_FOUND)
def delete_event(event_id: str, db: Session = Depends(get_db)):
    if not event_service.delete_event(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return {"message": "Event deleted successfully"}
