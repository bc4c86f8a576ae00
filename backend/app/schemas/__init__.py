"""Pydantic schemas for API request/response validation."""
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.event import (
    Coordinates,
    EventCreate,
    EventDate,
    EventLocation,
    EventUpdate,
    KeyFigure,
)

__all__ = [
    "ErrorResponse", "MessageResponse",
    "Coordinates", "EventCreate", "EventDate", "EventLocation", "EventUpdate", "KeyFigure",
]
