"""
Cross-page handoff.

The detail page stores the selected event in session-scoped storage right
before navigating to the map or timeline; the target page consumes the
record once on load and deletes it.
"""
import logging
from typing import Any, MutableMapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

MAP_HANDOFF_KEY = "selectedEvent"
TIMELINE_HANDOFF_KEY = "selectedTimelineEvent"


class Handoff(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    year: Optional[int] = None
    title: Optional[str] = None
    period: Optional[Any] = Field(None, description="Raw period reference")


class SessionStore(dict):
    """In-memory stand-in for the browser's sessionStorage."""


def write_handoff(store: MutableMapping[str, str], key: str, handoff: Handoff) -> None:
    store[key] = handoff.model_dump_json(exclude_none=True)


def consume_handoff(store: MutableMapping[str, str], key: str) -> Optional[Handoff]:
    """Read and delete the record; a malformed record is dropped."""
    raw = store.pop(key, None)
    if raw is None:
        return None
    try:
        return Handoff.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Discarding malformed handoff %s: %s", key, e)
        return None
