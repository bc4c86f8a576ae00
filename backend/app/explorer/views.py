"""
View models for the explorer pages.

Every builder here is a pure function of the joined data (and the page
state it is given); renderers consume the resulting models. Missing
optional fields always produce a literal fallback, never an exception.
"""
import logging
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel

from app.explorer.attributes import event_image, fallback_gradient, index_gradient
from app.explorer.catalog import ALL_PERIODS, Catalog, text_value
from app.explorer.dates import (
    DEFAULT_HISTORY_SPAN,
    HistoricalDate,
    display_date,
    format_event_date,
    sort_year,
    year_range,
    years_of_history,
)
from app.explorer.identifiers import document_id
from app.explorer.locations import LatLng, LocationResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_DESCRIPTION = "No description available"
UNTITLED = "Untitled Event"
DETAIL_PAGE = "events-detail.html"
CARD_TAG_LIMIT = 3
TIMELINE_PADDING = 0.1


def detail_url(event_id: Optional[str]) -> str:
    return f"{DETAIL_PAGE}?id={event_id}"


def short_text(event: dict) -> str:
    return text_value(event.get("shortDescription")) or text_value(event.get("description")) or NO_DESCRIPTION


def event_title(event: dict) -> Optional[str]:
    return text_value(event.get("title")) or text_value(event.get("titleVietnamese"))


def paragraphs(text: Optional[str]) -> list[str]:
    if not isinstance(text, str):
        return []
    return [p for p in text.split("\n\n") if p.strip()]


# ============================================================
# Shared widgets
# ============================================================

class PeriodButton(BaseModel):
    id: str
    label: str
    color: Optional[str] = None
    active: bool = False


class SearchResultItem(BaseModel):
    id: Optional[str]
    title: str
    info: str


class SearchPanel(BaseModel):
    open: bool = False
    results: list[SearchResultItem] = []
    message: Optional[str] = None


class Stats(BaseModel):
    total_events: int
    visible_events: int
    periods_count: int
    years_of_history: Optional[int] = None


def period_buttons(
    catalog: Catalog,
    selected_period_id: Optional[str],
    include_all: bool = True,
    colored: bool = False,
) -> list[PeriodButton]:
    buttons = []
    if include_all:
        buttons.append(PeriodButton(
            id=ALL_PERIODS, label="All Periods", active=selected_period_id == ALL_PERIODS,
        ))
    for period in catalog.sorted_periods():
        period_id = document_id(period)
        if period_id is None:
            continue
        buttons.append(PeriodButton(
            id=period_id,
            label=text_value(period.get("name")) or "Unknown",
            color=catalog.group_color(period) if colored else None,
            active=period_id == selected_period_id,
        ))
    return buttons


def sub_period_buttons(
    catalog: Catalog,
    period_id: Optional[str],
    selected_sub_period_id: Optional[str],
) -> list[PeriodButton]:
    buttons = []
    for sub_period in catalog.sub_periods_of(period_id):
        sub_period_id = document_id(sub_period)
        if sub_period_id is None:
            continue
        buttons.append(PeriodButton(
            id=sub_period_id,
            label=text_value(sub_period.get("name")) or "Unknown",
            color=catalog.group_color(sub_period),
            active=sub_period_id == selected_sub_period_id,
        ))
    return buttons


def search_panel(
    catalog: Catalog,
    query: Optional[str],
    results: Optional[list[dict]],
    date_label: Callable[[Optional[dict]], str] = format_event_date,
) -> SearchPanel:
    """Closed panel for a too-short query, a message panel when nothing matched."""
    if results is None:
        return SearchPanel(open=False)
    if not results:
        return SearchPanel(open=True, message=f'No events found matching "{query}"')
    items = [
        SearchResultItem(
            id=document_id(event),
            title=event_title(event) or "Untitled",
            info=f"{date_label(event.get('date'))} • {catalog.period_name(event)}",
        )
        for event in results
    ]
    return SearchPanel(open=True, results=items)


# ============================================================
# List and home pages
# ============================================================

class EventCard(BaseModel):
    id: Optional[str]
    title: str
    title_vietnamese: Optional[str] = None
    date: str
    period: str
    description: str
    location: str
    image: Optional[str] = None
    background: str
    featured: bool = False
    tags: list[str] = []
    url: str


def event_card(catalog: Catalog, event: dict) -> EventCard:
    event_id = document_id(event)
    tags = event.get("tags") if isinstance(event.get("tags"), list) else []
    return EventCard(
        id=event_id,
        title=text_value(event.get("title")) or UNTITLED,
        title_vietnamese=text_value(event.get("titleVietnamese")),
        date=format_event_date(event.get("date")),
        period=catalog.period_name(event),
        description=short_text(event),
        location=catalog.location_label(event),
        image=event_image(event),
        background=fallback_gradient(event),
        featured=bool(event.get("featured")),
        tags=[str(tag) for tag in tags[:CARD_TAG_LIMIT]],
        url=detail_url(event_id),
    )


def home_card(catalog: Catalog, event: dict, index: int) -> EventCard:
    """Homepage highlight; background follows the display position."""
    card = event_card(catalog, event)
    return card.model_copy(update={
        "date": format_event_date(event.get("date"), short_months=True),
        "image": None,
        "background": index_gradient(index),
        "tags": [],
    })


def list_stats(catalog: Catalog, visible: list[dict]) -> Stats:
    return Stats(
        total_events=len(catalog.events),
        visible_events=len(visible),
        periods_count=len(catalog.periods),
    )


# ============================================================
# Map page
# ============================================================

class MapMarker(BaseModel):
    id: Optional[str]
    color: str
    x: Optional[float] = None
    y: Optional[float] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


class Annotation(BaseModel):
    id: Optional[str]
    name: str
    date: str
    color: str


class Popup(BaseModel):
    id: Optional[str]
    title: str
    period: str
    date: str
    location: str
    description: str
    marker: MapMarker


def map_marker(catalog: Catalog, resolver: LocationResolver, event: dict) -> Optional[MapMarker]:
    coords = resolver.resolve(event.get("location"))
    if coords is None:
        return None
    marker = MapMarker(id=document_id(event), color=catalog.marker_color(event))
    if isinstance(coords, LatLng):
        return marker.model_copy(update={"lat": coords.lat, "lng": coords.lng})
    return marker.model_copy(update={"x": coords.x, "y": coords.y})


def map_markers(catalog: Catalog, resolver: LocationResolver, events: list[dict]) -> list[MapMarker]:
    """Markers for plottable events; the rest are left off the map."""
    markers = []
    for event in events:
        marker = map_marker(catalog, resolver, event)
        if marker is not None:
            markers.append(marker)
    return markers


def annotations(catalog: Catalog, events: list[dict]) -> list[Annotation]:
    ordered = sorted(events, key=sort_year)
    return [
        Annotation(
            id=document_id(event),
            name=event_title(event) or UNTITLED,
            date=display_date(event.get("date")),
            color=catalog.marker_color(event),
        )
        for event in ordered
    ]


def popup(catalog: Catalog, resolver: LocationResolver, event: dict) -> Optional[Popup]:
    marker = map_marker(catalog, resolver, event)
    if marker is None:
        return None
    return Popup(
        id=document_id(event),
        title=event_title(event) or UNTITLED,
        period=catalog.period_name(event),
        date=display_date(event.get("date")),
        location=catalog.location_label(event),
        description=short_text(event),
        marker=marker,
    )


# ============================================================
# Timeline page
# ============================================================

class TimelineItem(BaseModel):
    id: Optional[str]
    content: str
    start: str
    end: str
    type: str
    style: str
    title: str
    start_year: float
    end_year: float


class TimelineWindow(BaseModel):
    start: float
    end: float


class LegendItem(BaseModel):
    name: str
    color: str
    years: str


def timeline_items(catalog: Catalog, events: list[dict], selected_period_id: str = ALL_PERIODS) -> list[TimelineItem]:
    items = []
    for event in events:
        start = HistoricalDate.from_event_date(event.get("date"))
        if start is None:
            logger.warning("Invalid date for event %r: %r", event.get("title"), event.get("date"))
            continue
        end = HistoricalDate.from_event_date(event.get("endDate"))
        color = catalog.timeline_color(event, selected_period_id)
        title = text_value(event.get("title")) or UNTITLED
        items.append(TimelineItem(
            id=document_id(event),
            content=title,
            start=start.isoformat(),
            end=(end or start).isoformat(),
            type="range" if end else "box",
            style=f"background-color: {color}; border-color: {color}; color: white;",
            title=f"{title}\n{format_event_date(event.get('date'))}\n\nClick to view details",
            start_year=start.as_fractional_year(),
            end_year=(end or start).as_fractional_year(),
        ))
    return items


def timeline_window(items: list[TimelineItem]) -> TimelineWindow:
    """Visible range covering every item plus 10% padding on each side."""
    if not items:
        start, end = DEFAULT_HISTORY_SPAN
        return TimelineWindow(start=start, end=end)
    low = min(item.start_year for item in items)
    high = max(item.end_year for item in items)
    padding = (high - low) * TIMELINE_PADDING
    return TimelineWindow(start=low - padding, end=high + padding)


def legend(catalog: Catalog, selected_period_id: str = ALL_PERIODS) -> list[LegendItem]:
    return [
        LegendItem(
            name=text_value(item.get("name")) or "Unknown",
            color=catalog.legend_color(item, selected_period_id),
            years=year_range(item),
        )
        for item in catalog.legend_entries(selected_period_id)
    ]


def timeline_stats(catalog: Catalog, visible: list[dict], selected_period_id: str = ALL_PERIODS) -> Stats:
    if selected_period_id == ALL_PERIODS:
        periods_count = len(catalog.periods)
    else:
        periods_count = len(catalog.sub_periods_of(selected_period_id))
    return Stats(
        total_events=len(catalog.events),
        visible_events=len(visible),
        periods_count=periods_count,
        years_of_history=years_of_history(visible),
    )


# ============================================================
# Detail page
# ============================================================

class KeyFigureCard(BaseModel):
    name: str
    role: str
    description: str


class RelatedEventCard(BaseModel):
    id: Optional[str]
    date: str
    title: str
    description: str
    url: str


class EventDetail(BaseModel):
    id: Optional[str]
    page_title: str
    title: str
    title_vietnamese: Optional[str] = None
    date: str
    date_full: str
    location: str
    period: str
    type: Optional[str] = None
    description: list[str]
    significance: Optional[list[str]] = None
    key_figures: Optional[list[KeyFigureCard]] = None
    related: Optional[list[RelatedEventCard]] = None
    tags: Optional[list[str]] = None


def _section(name: str, build: Callable[[], T]) -> Optional[T]:
    """Build one optional section; a broken section is hidden, not fatal."""
    try:
        return build()
    except Exception:
        logger.exception("Failed to build %s section", name)
        return None


def _key_figures(event: dict) -> Optional[list[KeyFigureCard]]:
    figures = event.get("keyFigures") or []
    if not figures:
        return None
    return [
        KeyFigureCard(
            name=text_value(figure.get("name")) or "Unknown",
            role=text_value(figure.get("role")) or "Role not specified",
            description=text_value(figure.get("description")) or "No description available.",
        )
        for figure in figures
    ]


def _related(catalog: Catalog, event: dict) -> Optional[list[RelatedEventCard]]:
    related = catalog.related_events(event)
    if not related:
        return None
    return [
        RelatedEventCard(
            id=document_id(other),
            date=format_event_date(other.get("date"), short_months=True),
            title=text_value(other.get("title")) or "Untitled",
            description=short_text(other),
            url=detail_url(document_id(other)),
        )
        for other in related
    ]


def _tags(event: dict) -> Optional[list[str]]:
    tags = event.get("tags") or []
    return [str(tag) for tag in tags] or None


def event_detail(catalog: Catalog, event: dict) -> EventDetail:
    title = text_value(event.get("title")) or UNTITLED
    return EventDetail(
        id=document_id(event),
        page_title=f"{text_value(event.get('title')) or 'Event Detail'} - Vietnamese History",
        title=title,
        title_vietnamese=text_value(event.get("titleVietnamese")),
        date=format_event_date(event.get("date"), short_months=True),
        date_full=format_event_date(event.get("date")),
        location=catalog.location_label(event),
        period=catalog.period_name(event),
        type=text_value(event.get("type")),
        description=paragraphs(event.get("description")) or ["No description available."],
        significance=_section("significance", lambda: paragraphs(event.get("significance")) or None),
        key_figures=_section("key figures", lambda: _key_figures(event)),
        related=_section("related events", lambda: _related(catalog, event)),
        tags=_section("tags", lambda: _tags(event)),
    )
