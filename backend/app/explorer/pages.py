"""
Page controllers.

Each controller owns the explicit state of one page (loaded collections,
filter selections, open panels), talks to the API client and produces a
view model. Rendering is delegated to an optional `renderer` callback that
receives the view model after every state change, so the presentation
layer can be swapped without touching the filtering logic.
"""
import asyncio
import logging
import random
from typing import Callable, MutableMapping, Optional

from pydantic import BaseModel

from app.config import get_settings
from app.explorer import views
from app.explorer.api_client import ApiError, HistoryApiClient, LoadResult
from app.explorer.catalog import ALL_PERIODS, Catalog, text_value
from app.explorer.dates import date_year, display_date, format_event_date
from app.explorer.debounce import Debouncer
from app.explorer.filters import FilterEngine, SortMode
from app.explorer.handoff import (
    MAP_HANDOFF_KEY,
    TIMELINE_HANDOFF_KEY,
    Handoff,
    SessionStore,
    consume_handoff,
    write_handoff,
)
from app.explorer.identifiers import document_id, normalize_id
from app.explorer.locations import LocationResolver, Projection, coordinates_of
from app.explorer.search import LIST_RESULT_LIMIT, MAP_RESULT_LIMIT, Ranking, is_searchable
from app.explorer.share import ShareOutcome, share_event

logger = logging.getLogger(__name__)

Renderer = Callable[[BaseModel], None]

MAP_PAGE = "map.html"
TIMELINE_PAGE = "timeline.html"
HOME_HIGHLIGHTS = 4


def error_banner(errors: dict[str, str]) -> Optional[str]:
    if not errors:
        return None
    return "Failed to load " + ", ".join(name.replace("_", "-") for name in errors)


class PageController:
    """Shared loading, rendering and debounced search plumbing."""

    search_limit = LIST_RESULT_LIMIT
    search_ranking = Ranking.TITLE_FIRST
    strip_query = False

    def __init__(
        self,
        client: Optional[HistoryApiClient] = None,
        renderer: Optional[Renderer] = None,
        session: Optional[MutableMapping[str, str]] = None,
        debounce_seconds: Optional[float] = None,
    ):
        settings = get_settings()
        self.client = client or HistoryApiClient()
        self.renderer = renderer
        self.session = session if session is not None else SessionStore()
        self.engine = FilterEngine()
        self.errors: dict[str, str] = {}
        self.loading = False
        self.search = views.SearchPanel()
        wait = settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        self.search_input = Debouncer(self.run_search, wait)

    @property
    def catalog(self) -> Catalog:
        return self.engine.catalog

    def view(self) -> BaseModel:
        raise NotImplementedError

    def render(self) -> BaseModel:
        view = self.view()
        if self.renderer is not None:
            self.renderer(view)
        return view

    def apply_load(self, result: LoadResult) -> None:
        self.errors = dict(result.errors)
        self.engine.reload(Catalog(result.periods, result.sub_periods, result.events))
        logger.info(
            "Data loaded: %d periods, %d sub-periods, %d events",
            len(result.periods), len(result.sub_periods), len(result.events),
        )

    async def load(self) -> BaseModel:
        self.loading = True
        self.render()
        self.apply_load(await self.load_collections())
        self.loading = False
        self.on_loaded()
        return self.render()

    async def load_collections(self) -> LoadResult:
        return await self.client.load_collections()

    def on_loaded(self) -> None:
        pass

    def run_search(self, query: Optional[str]) -> views.SearchPanel:
        """Run a search now; the debounced entry point is `search_input`."""
        if not is_searchable(query, self.strip_query):
            self.search = views.SearchPanel(open=False)
        else:
            results = self.engine.search(
                query, limit=self.search_limit, ranking=self.search_ranking, strip=self.strip_query,
            )
            self.search = self.search_panel(query, results)
        self.render()
        return self.search

    def search_panel(self, query: str, results: list[dict]) -> views.SearchPanel:
        return views.search_panel(self.catalog, query, results)

    def close_search(self) -> None:
        self.search = views.SearchPanel(open=False)
        self.render()


# ============================================================
# Homepage
# ============================================================

class HomeView(BaseModel):
    loading: bool
    error: Optional[str] = None
    total_events: int
    highlights: list[views.EventCard]


class HomePage(PageController):
    def __init__(self, *args, rng: Optional[random.Random] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.rng = rng or random.Random()
        self.highlights: list[dict] = []

    async def load_collections(self) -> LoadResult:
        return await self.client.load_collections(sub_periods=False)

    def on_loaded(self) -> None:
        events = self.catalog.events
        if len(events) <= HOME_HIGHLIGHTS:
            self.highlights = list(events)
        else:
            self.highlights = self.rng.sample(events, HOME_HIGHLIGHTS)

    def view(self) -> HomeView:
        return HomeView(
            loading=self.loading,
            error=error_banner(self.errors),
            total_events=len(self.catalog.events),
            highlights=[
                views.home_card(self.catalog, event, index)
                for index, event in enumerate(self.highlights)
            ],
        )


# ============================================================
# Events list
# ============================================================

class ListView(BaseModel):
    loading: bool
    error: Optional[str] = None
    sort_mode: SortMode
    period_buttons: list[views.PeriodButton]
    cards: list[views.EventCard]
    no_results: bool
    stats: views.Stats
    search: views.SearchPanel


class ListPage(PageController):
    async def load_collections(self) -> LoadResult:
        return await self.client.load_collections(sub_periods=False)

    def select_period(self, period_id: str) -> ListView:
        self.engine.filter_by_period(period_id)
        return self.render()

    def set_sort(self, mode: SortMode) -> ListView:
        self.engine.sort(mode)
        return self.render()

    def view(self) -> ListView:
        filtered = self.engine.filtered
        return ListView(
            loading=self.loading,
            error=error_banner(self.errors),
            sort_mode=self.engine.state.sort_mode,
            period_buttons=views.period_buttons(self.catalog, self.engine.state.period_id),
            cards=[views.event_card(self.catalog, event) for event in filtered],
            no_results=not self.loading and not filtered,
            stats=views.list_stats(self.catalog, filtered),
            search=self.search,
        )


# ============================================================
# Map
# ============================================================

MIN_ZOOM, MAX_ZOOM, ZOOM_STEP = 0.5, 2.5, 0.2


class MapView(BaseModel):
    loading: bool
    error: Optional[str] = None
    zoom: float
    period_buttons: list[views.PeriodButton]
    sub_period_buttons: list[views.PeriodButton]
    sub_period_placeholder: Optional[str] = None
    markers: list[views.MapMarker]
    annotations: list[views.Annotation]
    annotations_placeholder: Optional[str] = None
    popup: Optional[views.Popup] = None
    search: views.SearchPanel


class MapPage(PageController):
    search_limit = MAP_RESULT_LIMIT
    search_ranking = Ranking.SCORED
    strip_query = True

    def __init__(self, *args, projection: Projection = Projection.SVG, **kwargs):
        super().__init__(*args, **kwargs)
        self.resolver = LocationResolver(projection)
        self.zoom = 1.0
        self.popup_event_id: Optional[str] = None
        self.handoff: Optional[Handoff] = None

    def on_loaded(self) -> None:
        self.handoff = consume_handoff(self.session, MAP_HANDOFF_KEY)
        if self.handoff is not None:
            self.focus_event(self.handoff.id)

    def select_period(self, period_id: str) -> MapView:
        self.engine.filter_by_period(period_id)
        return self.render()

    def select_sub_period(self, sub_period_id: str) -> MapView:
        self.engine.filter_by_sub_period(sub_period_id)
        return self.render()

    def show_popup(self, event_id) -> MapView:
        self.popup_event_id = normalize_id(event_id)
        return self.render()

    def close_popup(self) -> MapView:
        self.popup_event_id = None
        return self.render()

    def focus_event(self, event_id) -> None:
        """Select the event's period and sub-period, then open its popup."""
        event = self.catalog.event(event_id)
        if event is None:
            logger.warning("Event %s is not in the loaded collection", event_id)
            return
        if self.catalog.period_for(event) is not None:
            self.engine.filter_by_period(event.get("periodId"))
            if self.catalog.sub_period_for(event) is not None:
                self.engine.filter_by_sub_period(event.get("subPeriodId"))
        self.popup_event_id = document_id(event)

    def select_search_result(self, event_id) -> MapView:
        self.focus_event(event_id)
        self.search = views.SearchPanel(open=False)
        return self.render()

    def zoom_in(self) -> MapView:
        self.zoom = min(round(self.zoom + ZOOM_STEP, 2), MAX_ZOOM)
        return self.render()

    def zoom_out(self) -> MapView:
        self.zoom = max(round(self.zoom - ZOOM_STEP, 2), MIN_ZOOM)
        return self.render()

    def reset_view(self) -> MapView:
        self.zoom = 1.0
        self.popup_event_id = None
        return self.render()

    def search_panel(self, query: str, results: list[dict]) -> views.SearchPanel:
        return views.search_panel(self.catalog, query, results, date_label=display_date)

    def view(self) -> MapView:
        state = self.engine.state
        filtered = self.engine.filtered
        selected = state.period_id if state.period_id != ALL_PERIODS else None
        sub_buttons = views.sub_period_buttons(self.catalog, selected, state.sub_period_id)

        popup = None
        if self.popup_event_id is not None:
            event = self.catalog.event(self.popup_event_id)
            if event is not None:
                popup = views.popup(self.catalog, self.resolver, event)

        return MapView(
            loading=self.loading,
            error=error_banner(self.errors),
            zoom=self.zoom,
            period_buttons=views.period_buttons(
                self.catalog, state.period_id, include_all=False, colored=True,
            ),
            sub_period_buttons=sub_buttons,
            sub_period_placeholder=(
                "No sub-periods available for this period" if selected and not sub_buttons else None
            ),
            markers=views.map_markers(self.catalog, self.resolver, filtered),
            annotations=views.annotations(self.catalog, filtered),
            annotations_placeholder=(
                None if filtered else "No events to display. Select a period to see events."
            ),
            popup=popup,
            search=self.search,
        )


# ============================================================
# Timeline
# ============================================================

class EventModal(BaseModel):
    id: Optional[str]
    title: str
    date: str
    description: str
    period: str
    location: Optional[str] = None
    detail_url: str


class TimelineView(BaseModel):
    loading: bool
    error: Optional[str] = None
    period_buttons: list[views.PeriodButton]
    legend: list[views.LegendItem]
    items: list[views.TimelineItem]
    window: views.TimelineWindow
    stats: views.Stats
    modal: Optional[EventModal] = None
    search: views.SearchPanel


HANDOFF_WINDOW_YEARS = 50


class TimelinePage(PageController):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.modal_event_id: Optional[str] = None
        self.window: Optional[views.TimelineWindow] = None

    def on_loaded(self) -> None:
        handoff = consume_handoff(self.session, TIMELINE_HANDOFF_KEY)
        if handoff is None:
            return
        self.modal_event_id = handoff.id
        if handoff.year is not None:
            self.window = views.TimelineWindow(
                start=handoff.year - HANDOFF_WINDOW_YEARS,
                end=handoff.year + HANDOFF_WINDOW_YEARS,
            )

    def select_period(self, period_id: str) -> TimelineView:
        self.engine.filter_by_period(period_id)
        self.window = None
        return self.render()

    def show_event(self, event_id) -> TimelineView:
        self.modal_event_id = normalize_id(event_id)
        self.search = views.SearchPanel(open=False)
        return self.render()

    def close_modal(self) -> TimelineView:
        self.modal_event_id = None
        return self.render()

    def reset_view(self) -> TimelineView:
        self.window = None
        return self.render()

    def modal(self) -> Optional[EventModal]:
        if self.modal_event_id is None:
            return None
        event = self.catalog.event(self.modal_event_id)
        if event is None:
            logger.warning("Event not found for ID: %s", self.modal_event_id)
            return None
        date_text = format_event_date(event.get("date"))
        if event.get("endDate"):
            date_text += " - " + format_event_date(event.get("endDate"))
        location = event.get("location") if isinstance(event.get("location"), dict) else {}
        return EventModal(
            id=document_id(event),
            title=text_value(event.get("title")) or views.UNTITLED,
            date=date_text,
            description=text_value(event.get("description")) or "No description available.",
            period=self.catalog.period_name(event),
            location=text_value(location.get("name")),
            detail_url=views.detail_url(document_id(event)),
        )

    def view(self) -> TimelineView:
        selected = self.engine.state.period_id
        filtered = self.engine.filtered
        items = views.timeline_items(self.catalog, filtered, selected)
        if self.window is not None:
            window = self.window
        elif selected == ALL_PERIODS:
            window = views.timeline_window([])
        else:
            window = views.timeline_window(items)
        return TimelineView(
            loading=self.loading,
            error=error_banner(self.errors),
            period_buttons=views.period_buttons(self.catalog, selected),
            legend=views.legend(self.catalog, selected),
            items=items,
            window=window,
            stats=views.timeline_stats(self.catalog, filtered, selected),
            modal=self.modal(),
            search=self.search,
        )


# ============================================================
# Event detail
# ============================================================

NO_COORDINATES = "This event does not have location coordinates to display on the map."
NO_EVENT_ID = "This event cannot be opened on another page."


class DetailView(BaseModel):
    loading: bool
    error: Optional[str] = None
    notice: Optional[str] = None
    detail: Optional[views.EventDetail] = None


class DetailPage(PageController):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.event: Optional[dict] = None
        self.fatal: Optional[str] = None
        self.notice: Optional[str] = None

    async def load_event(self, event_id: Optional[str]) -> DetailView:
        """Load the event plus the collections used for labels and related events."""
        if not event_id:
            self.fatal = "No event ID provided"
            return self.render()

        self.loading = True
        self.render()
        event_result, collections = await asyncio.gather(
            self.client.get_event(event_id),
            self.client.load_collections(sub_periods=False),
            return_exceptions=True,
        )
        self.loading = False

        if isinstance(collections, BaseException):
            raise collections
        self.apply_load(collections)

        if isinstance(event_result, ApiError):
            logger.error("Error loading event %s: %s", event_id, event_result)
            self.fatal = f"Failed to load event details: {event_result}"
        elif isinstance(event_result, BaseException):
            raise event_result
        else:
            self.event = event_result
        return self.render()

    def _handoff_id(self) -> Optional[str]:
        event_id = document_id(self.event)
        if event_id is None:
            logger.warning("Event has no usable ID: %r", self.event.get("_id"))
            self.notice = NO_EVENT_ID
            self.render()
        return event_id

    def view_on_map(self) -> Optional[str]:
        """Hand the event to the map page; None when it cannot be plotted."""
        if self.event is None:
            return None
        coords = coordinates_of(self.event.get("location"))
        if coords is None:
            self.notice = NO_COORDINATES
            self.render()
            return None
        event_id = self._handoff_id()
        if event_id is None:
            return None
        write_handoff(self.session, MAP_HANDOFF_KEY, Handoff(
            id=event_id,
            lat=coords.lat,
            lng=coords.lng,
            title=text_value(self.event.get("title")),
            period=self.event.get("periodId"),
        ))
        return MAP_PAGE

    def view_on_timeline(self) -> Optional[str]:
        if self.event is None:
            return None
        event_id = self._handoff_id()
        if event_id is None:
            return None
        write_handoff(self.session, TIMELINE_HANDOFF_KEY, Handoff(
            id=event_id,
            year=date_year(self.event.get("date")),
            period=self.event.get("periodId"),
        ))
        return TIMELINE_PAGE

    def share(self, url: str, share=None, copy=None) -> Optional[ShareOutcome]:
        if self.event is None:
            return None
        outcome = share_event(self.event, url, share=share, copy=copy)
        if outcome is ShareOutcome.COPIED:
            self.notice = "Link copied to clipboard!"
        elif outcome is ShareOutcome.PROMPT:
            self.notice = f"Copy this link: {url}"
        self.render()
        return outcome

    def view(self) -> DetailView:
        if self.fatal is not None:
            return DetailView(loading=False, error=self.fatal)
        detail = views.event_detail(self.catalog, self.event) if self.event is not None else None
        return DetailView(
            loading=self.loading,
            error=error_banner(self.errors),
            notice=self.notice,
            detail=detail,
        )
