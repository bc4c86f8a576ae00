"""
Collection joiner.

Holds one page-view snapshot of the three collections and resolves an
event's period and sub-period references into display attributes. A
reference that does not resolve is never an error: the caller gets None
and the labels and colors below fall back to literal defaults.
"""
from typing import Iterable, Optional

from app.explorer.identifiers import document_id, normalize_id

UNKNOWN_PERIOD = "Unknown Period"
UNKNOWN_LOCATION = "Unknown Location"

GROUP_FALLBACK_COLOR = "#94a3b8"
TIMELINE_FALLBACK_COLOR = "#3b82f6"
MARKER_FALLBACK_COLOR = "#667eea"

ALL_PERIODS = "all"

# Keyed by period slug
PERIOD_COLORS = {
    "ancient": "#8B4513",
    "domination": "#8B0000",
    "monarchical": "#FFD700",
    "colonial": "#8B4513",
    "indochina": "#DC143C",
    "war": "#8B0000",
    "modern": "#FF6B35",
}

SUB_PERIOD_COLOR_PALETTES = {
    "ancient": ["#A0522D", "#8B4513", "#654321"],
    "domination": ["#8B0000", "#A52A2A", "#B22222"],
    "monarchical": ["#FFD700", "#FFA500", "#FF8C00"],
    "colonial": ["#D2691E", "#CD853F", "#8B4513"],
    "indochina": ["#DC143C", "#C71585", "#FF1493"],
    "war": ["#8B0000", "#B22222", "#CD5C5C"],
    "modern": ["#FF6B35", "#FF8C42", "#FFA94D"],
}


def text_value(value) -> Optional[str]:
    """The value when it is a non-empty string, else None."""
    return value if isinstance(value, str) and value else None


def display_order(item: dict) -> int:
    return item.get("order") or 0


def by_display_order(items: Iterable[dict]) -> list[dict]:
    """Stable sort by ascending display order, missing order counts as 0."""
    return sorted(items, key=display_order)


def _index(items: list[dict]) -> dict[str, dict]:
    index = {}
    for item in items:
        item_id = document_id(item)
        if item_id is not None and item_id not in index:
            index[item_id] = item
    return index


class Catalog:
    """Joined, read-only view over periods, sub-periods and events."""

    def __init__(
        self,
        periods: Optional[list[dict]] = None,
        sub_periods: Optional[list[dict]] = None,
        events: Optional[list[dict]] = None,
    ):
        self.periods = list(periods or [])
        self.sub_periods = list(sub_periods or [])
        self.events = list(events or [])
        self._periods_by_id = _index(self.periods)
        self._sub_periods_by_id = _index(self.sub_periods)
        self._events_by_id = _index(self.events)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def period(self, period_id) -> Optional[dict]:
        return self._periods_by_id.get(normalize_id(period_id))

    def sub_period(self, sub_period_id) -> Optional[dict]:
        return self._sub_periods_by_id.get(normalize_id(sub_period_id))

    def event(self, event_id) -> Optional[dict]:
        return self._events_by_id.get(normalize_id(event_id))

    def period_for(self, event: dict) -> Optional[dict]:
        return self.period(event.get("periodId"))

    def sub_period_for(self, event: dict) -> Optional[dict]:
        return self.sub_period(event.get("subPeriodId"))

    def sorted_periods(self) -> list[dict]:
        return by_display_order(self.periods)

    def sub_periods_of(self, period_id) -> list[dict]:
        wanted = normalize_id(period_id)
        return by_display_order(
            sp for sp in self.sub_periods
            if wanted is not None and normalize_id(sp.get("periodId")) == wanted
        )

    def related_events(self, event: dict, limit: int = 4) -> list[dict]:
        """Other events of the same period, in collection order."""
        period_id = normalize_id(event.get("periodId"))
        event_id = document_id(event)
        related = [
            other for other in self.events
            if period_id is not None
            and normalize_id(other.get("periodId")) == period_id
            and document_id(other) != event_id
        ]
        return related[:limit]

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def period_name(self, event: dict) -> str:
        period = self.period_for(event)
        if period is None:
            return UNKNOWN_PERIOD
        return text_value(period.get("name")) or UNKNOWN_PERIOD

    @staticmethod
    def location_label(event: dict) -> str:
        location = event.get("location")
        if isinstance(location, dict):
            return (
                text_value(location.get("name"))
                or text_value(location.get("province"))
                or UNKNOWN_LOCATION
            )
        return UNKNOWN_LOCATION

    # ------------------------------------------------------------------
    # Colors
    # ------------------------------------------------------------------

    def group_color(self, item: dict) -> str:
        """Filter-button color: own color, then parent period's, then fallback."""
        if item.get("color"):
            return item["color"]
        parent = self.period(item.get("periodId")) if "periodId" in item else None
        if parent and parent.get("color"):
            return parent["color"]
        return GROUP_FALLBACK_COLOR

    def marker_color(self, event: dict) -> str:
        period = self.period_for(event)
        return (period or {}).get("color") or MARKER_FALLBACK_COLOR

    def _palette_color(self, period: dict, sub_period_id) -> Optional[str]:
        palette = SUB_PERIOD_COLOR_PALETTES.get(period.get("slug"))
        if not palette:
            return None
        siblings = self.sub_periods_of(document_id(period))
        wanted = normalize_id(sub_period_id)
        for position, sibling in enumerate(siblings):
            if document_id(sibling) == wanted:
                return palette[position % len(palette)]
        return None

    def timeline_color(self, event: dict, selected_period_id: str = ALL_PERIODS) -> str:
        """
        Sub-period shade of the period palette while one period is selected,
        otherwise the slug color of the event's period.
        """
        period = self.period_for(event)
        if selected_period_id != ALL_PERIODS and event.get("subPeriodId") and period:
            if self.sub_period_for(event) is not None:
                color = self._palette_color(period, event["subPeriodId"])
                if color:
                    return color
        if period and period.get("slug"):
            return PERIOD_COLORS.get(period["slug"], TIMELINE_FALLBACK_COLOR)
        return TIMELINE_FALLBACK_COLOR

    def legend_color(self, item: dict, selected_period_id: str = ALL_PERIODS) -> str:
        if item.get("color"):
            return item["color"]
        if item.get("slug") in PERIOD_COLORS:
            return PERIOD_COLORS[item["slug"]]
        if item.get("periodId") and selected_period_id != ALL_PERIODS:
            period = self.period(item["periodId"])
            if period and period.get("slug"):
                color = self._palette_color(period, document_id(item))
                return color or PERIOD_COLORS.get(period["slug"], TIMELINE_FALLBACK_COLOR)
        return TIMELINE_FALLBACK_COLOR

    def legend_entries(self, selected_period_id: str = ALL_PERIODS) -> list[dict]:
        """Periods when nothing is selected, else the selected period's sub-periods."""
        if selected_period_id == ALL_PERIODS:
            return self.sorted_periods()
        return self.sub_periods_of(selected_period_id)
