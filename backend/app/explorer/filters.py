"""
Period/sub-period filtering and sorting over the joined event set.

`apply_filters` is a pure function of (events, state). `FilterEngine` owns
the state for one page controller and keeps the filtered view current as
selections change or data is reloaded.
"""
import logging
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.explorer.catalog import ALL_PERIODS, Catalog, text_value
from app.explorer.dates import sort_year
from app.explorer.identifiers import normalize_id
from app.explorer.search import LIST_RESULT_LIMIT, Ranking, search_events

logger = logging.getLogger(__name__)


class SortMode(str, Enum):
    DATE_ASC = "date-asc"
    DATE_DESC = "date-desc"
    TITLE_ASC = "name-asc"
    TITLE_DESC = "name-desc"


@dataclass
class FilterState:
    period_id: str = ALL_PERIODS
    sub_period_id: Optional[str] = None
    sort_mode: SortMode = SortMode.DATE_ASC
    query: str = ""


def title_sort_key(event: dict) -> tuple[str, str]:
    """Case-insensitive, accent-folded title ("Đ" sorts with "D")."""
    title = (text_value(event.get("title")) or "").casefold()
    decomposed = unicodedata.normalize("NFKD", title.replace("đ", "d"))
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return folded, title


def sort_events(events: list[dict], mode: SortMode) -> list[dict]:
    """Stable ordering; events with equal keys keep their input order."""
    mode = SortMode(mode)
    if mode is SortMode.DATE_ASC:
        return sorted(events, key=sort_year)
    if mode is SortMode.DATE_DESC:
        return sorted(events, key=sort_year, reverse=True)
    if mode is SortMode.TITLE_ASC:
        return sorted(events, key=title_sort_key)
    return sorted(events, key=title_sort_key, reverse=True)


def apply_filters(events: list[dict], state: FilterState) -> list[dict]:
    result = list(events)
    if state.period_id != ALL_PERIODS:
        result = [e for e in result if normalize_id(e.get("periodId")) == state.period_id]
    if state.sub_period_id is not None:
        result = [e for e in result if normalize_id(e.get("subPeriodId")) == state.sub_period_id]
    return sort_events(result, state.sort_mode)


class FilterEngine:
    """Filter state plus the filtered view it produces."""

    def __init__(self, catalog: Optional[Catalog] = None, state: Optional[FilterState] = None):
        self.catalog = catalog or Catalog()
        self.state = state or FilterState()
        self.filtered: list[dict] = []
        self.refresh()

    def refresh(self) -> list[dict]:
        self.filtered = apply_filters(self.catalog.events, self.state)
        return self.filtered

    def reload(self, catalog: Catalog) -> list[dict]:
        """Swap in freshly loaded data and re-apply the current selection."""
        self.catalog = catalog
        return self.refresh()

    def filter_by_period(self, period_id) -> list[dict]:
        normalized = ALL_PERIODS if period_id == ALL_PERIODS else normalize_id(period_id)
        self.state.period_id = normalized or ALL_PERIODS
        self.state.sub_period_id = None
        logger.debug("Filtering by period %s", self.state.period_id)
        return self.refresh()

    def filter_by_sub_period(self, sub_period_id) -> list[dict]:
        self.state.sub_period_id = normalize_id(sub_period_id)
        return self.refresh()

    def clear_sub_period(self) -> list[dict]:
        return self.filter_by_sub_period(None)

    def sort(self, mode: SortMode) -> list[dict]:
        self.state.sort_mode = SortMode(mode)
        return self.refresh()

    def search(
        self,
        query: Optional[str],
        limit: int = LIST_RESULT_LIMIT,
        ranking: Ranking = Ranking.TITLE_FIRST,
        strip: bool = False,
    ) -> list[dict]:
        """Search the full collection; period selections do not apply."""
        self.state.query = query or ""
        return search_events(self.catalog.events, query, limit=limit, ranking=ranking, strip=strip)
