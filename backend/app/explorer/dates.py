"""
Historical date helpers.

Event dates are ``{"year": int, "month": int?, "day": int?}`` with a
0-based month index and negative years for BC.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

UNKNOWN_DATE = "Unknown date"
DEFAULT_HISTORY_SPAN = (-2879, 2025)  # Hồng Bàng dynasty to present

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
SHORT_MONTHS = [m[:3] for m in MONTHS]


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def date_year(date: Optional[dict]) -> Optional[int]:
    if isinstance(date, dict) and _is_number(date.get("year")):
        return int(date["year"])
    return None


def sort_year(event: dict) -> int:
    """Year used for ordering; a missing year counts as 0."""
    return date_year(event.get("date")) or 0


def _month(date: dict) -> Optional[int]:
    month = date.get("month")
    if _is_number(month) and 0 <= month <= 11:
        return int(month)
    return None


def format_event_date(date: Optional[dict], short_months: bool = False) -> str:
    """
    "938 AD", "March 1288 AD", "March 2, 1288 AD" (or "Mar 2, 1288 AD"
    with short_months, the compact card format).
    """
    year = date_year(date)
    if year is None:
        return UNKNOWN_DATE

    era = " BC" if year < 0 else " AD"
    month = _month(date)
    day = date.get("day")

    if month is not None and _is_number(day):
        names = SHORT_MONTHS if short_months else MONTHS
        return f"{names[month]} {int(day)}, {abs(year)}{era}"
    if month is not None:
        return f"{MONTHS[month]} {abs(year)}{era}"
    return f"{abs(year)}{era}"


def display_date(date: Optional[dict]) -> str:
    """Popup label: the stored display text, else the bare year."""
    if isinstance(date, dict):
        if date.get("displayDate"):
            return str(date["displayDate"])
        if date_year(date) is not None:
            return str(date_year(date))
    return "Unknown"


def format_year(year) -> str:
    if not _is_number(year):
        return "Unknown"
    if year < 0:
        return f"{abs(int(year))} BC"
    if year == 0:
        return "1 BC"
    return f"{int(year)} AD"


def year_range(item: dict) -> str:
    start, end = item.get("startYear"), item.get("endYear")
    if _is_number(start) and _is_number(end):
        return f"{format_year(start)} - {format_year(end)}"
    return "Various dates"


@dataclass(frozen=True, order=True)
class HistoricalDate:
    """A proleptic calendar date that allows years before 1 AD."""
    year: int
    month: int = 0
    day: int = 1

    @classmethod
    def from_event_date(cls, date: Optional[dict]) -> Optional["HistoricalDate"]:
        year = date_year(date)
        if year is None:
            return None
        day = date.get("day")
        return cls(
            year=year,
            month=_month(date) or 0,
            day=int(day) if _is_number(day) else 1,
        )

    def isoformat(self) -> str:
        """Expanded ISO 8601 (``-002879-01-01``), which JavaScript Date parses."""
        sign = "-" if self.year < 0 else "+"
        return f"{sign}{abs(self.year):06d}-{self.month + 1:02d}-{self.day:02d}"

    def as_fractional_year(self) -> float:
        return self.year + self.month / 12 + (self.day - 1) / 365


def years_of_history(events: Iterable[dict]) -> int:
    """Span in years covered by the dated events (end dates included)."""
    years = []
    for event in events:
        year = date_year(event.get("date"))
        if year is None:
            continue
        years.append(year)
        end_year = date_year(event.get("endDate"))
        if end_year is not None:
            years.append(end_year)

    if not years:
        start, end = DEFAULT_HISTORY_SPAN
        return end - start
    return max(years) - min(years)
