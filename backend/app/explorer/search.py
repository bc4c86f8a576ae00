"""
Client-side event search.

A query is split on whitespace; an event matches when every word occurs
(case-insensitively) somewhere in its title, localized title or
description. The scan always covers the full collection, regardless of
the active period filters. Two rankings exist:

* TITLE_FIRST - exact title, then title containing the query, then the
  rest in collection order (list and timeline pages);
* SCORED - tiered numeric score, highest first (map page).
"""
from enum import Enum
from typing import Iterable, Optional

MIN_QUERY_LENGTH = 2
LIST_RESULT_LIMIT = 10
MAP_RESULT_LIMIT = 8

SCORE_EXACT_TITLE = 1000
SCORE_TITLE_PREFIX = 500
SCORE_TITLE_CONTAINS = 300
SCORE_SHORT_DESCRIPTION = 100
SCORE_DESCRIPTION = 50


class Ranking(str, Enum):
    TITLE_FIRST = "title-first"
    SCORED = "scored"


def _lower(value) -> str:
    return value.lower() if isinstance(value, str) else ""


def query_words(query: Optional[str]) -> list[str]:
    return _lower(query).split()


def is_searchable(query: Optional[str], strip: bool = False) -> bool:
    """Length check on the raw query; the map page trims it first."""
    if not query:
        return False
    return len(query.strip() if strip else query) >= MIN_QUERY_LENGTH


def searchable_text(event: dict) -> str:
    return " ".join((
        _lower(event.get("title")),
        _lower(event.get("titleVietnamese")),
        _lower(event.get("description")),
    ))


def matches(event: dict, words: list[str]) -> bool:
    text = searchable_text(event)
    return all(word in text for word in words)


def title_rank(event: dict, query: str) -> int:
    """0 for an exact title, 1 for a title containing the query, else 2."""
    phrase = query.strip().lower()
    title = _lower(event.get("title"))
    if title == phrase:
        return 0
    if phrase in title:
        return 1
    return 2


def _tier(event: dict, phrase: str) -> int:
    titles = [_lower(event.get("title")), _lower(event.get("titleVietnamese"))]
    if phrase in titles:
        return SCORE_EXACT_TITLE
    if any(t.startswith(phrase) for t in titles if t):
        return SCORE_TITLE_PREFIX
    if any(phrase in t for t in titles):
        return SCORE_TITLE_CONTAINS
    if phrase in _lower(event.get("shortDescription")):
        return SCORE_SHORT_DESCRIPTION
    if phrase in _lower(event.get("description")):
        return SCORE_DESCRIPTION
    return 0


def relevance_score(event: dict, query: str) -> int:
    """
    Tier of the whole query; when the words only occur apart, the weakest
    tier among the individual words.
    """
    phrase = query.strip().lower()
    score = _tier(event, phrase)
    if score:
        return score
    words = query_words(query)
    if not words:
        return 0
    return min(_tier(event, word) for word in words)


def search_events(
    events: Iterable[dict],
    query: Optional[str],
    limit: int = LIST_RESULT_LIMIT,
    ranking: Ranking = Ranking.TITLE_FIRST,
    strip: bool = False,
) -> list[dict]:
    """Top `limit` events matching every word of the query, best first."""
    if not is_searchable(query, strip):
        return []

    words = query_words(query)
    found = [event for event in events if matches(event, words)]

    if ranking is Ranking.SCORED:
        scored = [(relevance_score(event, query), event) for event in found]
        scored = [item for item in scored if item[0] > 0]
        scored.sort(key=lambda item: item[0], reverse=True)
        found = [event for _, event in scored]
    else:
        found.sort(key=lambda event: title_rank(event, query))

    return found[:limit]
