"""
Most-recent-first search and watch histories.
"""

from typing import Optional

from app.models import SearchHistoryEntry, SearchResult, WatchHistoryEntry
from app.utils import now_ms

MAX_SEARCH_HISTORY = 20
MAX_WATCH_HISTORY = 50


def push_search_history(
    history: list[SearchHistoryEntry],
    query: str,
    result_count: int,
    now: Optional[int] = None,
) -> list[SearchHistoryEntry]:
    entry = SearchHistoryEntry(
        query=query,
        timestamp=now_ms() if now is None else now,
        result_count=result_count,
    )
    return [entry, *(h for h in history if h.query != query)][:MAX_SEARCH_HISTORY]


def push_watch_history(
    history: list[WatchHistoryEntry],
    movie: SearchResult,
    now: Optional[int] = None,
) -> list[WatchHistoryEntry]:
    entry = WatchHistoryEntry(
        id=movie.id,
        title=movie.title,
        year=movie.year,
        poster=movie.poster,
        timestamp=now_ms() if now is None else now,
    )
    return [entry, *(h for h in history if h.id != movie.id)][:MAX_WATCH_HISTORY]
