"""
Load and save the application state as JSON records in a key-value store.

Every record is written in full on each change. Failing reads degrade to an
empty record and failing writes are logged, neither is ever raised.
"""

import json
from typing import Any, Callable, Optional, Protocol

from app.logger import logger
from app.models import AppState, SearchHistoryEntry, WatchHistoryEntry

RATINGS_KEY = "user-ratings"
SEARCH_HISTORY_KEY = "search-history"
WATCH_HISTORY_KEY = "watch-history"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


def ratings_to_json(ratings: dict[str, int]) -> str:
    return json.dumps(ratings)


def ratings_from_json(payload: str) -> dict[str, int]:
    return {str(movie_id): int(rating) for movie_id, rating in json.loads(payload).items()}


def search_history_to_json(history: list[SearchHistoryEntry]) -> str:
    return json.dumps(
        [
            {"query": h.query, "timestamp": h.timestamp, "resultCount": h.result_count}
            for h in history
        ]
    )


def search_history_from_json(payload: str) -> list[SearchHistoryEntry]:
    return [
        SearchHistoryEntry(
            query=h["query"], timestamp=int(h["timestamp"]), result_count=int(h["resultCount"])
        )
        for h in json.loads(payload)
    ]


def watch_history_to_json(history: list[WatchHistoryEntry]) -> str:
    return json.dumps(
        [
            {"id": h.id, "title": h.title, "year": h.year, "poster": h.poster, "timestamp": h.timestamp}
            for h in history
        ]
    )


def watch_history_from_json(payload: str) -> list[WatchHistoryEntry]:
    return [
        WatchHistoryEntry(
            id=h["id"],
            title=h["title"],
            year=h["year"],
            poster=h.get("poster"),
            timestamp=int(h["timestamp"]),
        )
        for h in json.loads(payload)
    ]


async def _load_record(store: KeyValueStore, key: str, parse: Callable[[str], Any], default):
    try:
        payload = await store.get(key)
        if payload is None:
            return default
        return parse(payload)
    except Exception as exc:
        logger.error(f"loading {key} failed, starting fresh: {exc}")
        return default


async def load_state(store: KeyValueStore) -> AppState:
    state = AppState(
        ratings=await _load_record(store, RATINGS_KEY, ratings_from_json, {}),
        search_history=await _load_record(
            store, SEARCH_HISTORY_KEY, search_history_from_json, []
        ),
        watch_history=await _load_record(store, WATCH_HISTORY_KEY, watch_history_from_json, []),
    )
    logger.info(
        f"loaded {len(state.ratings)} ratings, {len(state.search_history)} searches "
        f"and {len(state.watch_history)} watched movies"
    )
    return state


async def _save_record(store: KeyValueStore, key: str, payload: str) -> None:
    try:
        await store.set(key, payload)
    except Exception as exc:
        logger.error(f"failed to save {key}: {exc}")


async def save_ratings(store: KeyValueStore, ratings: dict[str, int]) -> None:
    await _save_record(store, RATINGS_KEY, ratings_to_json(ratings))


async def save_search_history(store: KeyValueStore, history: list[SearchHistoryEntry]) -> None:
    await _save_record(store, SEARCH_HISTORY_KEY, search_history_to_json(history))


async def save_watch_history(store: KeyValueStore, history: list[WatchHistoryEntry]) -> None:
    await _save_record(store, WATCH_HISTORY_KEY, watch_history_to_json(history))
