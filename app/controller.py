import asyncio
from typing import Optional

from app.db.persistence import (KeyValueStore, load_state, save_ratings,
                                save_search_history, save_watch_history)
from app.history import push_search_history, push_watch_history
from app.logger import logger
from app.lookup import TOP_K, recommend
from app.models import AppState, ScoredCandidate, SearchResult
from app.omdb.client import OmdbClient
from app.search.fuzzy_search import suggest_queries

MIN_QUERY_LENGTH = 2
MIN_HISTORY_QUERY_LENGTH = 3
MIN_RATING = 1
MAX_RATING = 5


class RecommendationInProgressError(Exception):
    pass


class MovieController:
    """Owns the application state and keeps it in sync with the store."""

    def __init__(self, store: KeyValueStore, client: OmdbClient, state: Optional[AppState] = None):
        self.store = store
        self.client = client
        self.state = state if state is not None else AppState()
        self._recommend_lock = asyncio.Lock()

    async def load(self) -> None:
        self.state = await load_state(self.store)

    @property
    def recommending(self) -> bool:
        return self._recommend_lock.locked()

    async def search(self, query: str) -> list[SearchResult]:
        if not query or len(query) < MIN_QUERY_LENGTH:
            self.state.search_results = []
            return []

        results = await self.client.search(query)
        self.state.search_results = results
        if results and len(query) >= MIN_HISTORY_QUERY_LENGTH:
            self.state.search_history = push_search_history(
                self.state.search_history, query, len(results)
            )
            await save_search_history(self.store, self.state.search_history)
        return results

    def suggest(self, query: str, limit: int = 5) -> list[str]:
        return suggest_queries(self.state.search_history, query, limit=limit)

    async def rate(self, movie_id: str, rating: int) -> None:
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(f"rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
        self.state.ratings = {**self.state.ratings, movie_id: rating}
        logger.info(f"rated movie {movie_id} with {rating} - total ratings = {len(self.state.ratings)}")
        await save_ratings(self.store, self.state.ratings)

    async def add_to_watch_history(self, movie: SearchResult) -> None:
        self.state.watch_history = push_watch_history(self.state.watch_history, movie)
        await save_watch_history(self.store, self.state.watch_history)

    async def clear_search_history(self) -> None:
        self.state.search_history = []
        await save_search_history(self.store, [])

    async def clear_watch_history(self) -> None:
        self.state.watch_history = []
        await save_watch_history(self.store, [])

    async def generate_recommendations(self, k: int = TOP_K) -> list[ScoredCandidate]:
        if self._recommend_lock.locked():
            raise RecommendationInProgressError("a recommendation run is already in progress")

        async with self._recommend_lock:
            recos = await recommend(dict(self.state.ratings), self.client, k=k)
            self.state.recommendations = recos
            return recos
