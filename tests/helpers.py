from typing import Optional

from app.features import extract_features
from app.models import SearchResult, Title


def make_title(movie_id: str, genre: str = "Drama", rating: float = 7.0, year: int = 2000) -> Title:
    return Title(
        id=movie_id,
        title=f"Movie {movie_id}",
        genre=genre.split(",")[0].strip(),
        year=year,
        rating=rating,
        features=extract_features(genre),
    )


class FakeOmdbClient:
    def __init__(self, titles: list[Title], searches: Optional[dict[str, list[str]]] = None, failing=()):
        self.titles = {title.id: title for title in titles}
        self.searches = searches or {}
        self.failing = set(failing)
        self.calls = []

    async def search(self, query: str) -> list[SearchResult]:
        self.calls.append(("search", query))
        if query in self.failing:
            raise RuntimeError(f"search for {query} exploded")
        return [
            SearchResult(id=movie_id, title=f"Movie {movie_id}", year="2000", poster=None, type="movie")
            for movie_id in self.searches.get(query, [])
        ]

    async def get_details(self, movie_id: str) -> Optional[Title]:
        self.calls.append(("details", movie_id))
        return self.titles.get(movie_id)


class MemoryStore:
    def __init__(self, data: Optional[dict[str, str]] = None, fail_reads: bool = False, fail_writes: bool = False):
        self.data = dict(data or {})
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise ConnectionError("store unreachable")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise ConnectionError("store unreachable")
        self.data[key] = value


