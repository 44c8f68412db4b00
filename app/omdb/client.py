"""
Async client for the OMDb movie metadata API.
"""

import re
from typing import Any, Optional

import httpx

from app.features import extract_features
from app.logger import logger
from app.models import SearchResult, Title

OMDB_URL = "https://www.omdbapi.com/"
MAX_SEARCH_RESULTS = 10

DEFAULT_GENRE = "Unknown"
DEFAULT_YEAR = 2020
DEFAULT_RATING = 7.0

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+))")


def _missing(value: Optional[str]) -> Optional[str]:
    if value is None or value == "N/A":
        return None
    return value


def parse_year(raw: Optional[str]) -> int:
    match = _LEADING_INT.match(raw or "")
    year = int(match.group(1)) if match else 0
    return year or DEFAULT_YEAR


def parse_rating(raw: Optional[str]) -> float:
    match = _LEADING_FLOAT.match(raw or "")
    rating = float(match.group(1)) if match else 0.0
    return rating or DEFAULT_RATING


def parse_primary_genre(raw: Optional[str]) -> str:
    genre = (raw or "").split(",")[0].strip()
    return genre or DEFAULT_GENRE


def parse_search_result(item: dict[str, Any]) -> SearchResult:
    return SearchResult(
        id=item["imdbID"],
        title=item.get("Title", ""),
        year=item.get("Year", ""),
        poster=_missing(item.get("Poster")),
        type=item.get("Type", "movie"),
    )


def parse_title(data: dict[str, Any]) -> Title:
    return Title(
        id=data["imdbID"],
        title=data.get("Title", ""),
        genre=parse_primary_genre(data.get("Genre")),
        year=parse_year(data.get("Year")),
        rating=parse_rating(data.get("imdbRating")),
        features=extract_features(data.get("Genre")),
        poster=_missing(data.get("Poster")),
        plot=_missing(data.get("Plot")),
        director=_missing(data.get("Director")),
        actors=_missing(data.get("Actors")),
    )


class OmdbClient:
    def __init__(self, api_key: str, http_client: httpx.AsyncClient, base_url: str = OMDB_URL):
        self.api_key = api_key
        self.http_client = http_client
        self.base_url = base_url

    async def _get(self, params: dict[str, str]) -> Optional[dict[str, Any]]:
        response = await self.http_client.get(
            self.base_url, params={"apikey": self.api_key, **params}
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            logger.error(f"OMDb returned a malformed body for {params}: {data!r}")
            return None
        if data.get("Response") != "True":
            logger.debug(f"OMDb returned no match for {params}: {data.get('Error')}")
            return None
        return data

    async def search(self, query: str) -> list[SearchResult]:
        try:
            data = await self._get({"s": query, "type": "movie"})
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"search for {query!r} failed: {exc}")
            return []
        if data is None:
            return []

        items = data.get("Search")
        if not isinstance(items, list):
            logger.error(f"search for {query!r} returned no result list: {items!r}")
            return []

        results = []
        for item in items[:MAX_SEARCH_RESULTS]:
            if not isinstance(item, dict) or "imdbID" not in item:
                logger.warning(f"ignoring malformed search result: {item!r}")
                continue
            results.append(parse_search_result(item))
        return results

    async def get_details(self, movie_id: str) -> Optional[Title]:
        try:
            data = await self._get({"i": movie_id, "plot": "full"})
            if data is None:
                return None
            return parse_title(data)
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error(f"fetching details of {movie_id} failed: {exc}")
            return None
