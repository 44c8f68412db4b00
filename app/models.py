"""
Data models and types.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional

FeatureVector = tuple[float, float, float, float]


class SearchResult(NamedTuple):
    id: str
    title: str
    year: str
    poster: Optional[str]
    type: str


@dataclass(frozen=True)
class Title:
    id: str
    title: str
    genre: str
    year: int
    rating: float
    features: FeatureVector
    poster: Optional[str] = None
    plot: Optional[str] = None
    director: Optional[str] = None
    actors: Optional[str] = None


class RatedTitle(NamedTuple):
    title: Title
    rating: int


class ScoredCandidate(NamedTuple):
    title: Title
    score: float


@dataclass
class SearchHistoryEntry:
    query: str
    timestamp: int
    result_count: int


@dataclass
class WatchHistoryEntry:
    id: str
    title: str
    year: str
    poster: Optional[str]
    timestamp: int


@dataclass
class AppState:
    ratings: dict[str, int] = field(default_factory=dict)
    search_history: list[SearchHistoryEntry] = field(default_factory=list)
    watch_history: list[WatchHistoryEntry] = field(default_factory=list)
    search_results: list[SearchResult] = field(default_factory=list)
    recommendations: list[ScoredCandidate] = field(default_factory=list)
