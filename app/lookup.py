"""
Scoring, ranking and the fetch orchestration used to recommend movies.
"""

import asyncio

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine_similarity

from app.logger import logger
from app.models import RatedTitle, ScoredCandidate, Title
from app.omdb.client import OmdbClient

LIKED_THRESHOLD = 4
MAX_RATING = 5
CONTENT_WEIGHT = 0.7
EXTERNAL_RATING_DIVISOR = 20

MAX_SEED_GENRES = 3
CANDIDATES_PER_GENRE = 5
TOP_K = 5


def is_liked(rating: int) -> bool:
    return rating >= LIKED_THRESHOLD


def liked_genres(rated: list[RatedTitle], max_genres: int = MAX_SEED_GENRES) -> list[str]:
    """Distinct primary genres of liked titles, in order of first appearance."""
    genres = dict.fromkeys(r.title.genre for r in rated if is_liked(r.rating))
    return list(genres)[:max_genres]


def score_candidates(rated: list[RatedTitle], candidates: list[Title]) -> list[ScoredCandidate]:
    """
    Hybrid score of every candidate: weighted content similarity to the liked
    titles plus a prior from the external rating. Ratings below the liked
    threshold contribute nothing.
    """
    if not candidates:
        return []

    liked = [r for r in rated if is_liked(r.rating)]
    if liked:
        candidate_features = np.array([c.features for c in candidates], dtype=float)
        liked_features = np.array([r.title.features for r in liked], dtype=float)
        weights = np.array([r.rating / MAX_RATING for r in liked], dtype=float)
        sims = pairwise_cosine_similarity(candidate_features, liked_features)
        content_scores = sims @ weights
    else:
        content_scores = np.zeros(len(candidates))

    return [
        ScoredCandidate(
            title=candidate,
            score=float(content * CONTENT_WEIGHT + candidate.rating / EXTERNAL_RATING_DIVISOR),
        )
        for candidate, content in zip(candidates, content_scores)
    ]


def rank_candidates(scored: list[ScoredCandidate], k: int = TOP_K) -> list[ScoredCandidate]:
    # a later duplicate replaces the earlier one
    unique = {}
    for candidate in scored:
        unique[candidate.title.id] = candidate

    ranked = sorted(
        unique.values(),
        key=lambda c: (-c.score, -c.title.rating, c.title.id),
    )
    return ranked[:k]


async def fetch_rated_titles(ratings: dict[str, int], client: OmdbClient) -> list[RatedTitle]:
    movie_ids = list(ratings)
    details = await asyncio.gather(*(client.get_details(movie_id) for movie_id in movie_ids))
    missing = [movie_id for movie_id, title in zip(movie_ids, details) if title is None]
    if missing:
        logger.warning(f"skipping {len(missing)} rated movies without details: {missing}")
    return [
        RatedTitle(title=title, rating=ratings[movie_id])
        for movie_id, title in zip(movie_ids, details)
        if title is not None
    ]


async def fetch_candidates(
    genres: list[str],
    ratings: dict[str, int],
    client: OmdbClient,
    per_genre: int = CANDIDATES_PER_GENRE,
) -> list[Title]:
    candidates = []
    for genre in genres:
        try:
            results = await client.search(genre)
            details = await asyncio.gather(
                *(client.get_details(result.id) for result in results[:per_genre])
            )
            found = [t for t in details if t is not None and t.id not in ratings]
            logger.debug(f"genre {genre!r} yielded {len(found)} candidates")
            candidates.extend(found)
        except Exception as exc:
            logger.error(f"fetching candidates for genre {genre!r} failed: {exc}")
    return candidates


async def recommend(
    ratings: dict[str, int],
    client: OmdbClient,
    k: int = TOP_K,
) -> list[ScoredCandidate]:
    if not ratings:
        return []

    rated = await fetch_rated_titles(ratings, client)
    genres = liked_genres(rated)
    if not genres:
        logger.info("no liked movies, nothing to recommend")
        return []

    candidates = await fetch_candidates(genres, ratings, client)
    recos = rank_candidates(score_candidates(rated, candidates), k=k)
    logger.info(f"found {len(recos)} recommendations from {len(candidates)} candidates")
    return recos
