from rapidfuzz import distance, process

from app.logger import logger
from app.models import SearchHistoryEntry
from app.utils import clean_string


def suggest_queries(history: list[SearchHistoryEntry], query: str, limit: int = 5) -> list[str]:
    """Previously searched queries closest to a (partial) query."""
    if not history:
        return []

    query = clean_string(query).strip()
    if not query:
        return [entry.query for entry in history[:limit]]

    clean_queries = {i: clean_string(entry.query) for i, entry in enumerate(history)}
    # https://maxbachmann.github.io/RapidFuzz/Usage/distance/JaroWinkler.html
    top_matches = process.extract(
        query,
        clean_queries,
        limit=limit,
        scorer=distance.JaroWinkler.normalized_distance,
    )
    logger.debug(top_matches)
    return [history[i].query for _, _, i in top_matches]
