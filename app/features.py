"""
Genre feature vectors and the similarity between them.
"""

from typing import Optional

import numpy as np

from app.models import FeatureVector
from app.utils import clean_string

# drama/romance, action/thriller/crime, comedy/family, sci-fi/fantasy/adventure
GENRE_CLUSTERS = (
    ("drama", "romance"),
    ("action", "thriller", "crime"),
    ("comedy", "family"),
    ("sci-fi", "fantasy", "adventure"),
)
IN_CLUSTER = 0.8
OUT_OF_CLUSTER = 0.2


def extract_features(genre: Optional[str]) -> FeatureVector:
    """
    One value per genre cluster: IN_CLUSTER when any of the cluster names
    appears in the genre string, OUT_OF_CLUSTER otherwise. Clusters are not
    mutually exclusive and a missing genre maps to all OUT_OF_CLUSTER.
    """
    genre = clean_string(genre)
    return tuple(
        IN_CLUSTER if any(name in genre for name in cluster) else OUT_OF_CLUSTER
        for cluster in GENRE_CLUSTERS
    )


def cosine_similarity(a, b) -> float:
    """
    Scalar form of the similarity used in scoring, where candidates are compared
    in bulk with scikit-learn's pairwise cosine_similarity. Both give 0 when
    either vector has zero magnitude.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))
