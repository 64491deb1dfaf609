"""
Summary statistics over a set of scored candidates.

``aggregate`` is a pure function: the same candidates always give the same
summary, and nothing is cached between calls.
"""

import math
from collections import Counter
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence, Tuple

from .models import UNKNOWN, AnalyticsSummary, ScoredCandidate, TopCandidate
from .normalize import normalize_label
from .similarity import round_score

DEFAULT_TOP_N = 2
FRESH_GRADUATE_MARKERS = ("fresh", "graduate")


def is_fresh_graduate(experience_label: str) -> bool:
    label = (experience_label or "").lower()
    return any(marker in label for marker in FRESH_GRADUATE_MARKERS)


def similarity_bucket(score: float) -> float:
    """Lower edge of the score's 0.1-wide bucket: 0.47 -> 0.4, 1.0 -> 1.0."""
    # round() absorbs float error in score * 10 before flooring
    return math.floor(round(score * 10, 6)) / 10


def top_candidates(candidates: Sequence[ScoredCandidate], n: int = DEFAULT_TOP_N) -> Tuple[TopCandidate, ...]:
    # sorted() is stable, so equal scores keep their input order
    ranked = sorted(candidates, key=lambda c: c.final_similarity, reverse=True)
    return tuple(
        TopCandidate(name=c.name, similarity=c.final_similarity, university=c.university)
        for c in ranked[:n]
    )


def _distribution(labels: Iterable) -> Mapping:
    return MappingProxyType(dict(Counter(labels)))


def aggregate(candidates: Iterable[ScoredCandidate], top_n: int = DEFAULT_TOP_N) -> AnalyticsSummary:
    """
    Compute the analytics summary for a batch (or any stored set) of candidates.

    Missing university, university type and experience values are counted
    under "Unknown". An empty input gives an all-zero summary.
    """
    candidates = list(candidates)
    if not candidates:
        return AnalyticsSummary()

    total = len(candidates)
    universities = [normalize_label(c.university, UNKNOWN) for c in candidates]
    experiences = [normalize_label(c.experience_label, UNKNOWN) for c in candidates]
    scores = [c.final_similarity or 0.0 for c in candidates]

    return AnalyticsSummary(
        total_count=total,
        fresh_graduate_count=sum(1 for label in experiences if is_fresh_graduate(label)),
        top_candidates=top_candidates(candidates, top_n),
        unique_university_count=len(set(universities)),
        mean_similarity=round_score(sum(scores) / total),
        experience_distribution=_distribution(experiences),
        university_type_distribution=_distribution(
            normalize_label(c.university_type, UNKNOWN) for c in candidates
        ),
        similarity_distribution=_distribution(similarity_bucket(s) for s in scores),
    )
