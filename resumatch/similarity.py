"""
Bag-of-words cosine similarity with a per-skill keyword boost.

Scores are deterministic, bounded to [0, 1] and rounded to two decimals
(half away from zero).
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple, Sequence

from .normalize import normalize
from .vectors import build_vectors

SKILL_BOOST = 0.05
MAX_SCORE = 1.0

_CENTS = Decimal("0.01")


class SkillScore(NamedTuple):
    base: float
    matched_skills: int
    final: float


def round_score(value: float) -> float:
    """Round to two decimals, halves away from zero."""
    # repr() keeps 0.29 + 0.1 == 0.38999999999999996 from rounding to 0.38
    return float(Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _clamp(value: float) -> float:
    return max(0.0, min(value, MAX_SCORE))


def magnitude(vector: Sequence[int]) -> float:
    return math.sqrt(sum(v * v for v in vector))


def cosine(vector_a: Sequence[int], vector_b: Sequence[int]) -> float:
    """
    Cosine similarity of two frequency vectors over the same vocabulary.

    A zero vector on either side scores 0.0 rather than raising.
    """
    if len(vector_a) != len(vector_b):
        raise ValueError(
            f"Vectors must share a vocabulary (got {len(vector_a)} and {len(vector_b)})"
        )
    mag_a = magnitude(vector_a)
    mag_b = magnitude(vector_b)
    if mag_a == 0 or mag_b == 0:
        return 0.0
    dot = sum(a * b for a, b in zip(vector_a, vector_b))
    return round_score(_clamp(dot / (mag_a * mag_b)))


def text_similarity(text_a: str, text_b: str) -> float:
    """Base similarity of two raw documents."""
    _, vector_a, vector_b = build_vectors(normalize(text_a), normalize(text_b))
    return cosine(vector_a, vector_b)


def count_skill_matches(job_text: str, technical_skills: Iterable[str]) -> int:
    """
    Count skills that occur (case-insensitively, as substrings) in the job text.

    Every entry counts on its own: a skill listed twice is matched twice.
    Blank entries never match.
    """
    job_lower = (job_text or "").lower()
    matched = 0
    for skill in technical_skills or ():
        if not isinstance(skill, str) or not skill.strip():
            continue
        if skill.lower() in job_lower:
            matched += 1
    return matched


def adjust(base_similarity: float, job_text: str, technical_skills: Iterable[str]) -> float:
    """Apply the skill boost to a base score, capped at 1.0."""
    boost = SKILL_BOOST * count_skill_matches(job_text, technical_skills)
    return round_score(min(base_similarity + boost, MAX_SCORE))


def score_resume(resume_text: str, job_text: str, technical_skills: Sequence[str]) -> SkillScore:
    """Run the full scoring pipeline for one resume against one job."""
    base = text_similarity(resume_text, job_text)
    matched = count_skill_matches(job_text, technical_skills)
    final = adjust(base, job_text, technical_skills)
    return SkillScore(base=base, matched_skills=matched, final=final)
