"""
Value types passed between the scoring engine, storage and the CLI.

All records are frozen: a ScoredCandidate is created once per scored resume
and an AnalyticsSummary is always rebuilt from the candidates it describes.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .normalize import normalize_label

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"
FRESH_GRADUATE = "Fresh Graduate"


def _as_tuple(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    return tuple(value)


def _skill_list(value) -> Tuple[str, ...]:
    # null and non-string entries are absent, not the text "None"
    return tuple(s for s in _as_tuple(value) if isinstance(s, str))


def _pick(data: Mapping[str, Any], *keys: str):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class ExtractedRecord:
    """Structured fields pulled out of one resume by the extraction service."""

    full_name: str = UNKNOWN
    university_name: str = UNKNOWN
    university_type: str = UNKNOWN
    experience_label: str = UNKNOWN
    technical_skills: Tuple[str, ...] = ()
    soft_skills: Tuple[str, ...] = ()
    email: str = NOT_AVAILABLE
    github: str = NOT_AVAILABLE
    location: str = NOT_AVAILABLE
    employment_details: Tuple[Mapping[str, Any], ...] = ()

    def __post_init__(self):
        for name in ("full_name", "university_name", "university_type", "experience_label"):
            object.__setattr__(self, name, normalize_label(getattr(self, name), UNKNOWN))
        for name in ("email", "github", "location"):
            object.__setattr__(self, name, normalize_label(getattr(self, name), NOT_AVAILABLE))
        object.__setattr__(self, "technical_skills", _skill_list(self.technical_skills))
        object.__setattr__(self, "soft_skills", _skill_list(self.soft_skills))
        object.__setattr__(
            self,
            "employment_details",
            tuple(MappingProxyType(dict(d)) for d in _as_tuple(self.employment_details)),
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ExtractedRecord":
        """Build from a record in either camelCase or snake_case keys."""
        data = data or {}
        return cls(
            full_name=_pick(data, "full_name", "fullName", "name"),
            university_name=_pick(data, "university_name", "universityName", "university"),
            university_type=_pick(data, "university_type", "universityType"),
            experience_label=_pick(data, "experience_label", "experienceLabel", "experience"),
            technical_skills=_pick(data, "technical_skills", "technicalSkills"),
            soft_skills=_pick(data, "soft_skills", "softSkills"),
            email=_pick(data, "email", "email_id"),
            github=_pick(data, "github", "github_link"),
            location=_pick(data, "location"),
            employment_details=_pick(data, "employment_details", "employmentDetails"),
        )

    @classmethod
    def from_extraction(cls, payload: Mapping[str, Any]) -> "ExtractedRecord":
        """
        Build from the raw JSON object returned by the extraction model.

        The model reports experience as free text and says "Fresh Graduate"
        when there is none, so a missing value defaults to that label here.
        """
        university_type = _pick(payload, "university_type", "universityType")
        if university_type is None:
            if payload.get("national_university"):
                university_type = "National"
            elif payload.get("international_university"):
                university_type = "International"
        experience = _pick(payload, "total_professional_experience", "experience")
        record = cls.from_dict(payload)
        return cls(
            full_name=record.full_name,
            university_name=record.university_name,
            university_type=university_type,
            experience_label=normalize_label(experience, FRESH_GRADUATE),
            technical_skills=record.technical_skills,
            soft_skills=record.soft_skills,
            email=record.email,
            github=record.github,
            location=record.location,
            employment_details=record.employment_details,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "full_name": self.full_name,
            "university_name": self.university_name,
            "university_type": self.university_type,
            "experience_label": self.experience_label,
            "technical_skills": list(self.technical_skills),
            "soft_skills": list(self.soft_skills),
            "email": self.email,
            "github": self.github,
            "location": self.location,
            "employment_details": [dict(d) for d in self.employment_details],
        }


@dataclass(frozen=True)
class ResumeInput:
    """One resume queued for scoring. ``record`` is None when it must be extracted."""

    candidate_id: str
    text: str
    record: Optional[ExtractedRecord] = None


@dataclass(frozen=True)
class ScoredCandidate:
    candidate_id: str
    base_similarity: float
    matched_skill_count: int
    final_similarity: float
    name: str = UNKNOWN
    university: str = UNKNOWN
    university_type: str = UNKNOWN
    experience_label: str = UNKNOWN
    technical_skills: Tuple[str, ...] = ()
    summary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["technical_skills"] = list(self.technical_skills)
        return data


@dataclass(frozen=True)
class TopCandidate:
    name: str
    similarity: float
    university: str


class BatchStatus(str, Enum):
    DONE = "done"
    CANCELLED = "cancelled"


class ItemStatus(str, Enum):
    SCORING = "scoring"
    SCORED = "scored"
    FAILED = "failed"


@dataclass(frozen=True)
class ItemFailure:
    candidate_id: str
    error_type: str
    message: str


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one batch: scored candidates in input order plus failures."""

    requested: int
    candidates: Tuple[ScoredCandidate, ...] = ()
    failures: Tuple[ItemFailure, ...] = ()
    status: BatchStatus = BatchStatus.DONE

    @property
    def produced(self) -> int:
        return len(self.candidates)

    def ranked(self) -> Tuple[ScoredCandidate, ...]:
        """Candidates by final similarity, best first (stable on ties)."""
        return tuple(sorted(self.candidates, key=lambda c: c.final_similarity, reverse=True))


def _frozen_counts(counts: Optional[Mapping] = None) -> Mapping:
    return MappingProxyType(dict(counts or {}))


@dataclass(frozen=True)
class AnalyticsSummary:
    total_count: int = 0
    fresh_graduate_count: int = 0
    top_candidates: Tuple[TopCandidate, ...] = ()
    unique_university_count: int = 0
    mean_similarity: float = 0.0
    experience_distribution: Mapping[str, int] = field(default_factory=_frozen_counts)
    university_type_distribution: Mapping[str, int] = field(default_factory=_frozen_counts)
    similarity_distribution: Mapping[float, int] = field(default_factory=_frozen_counts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_count": self.total_count,
            "fresh_graduate_count": self.fresh_graduate_count,
            "top_candidates": [asdict(c) for c in self.top_candidates],
            "unique_university_count": self.unique_university_count,
            "mean_similarity": self.mean_similarity,
            "experience_distribution": dict(self.experience_distribution),
            "university_type_distribution": dict(self.university_type_distribution),
            "similarity_distribution": {
                f"{bucket:.1f}": count for bucket, count in self.similarity_distribution.items()
            },
        }
