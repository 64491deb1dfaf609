from typing import Any, Dict, List, Mapping, Optional, Sequence

from .models import ResumeInput

OPTIONAL_STR_FIELDS = [
    "full_name",
    "university_name",
    "university_type",
    "experience_label",
    "email",
    "github",
    "location",
]
LIST_FIELDS = ["technical_skills", "soft_skills"]

# camelCase spellings accepted on the way in
FIELD_ALIASES = {
    "fullName": "full_name",
    "universityName": "university_name",
    "universityType": "university_type",
    "experienceLabel": "experience_label",
    "technicalSkills": "technical_skills",
    "softSkills": "soft_skills",
}


class MalformedBatchRequest(ValueError):
    """Raised when a batch cannot be started at all."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Malformed batch request")


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def validate_extracted(data: Mapping[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Every field is optional; present fields must have the right shape.
    """
    if not isinstance(data, Mapping):
        return ["Extracted record must be an object"]

    errors: List[str] = []
    fields: Dict[str, Any] = {FIELD_ALIASES.get(k, k): v for k, v in data.items()}

    for f in OPTIONAL_STR_FIELDS:
        if fields.get(f) is not None and not isinstance(fields[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    for f in LIST_FIELDS:
        value = fields.get(f)
        if value is None:
            continue
        if not isinstance(value, (list, tuple)):
            errors.append(f"Field '{f}' must be a list of strings")
        elif not all(isinstance(s, str) for s in value):
            errors.append(f"Field '{f}' must only contain strings")

    return errors


def validate_batch(
    job_text: Optional[str],
    resumes: Any,
    has_extractor: bool = False,
) -> List[str]:
    """Structural checks run before any resume in a batch is touched."""
    errors: List[str] = []

    if not _is_non_empty_str(job_text):
        errors.append("Job description text is required")

    if isinstance(resumes, (str, bytes)) or not isinstance(resumes, Sequence):
        errors.append("Resumes must be a sequence of resume inputs")
        return errors

    seen = set()
    for pos, item in enumerate(resumes, start=1):
        if not isinstance(item, ResumeInput):
            errors.append(f"Resume #{pos} is not a ResumeInput")
            continue
        if not _is_non_empty_str(item.candidate_id):
            errors.append(f"Resume #{pos} is missing a candidate id")
        elif item.candidate_id in seen:
            errors.append(f"Duplicate candidate id: {item.candidate_id}")
        else:
            seen.add(item.candidate_id)
        if not isinstance(item.text, str):
            errors.append(f"Resume '{item.candidate_id}' text must be a string")
        if item.record is None and not has_extractor:
            errors.append(
                f"Resume '{item.candidate_id}' has no extracted record and no extractor was given"
            )

    return errors


def ensure_valid_batch(job_text: Optional[str], resumes: Any, has_extractor: bool = False) -> None:
    errors = validate_batch(job_text, resumes, has_extractor=has_extractor)
    if errors:
        raise MalformedBatchRequest(errors)
