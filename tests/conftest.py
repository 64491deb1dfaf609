"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Dict, Any, List

from resumatch.logger import StructuredLogger, reset_logger
import resumatch.logger as logger_module
from resumatch.models import ExtractedRecord, ResumeInput, ScoredCandidate


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path):
    """Give every test a fresh logger that writes only to a temp dir."""
    reset_logger()
    logger_module._global_logger = StructuredLogger(
        name="resumatch-test", log_dir=tmp_path / "logs", enable_console=False
    )
    yield logger_module._global_logger
    reset_logger()


@pytest.fixture
def job_text() -> str:
    return "Looking for a python engineer with sql experience"


@pytest.fixture
def resume_text() -> str:
    return "Experienced python developer skilled in sql and docker"


@pytest.fixture
def extracted_payload() -> Dict[str, Any]:
    """Raw JSON object as returned by the extraction model."""
    return {
        "full_name": "Ada Lovelace",
        "university_name": "UCL",
        "national_university": True,
        "email_id": "ada@example.com",
        "github_link": "N/A",
        "employment_details": [
            {"company": "Acme", "position": "Engineer", "years": "2", "location": "London", "tag": "full-time"}
        ],
        "total_professional_experience": "2 years",
        "technical_skills": ["Python", "SQL"],
        "soft_skills": ["Communication"],
        "location": "London",
    }


@pytest.fixture
def five_resumes() -> List[ResumeInput]:
    texts = [
        "Python developer with SQL and AWS experience",
        "Java engineer building Spring services",
        "Data analyst fluent in SQL and Excel",
        "Python and Django web engineer",
        "Graphic designer with Figma portfolio",
    ]
    return [
        ResumeInput(
            candidate_id=f"resume-{i}",
            text=text,
            record=ExtractedRecord(full_name=f"Candidate {i}", technical_skills=("python", "sql")),
        )
        for i, text in enumerate(texts, start=1)
    ]


def make_candidate(
    candidate_id: str,
    final: float,
    name: str = None,
    university: str = "MIT",
    university_type: str = "International",
    experience: str = "2 years",
) -> ScoredCandidate:
    return ScoredCandidate(
        candidate_id=candidate_id,
        base_similarity=final,
        matched_skill_count=0,
        final_similarity=final,
        name=name or candidate_id,
        university=university,
        university_type=university_type,
        experience_label=experience,
    )


@pytest.fixture
def candidate_factory():
    return make_candidate


@pytest.fixture
def records_file(tmp_path, extracted_payload) -> Path:
    """Records JSON keyed by resume file name."""
    path = tmp_path / "records.json"
    path.write_text(json.dumps({
        "ada.txt": {
            "full_name": "Ada Lovelace",
            "university_name": "UCL",
            "university_type": "National",
            "experience_label": "2 years",
            "technical_skills": ["python", "sql"],
        },
        "grace": {
            "fullName": "Grace Hopper",
            "universityName": "Yale",
            "experienceLabel": "Fresh Graduate",
            "technicalSkills": ["cobol"],
        },
    }))
    return path
