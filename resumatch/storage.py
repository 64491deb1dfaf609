from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from .database import JobDescription, Result, Resume, get_session, init_database
from .models import BatchResult, ResumeInput, ScoredCandidate

DEFAULT_OWNER = "default"


def save_batch(
    db_path: Path,
    job_text: str,
    resumes: Sequence[ResumeInput],
    result: BatchResult,
    owner: str = DEFAULT_OWNER,
    job_file_name: str = "job.txt",
    file_names: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Persist a finished batch: the job, every requested resume and the
    candidates that were scored. Returns the job description id.
    """
    init_database(db_path)
    file_names = file_names or {}
    session = get_session(db_path)
    try:
        jd = JobDescription(owner=owner, file_name=job_file_name, jd_text=job_text)
        session.add(jd)

        rows: Dict[str, Resume] = {}
        for resume in resumes:
            row = Resume(
                owner=owner,
                candidate_id=resume.candidate_id,
                file_name=file_names.get(resume.candidate_id, resume.candidate_id),
                resume_text=resume.text,
            )
            session.add(row)
            rows[resume.candidate_id] = row

        for candidate in result.candidates:
            session.add(Result(
                resume=rows[candidate.candidate_id],
                job_description=jd,
                full_name=candidate.name,
                university=candidate.university,
                university_type=candidate.university_type,
                experience=candidate.experience_label,
                summary=candidate.summary,
                base_similarity=candidate.base_similarity,
                matched_skill_count=candidate.matched_skill_count,
                similarity=candidate.final_similarity,
                technical_skills=list(candidate.technical_skills),
            ))
        session.commit()
        return jd.id
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _to_candidate(row: Result) -> ScoredCandidate:
    return ScoredCandidate(
        candidate_id=row.resume.candidate_id,
        base_similarity=row.base_similarity,
        matched_skill_count=row.matched_skill_count or 0,
        final_similarity=row.similarity,
        name=row.full_name,
        university=row.university,
        university_type=row.university_type,
        experience_label=row.experience,
        technical_skills=tuple(row.technical_skills or ()),
        summary=row.summary,
    )


def load_candidates(
    db_path: Path,
    owner: Optional[str] = None,
    jd_id: Optional[int] = None,
) -> List[ScoredCandidate]:
    """Stored results as ScoredCandidate records, oldest first."""
    if not db_path.exists():
        return []
    session = get_session(db_path)
    try:
        query = session.query(Result).join(Result.job_description)
        if owner is not None:
            query = query.filter(JobDescription.owner == owner)
        if jd_id is not None:
            query = query.filter(Result.jd_id == jd_id)
        return [_to_candidate(row) for row in query.order_by(Result.id).all()]
    finally:
        session.close()
