"""
Batch scoring: one job description against an ordered list of resumes.

Resumes are processed one at a time. A failure while extracting or scoring
one resume drops that resume only; the batch carries on and reports how many
candidates were produced out of how many were requested.
"""

import threading
from typing import Callable, Iterator, List, Optional, Sequence, Union

from .logger import get_logger
from .models import (
    BatchResult,
    BatchStatus,
    ExtractedRecord,
    ItemFailure,
    ItemStatus,
    ResumeInput,
    ScoredCandidate,
)
from .schema import ensure_valid_batch
from .similarity import score_resume

Extractor = Callable[[str, str], ExtractedRecord]
Summarizer = Callable[[str, str], str]
Outcome = Union[ScoredCandidate, ItemFailure]


def score_candidate(
    resume: ResumeInput,
    job_text: str,
    extractor: Optional[Extractor] = None,
    summarizer: Optional[Summarizer] = None,
) -> ScoredCandidate:
    """Score a single resume. Exceptions propagate to the caller."""
    record = resume.record
    if record is None:
        record = extractor(resume.text, job_text)
    if not isinstance(record, ExtractedRecord):
        record = ExtractedRecord.from_dict(record)

    score = score_resume(resume.text, job_text, record.technical_skills)
    summary = summarizer(resume.text, job_text) if summarizer else None

    return ScoredCandidate(
        candidate_id=resume.candidate_id,
        base_similarity=score.base,
        matched_skill_count=score.matched_skills,
        final_similarity=score.final,
        name=record.full_name,
        university=record.university_name,
        university_type=record.university_type,
        experience_label=record.experience_label,
        technical_skills=record.technical_skills,
        summary=summary,
    )


def _attempt(
    resume: ResumeInput,
    job_text: str,
    extractor: Optional[Extractor],
    summarizer: Optional[Summarizer],
) -> Outcome:
    logger = get_logger()
    logger.debug(
        "Scoring resume", candidate_id=resume.candidate_id, status=ItemStatus.SCORING.value
    )
    try:
        candidate = score_candidate(resume, job_text, extractor, summarizer)
    except Exception as e:
        error_type = type(e).__name__
        logger.record_failure(error_type)
        logger.warning(
            "Resume dropped from batch",
            candidate_id=resume.candidate_id,
            status=ItemStatus.FAILED.value,
            error_type=error_type,
            error=str(e),
        )
        return ItemFailure(resume.candidate_id, error_type, str(e))

    logger.record_scored()
    logger.debug(
        "Resume scored",
        candidate_id=candidate.candidate_id,
        status=ItemStatus.SCORED.value,
        base=candidate.base_similarity,
        final=candidate.final_similarity,
    )
    return candidate


def iter_scored(
    job_text: str,
    resumes: Sequence[ResumeInput],
    extractor: Optional[Extractor] = None,
    summarizer: Optional[Summarizer] = None,
) -> Iterator[Outcome]:
    """
    Yield a ScoredCandidate or an ItemFailure per resume, in input order.

    The batch is validated before the generator is returned, so
    MalformedBatchRequest surfaces at call time. Stopping iteration early
    abandons the rest of the batch without affecting what was yielded.
    """
    ensure_valid_batch(job_text, resumes, has_extractor=extractor is not None)
    get_logger().record_batch(len(resumes))
    return (_attempt(resume, job_text, extractor, summarizer) for resume in resumes)


def score_batch(
    job_text: str,
    resumes: Sequence[ResumeInput],
    extractor: Optional[Extractor] = None,
    summarizer: Optional[Summarizer] = None,
    cancel_event: Optional[threading.Event] = None,
) -> BatchResult:
    """
    Score every resume against the job description.

    Args:
        job_text: Job description text (required, non-blank)
        resumes: Resumes in the order results should be reported
        extractor: Called for resumes without an extracted record
        summarizer: Optional per-candidate summary generator
        cancel_event: Checked before each resume; once set, the candidates
            scored so far are returned and the rest are not started.
            A KeyboardInterrupt while scoring is treated the same way.

    Returns:
        BatchResult with candidates in input order

    Raises:
        MalformedBatchRequest: If the batch is structurally invalid
    """
    ensure_valid_batch(job_text, resumes, has_extractor=extractor is not None)
    logger = get_logger()
    logger.record_batch(len(resumes))

    candidates: List[ScoredCandidate] = []
    failures: List[ItemFailure] = []
    status = BatchStatus.DONE

    for resume in resumes:
        if cancel_event is not None and cancel_event.is_set():
            status = BatchStatus.CANCELLED
            break
        try:
            outcome = _attempt(resume, job_text, extractor, summarizer)
        except KeyboardInterrupt:
            logger.warning("Batch interrupted", candidate_id=resume.candidate_id)
            status = BatchStatus.CANCELLED
            break
        if isinstance(outcome, ItemFailure):
            failures.append(outcome)
        else:
            candidates.append(outcome)

    result = BatchResult(
        requested=len(resumes),
        candidates=tuple(candidates),
        failures=tuple(failures),
        status=status,
    )
    logger.info(
        f"Batch {status.value}: {result.produced}/{result.requested} candidates scored",
        requested=result.requested,
        produced=result.produced,
        failed=len(failures),
    )
    return result
