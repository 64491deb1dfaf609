import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Tuple

from . import __version__
from .analytics import DEFAULT_TOP_N, aggregate
from .batch import score_batch
from .documents import DocumentError, extract_text
from .env import db_path, groq_settings, load_env, log_level
from .extraction import GroqExtractor
from .logger import get_logger
from .models import BatchResult, ExtractedRecord, ItemFailure, ResumeInput
from .schema import MalformedBatchRequest, validate_extracted
from .storage import DEFAULT_OWNER, load_candidates, save_batch


def _load_json(path_str: str):
    path = Path(path_str)
    if not path.exists():
        raise SystemExit(f"Input file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {path}: {e}")


def _records_by_name(data) -> Dict[str, dict]:
    """Records file: an object keyed by resume path, file name or stem."""
    if not isinstance(data, dict):
        raise SystemExit("Records file must be a JSON object keyed by resume file name")
    return data


def _lookup_record(records: Dict[str, dict], path_str: str):
    path = Path(path_str)
    for key in (path_str, path.as_posix(), path.name, path.stem):
        if key in records:
            return records[key]
    return None


def load_resumes(paths: List[str], records: Dict[str, dict]) -> Tuple[List[ResumeInput], List[ItemFailure]]:
    """
    Read resume files in order. Each resume is identified by its path as given.

    Files whose text cannot be read are returned as failures so they still
    count toward the batch size.
    """
    logger = get_logger()
    resumes: List[ResumeInput] = []
    skipped: List[ItemFailure] = []
    for p in paths:
        path = Path(p)
        try:
            text = extract_text(path)
        except DocumentError as e:
            logger.warning("Skipping resume", file=p, error=str(e))
            print(f"[skip] {p} -> {e}", file=sys.stderr)
            skipped.append(ItemFailure(p, type(e).__name__, str(e)))
            continue
        raw = _lookup_record(records, p)
        if raw is not None:
            errors = validate_extracted(raw)
            if errors:
                raise SystemExit(f"Invalid record for {p}: {'; '.join(errors)}")
        record = ExtractedRecord.from_dict(raw) if raw is not None else None
        resumes.append(ResumeInput(candidate_id=p, text=text, record=record))
    return resumes, skipped


def print_batch(result: BatchResult) -> None:
    print(f"Scored {result.produced}/{result.requested} resumes ({result.status.value})")
    for rank, c in enumerate(result.ranked(), start=1):
        print(
            f"{rank:>2}. {c.final_similarity:.2f}  {c.name}  [{c.candidate_id}]"
            f"  base={c.base_similarity:.2f} skills={c.matched_skill_count}"
        )
        if c.summary:
            print(f"    {c.summary}")
    for failure in result.failures:
        print(f"[failed] {failure.candidate_id} -> {failure.error_type}: {failure.message}")


def cmd_score(args: argparse.Namespace) -> None:
    try:
        job_text = extract_text(Path(args.job))
    except DocumentError as e:
        raise SystemExit(str(e))

    records = _records_by_name(_load_json(args.records)) if args.records else {}
    resumes, skipped = load_resumes(args.resume, records)

    extractor = None
    if args.extract or args.summarize:
        try:
            extractor = GroqExtractor(**groq_settings(args.api_key, args.model))
        except ValueError as e:
            raise SystemExit(str(e))

    try:
        result = score_batch(
            job_text,
            resumes,
            extractor=extractor if args.extract else None,
            summarizer=extractor.summarize if args.summarize else None,
        )
    except MalformedBatchRequest as e:
        raise SystemExit(f"Invalid batch: {e}")

    if skipped:
        result = BatchResult(
            requested=result.requested + len(skipped),
            candidates=result.candidates,
            failures=tuple(skipped) + result.failures,
            status=result.status,
        )

    if not args.no_store:
        jd_id = save_batch(
            db_path(args.db),
            job_text,
            resumes,
            result,
            owner=args.owner,
            job_file_name=Path(args.job).name,
            file_names={r.candidate_id: Path(r.candidate_id).name for r in resumes},
        )
        get_logger().info("Batch stored", jd_id=jd_id, db=str(db_path(args.db)))

    if args.json:
        print(json.dumps({
            "requested": result.requested,
            "produced": result.produced,
            "status": result.status.value,
            "results": [c.to_dict() for c in result.candidates],
            "failures": [asdict(f) for f in result.failures],
        }, indent=2))
    else:
        print_batch(result)


def cmd_results(args: argparse.Namespace) -> None:
    candidates = load_candidates(db_path(args.db), owner=args.owner)
    if not candidates:
        print("No results stored.")
        return
    print(f"Found {len(candidates)} results:\n")
    for c in candidates:
        print(f"Candidate: {c.candidate_id}")
        print(f"  Name: {c.name}")
        print(f"  University: {c.university} ({c.university_type})")
        print(f"  Experience: {c.experience_label}")
        print(f"  Similarity: {c.final_similarity:.2f} (base {c.base_similarity:.2f})")
        print()


def cmd_analytics(args: argparse.Namespace) -> None:
    summary = aggregate(load_candidates(db_path(args.db), owner=args.owner), top_n=args.top)
    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return
    print(f"Total resumes: {summary.total_count}")
    print(f"Fresh graduates: {summary.fresh_graduate_count}")
    print(f"Unique universities: {summary.unique_university_count}")
    print(f"Average similarity: {summary.mean_similarity:.2f}")
    if summary.top_candidates:
        print("Top candidates:")
        for c in summary.top_candidates:
            print(f"  {c.similarity:.2f}  {c.name} ({c.university})")
    for title, dist in (
        ("Experience", summary.experience_distribution),
        ("University type", summary.university_type_distribution),
    ):
        if dist:
            print(f"{title}:")
            for label, count in dist.items():
                print(f"  {label}: {count}")
    if summary.similarity_distribution:
        print("Similarity buckets:")
        for bucket in sorted(summary.similarity_distribution):
            print(f"  {bucket:.1f}: {summary.similarity_distribution[bucket]}")


def cmd_validate(args: argparse.Namespace) -> None:
    records = _records_by_name(_load_json(args.records))
    invalid = 0
    for name, record in records.items():
        errors = validate_extracted(record)
        if errors:
            invalid += 1
            print(f"Invalid: {name}")
            for e in errors:
                print(f" - {e}")
    if invalid:
        raise SystemExit(2)
    print(f"Valid ({len(records)} records)")


def main(argv=None):
    load_env()
    parser = argparse.ArgumentParser(prog="resumatch", description="Rank resumes against a job description")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR (or set RESUMATCH_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command")
    scr = subparsers.add_parser("score", help="Score resumes against a job description")
    scr.add_argument("--job", required=True, help="Job description file (.txt, .md, .pdf, .html)")
    scr.add_argument("--resume", required=True, nargs="+", help="One or more resume files")
    scr.add_argument("--records", help="JSON object of extracted records keyed by resume file name")
    scr.add_argument("--extract", action="store_true", help="Extract records with the AI service (needs GROQ_API_KEY)")
    scr.add_argument("--summarize", action="store_true", help="Add a short AI summary per candidate")
    scr.add_argument("--api-key", help="Groq API key (or set GROQ_API_KEY)")
    scr.add_argument("--model", help="Model name (or set GROQ_MODEL)")
    scr.add_argument("--owner", default=DEFAULT_OWNER, help="Owner the results are stored under")
    scr.add_argument("--db", help="SQLite database path (or set RESUMATCH_DB; default: data/resumatch.db)")
    scr.add_argument("--no-store", action="store_true", help="Do not persist results")
    scr.add_argument("--json", action="store_true", help="Print results as JSON")
    scr.set_defaults(func=cmd_score)

    res = subparsers.add_parser("results", help="List stored results")
    res.add_argument("--owner", help="Only results for this owner")
    res.add_argument("--db", help="SQLite database path")
    res.set_defaults(func=cmd_results)

    ana = subparsers.add_parser("analytics", help="Summary statistics over stored results")
    ana.add_argument("--owner", help="Only results for this owner")
    ana.add_argument("--db", help="SQLite database path")
    ana.add_argument("--top", type=int, default=DEFAULT_TOP_N, help="Number of top candidates (default 2)")
    ana.add_argument("--json", action="store_true", help="Print the summary as JSON")
    ana.set_defaults(func=cmd_analytics)

    val = subparsers.add_parser("validate", help="Validate an extracted-records JSON file")
    val.add_argument("--records", required=True, help="JSON object of extracted records")
    val.set_defaults(func=cmd_validate)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    get_logger(level=log_level(args.log_level))

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
