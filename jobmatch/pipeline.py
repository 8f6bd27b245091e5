"""
Résumé-to-shortlist pipeline.

Runs: parse résumé → gather postings (file or job sources) → score/rank → summary.
"""
from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Iterable

import yaml

from jobmatch.config import DEFAULT_SETTINGS, get_env, load_settings
from jobmatch.lexicon import load_lexicon
from jobmatch.log import get_logger
from jobmatch.matcher import match_jobs
from jobmatch.models import CandidateProfile, JobPosting, MatchResult
from jobmatch.queries import build_search_queries
from jobmatch.resume_parser import parse_resume
from jobmatch.sources import JobSource, get_sources

log = get_logger(__name__)


def _search_source(source: JobSource, queries: list[str], limit: int) -> list[JobPosting]:
    """Run one source; a failure contributes no postings."""
    name = getattr(source, "name", source.__class__.__name__)
    try:
        results = source.search(queries, limit=limit)
        log.info("[%s] returned %d jobs", name, len(results))
        return results
    except Exception as exc:
        log.error("[%s] FAILED: %s", name, exc)
        return []


def dedupe_postings(postings: Iterable[JobPosting]) -> list[JobPosting]:
    """Drop repeats of the same title at the same company; first one wins."""
    seen: set[str] = set()
    unique: list[JobPosting] = []
    for p in postings:
        key = f"{p.title.lower().strip()}|{p.company.lower().strip()}"
        if key not in seen:
            seen.add(key)
            unique.append(p)
    return unique


def gather_postings(
    sources: list[JobSource], queries: list[str], limit: int = 30,
) -> list[JobPosting]:
    """Query all sources in parallel and merge their postings in source order."""
    if not sources:
        return []
    log.info("Searching %d source(s) in parallel...", len(sources))
    batches: dict[int, list[JobPosting]] = {}
    with ThreadPoolExecutor(max_workers=len(sources)) as pool:
        futures = {
            pool.submit(_search_source, src, queries, limit): idx
            for idx, src in enumerate(sources)
        }
        for future in as_completed(futures):
            batches[futures[future]] = future.result()

    merged = [p for idx in sorted(batches) for p in batches[idx]]
    unique = dedupe_postings(merged)
    log.info("Total unique jobs from sources: %d", len(unique))
    return unique


def load_postings(path: Path) -> list[JobPosting]:
    """Read postings from a JSON or YAML file holding a list of job records."""
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    if isinstance(data, dict):
        data = data.get("jobs", [])
    if not isinstance(data, list):
        raise ValueError(f"{path.name} must contain a list of jobs")
    postings = [JobPosting.from_dict(item) for item in data if isinstance(item, dict)]
    log.info("Loaded %d postings from %s", len(postings), path.name)
    return postings


def summarize(profile: CandidateProfile, result: MatchResult) -> dict[str, Any]:
    return {
        "primary_role": profile.primary_role.title,
        "primary_type": profile.primary_role.type,
        "total_years": profile.total_years_experience,
        "seniority": profile.seniority_level,
        "skills": list(profile.skills.technical),
        "jobs_scored": len(result.all),
        "recommended": len(result.recommended),
        "worth_exploring": len(result.worth_exploring),
    }


def run(
    resume_path: Path,
    *,
    jobs_path: Path | None = None,
    settings: dict[str, Any] | None = None,
) -> tuple[CandidateProfile, MatchResult]:
    settings = {**DEFAULT_SETTINGS, **(settings if settings is not None else load_settings())}
    lexicon = load_lexicon(settings.get("lexicon_path"))

    profile = parse_resume(resume_path, lexicon=lexicon)

    if jobs_path is not None:
        postings = load_postings(jobs_path)
    else:
        queries = build_search_queries(profile, lexicon, max_queries=settings["max_queries"])
        postings = gather_postings(get_sources(settings, get_env), queries)

    result = match_jobs(profile, postings, lexicon=lexicon, workers=settings["workers"])
    log.info("Run complete: %s", summarize(profile, result))
    return profile, result
