#!/usr/bin/env python3
"""Entry point: rank job postings against a résumé."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobmatch.config import load_settings
from jobmatch.errors import ParseError
from jobmatch.log import configure, get_logger
from jobmatch.models import ScoredJob

log = get_logger(__name__)


def _print_section(title: str, jobs: list[ScoredJob], top: int) -> None:
    print(f"\n{title} ({len(jobs)})")
    print("─" * 50)
    if not jobs:
        print("  (none)")
        return
    for s in jobs[:top]:
        print(f"  {s.confidence:>3}%  {s.job.title} @ {s.job.company}  [{s.job.location}]")
        print(
            f"        role={s.scores.role} exp={s.scores.experience} "
            f"content={s.scores.content} total={s.scores.total:.2f}"
        )
        for reason in s.explanation:
            print(f"        - {reason}")
        if s.job.url and s.job.url != "#":
            print(f"        {s.job.url}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rank job postings against a resume.")
    parser.add_argument("resume", type=Path, help="resume file (.pdf, .docx or .txt)")
    parser.add_argument("--jobs", type=Path, help="JSON/YAML file of postings; searches sources when omitted")
    parser.add_argument("--settings", type=Path, help="settings YAML (default: config/settings.yaml)")
    parser.add_argument("--workers", type=int, help="threads used to score postings")
    parser.add_argument("--top", type=int, default=10, help="postings shown per category")
    parser.add_argument("-v", "--verbose", action="store_true", help="log per-posting score breakdowns")
    args = parser.parse_args(argv)
    configure("DEBUG" if args.verbose else None)

    from jobmatch.pipeline import run

    settings = load_settings(args.settings)
    if args.workers:
        settings["workers"] = max(1, args.workers)

    try:
        profile, result = run(args.resume, jobs_path=args.jobs, settings=settings)
    except ParseError as exc:
        log.error("Could not parse %s: %s", args.resume, exc)
        return 1

    print(f"\n{profile.primary_role.title} ({profile.primary_role.type}), "
          f"{profile.total_years_experience} yrs, level={profile.seniority_level}")
    if profile.skills.technical:
        print("Skills: " + ", ".join(profile.skills.technical))
    _print_section("Recommended", result.recommended, args.top)
    _print_section("Worth exploring", result.worth_exploring, args.top)
    print(f"\n{len(result.all)} postings scored.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
