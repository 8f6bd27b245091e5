"""Score job postings against a candidate profile and bucket the results.

Each posting gets three sub-scores (role alignment, experience fit,
skill overlap), a weighted total, a display confidence and a category.
Ranking always uses the raw total; confidence only drives the buckets.
"""
from __future__ import annotations

import math
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from jobmatch.lexicon import Lexicon, load_lexicon
from jobmatch.log import get_logger
from jobmatch.models import (
    RECOMMENDED,
    UNRANKED,
    WORTH_EXPLORING,
    CandidateProfile,
    JobPosting,
    MatchResult,
    ScoreBreakdown,
    ScoredJob,
)

log = get_logger(__name__)

ROLE_WEIGHT = 0.40
EXPERIENCE_WEIGHT = 0.35
CONTENT_WEIGHT = 0.25

# Role ladder
ROLE_PRIMARY = 100
ROLE_HISTORICAL = 85
ROLE_FAMILY = 70
ROLE_RELATED_TYPE = 50
ROLE_FLOOR = 20

UNDER_QUALIFIED_BASE = 70
UNDER_QUALIFIED_SLOPE = 15
OVER_QUALIFIED_BASE = 90
OVER_QUALIFIED_SLOPE = 10
OVER_QUALIFIED_FLOOR = 40

# Career pivot: lots of total experience, little in the posting's domain
PIVOT_MIN_TOTAL_YEARS = 5
PIVOT_MAX_RELEVANT_YEARS = 3
PIVOT_SENIOR_CAP = 40
PIVOT_ACCESSIBLE_FLOOR = 70
_PIVOT_CAPPED_LEVELS = ("senior", "lead", "manager")
_PIVOT_BOOSTED_LEVELS = ("mid", "junior", "entry")

# 1.2 multiplier on a percent scale
CONTENT_SCALE = 120
CONTENT_NO_REQUIREMENTS_WITH_SKILLS = 75
CONTENT_NO_REQUIREMENTS_NO_SKILLS = 50

_UNBOUNDED_BAND = (0, 100)

_REQUIRED_YEARS_RES = (
    re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of\s*)?experience", re.IGNORECASE),
    re.compile(r"(\d+)\s*-\s*(\d+)\s*years?", re.IGNORECASE),
    re.compile(r"minimum\s*(\d+)\s*years?", re.IGNORECASE),
    re.compile(r"at least\s*(\d+)\s*years?", re.IGNORECASE),
)


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


# ── Role alignment ───────────────────────────────────────────────────────


def titles_match(title1: str, title2: str, lexicon: Lexicon) -> bool:
    """Substring containment either way, or both titles in one synonym group."""
    if not title1 or not title2:
        return False
    if title1 in title2 or title2 in title1:
        return True
    for canonical, synonyms in lexicon.role_synonyms.items():
        variants = (canonical, *synonyms)
        if any(v in title1 for v in variants) and any(v in title2 for v in variants):
            return True
    return False


def same_role_family(job_title: str, candidate_title: str, lexicon: Lexicon) -> bool:
    if not candidate_title:
        return False
    for keywords in lexicon.role_families.values():
        if any(kw in job_title for kw in keywords) and any(kw in candidate_title for kw in keywords):
            return True
    return False


def related_role_type(job_title: str, role_type: str | None, lexicon: Lexicon) -> bool:
    if not role_type:
        return False
    keywords = lexicon.role_type_keywords.get(role_type, ())
    return any(kw in job_title for kw in keywords)


def role_score(profile: CandidateProfile, job: JobPosting, lexicon: Lexicon) -> int:
    job_title = (job.title or "").lower()
    primary = (profile.primary_role.title or "").lower() if profile.primary_role else ""
    history = [r.title.lower() for r in profile.roles]

    if titles_match(job_title, primary, lexicon):
        return ROLE_PRIMARY
    if any(titles_match(job_title, title, lexicon) for title in history):
        return ROLE_HISTORICAL
    if same_role_family(job_title, primary, lexicon):
        return ROLE_FAMILY
    role_type = profile.primary_role.type if profile.primary_role else None
    if related_role_type(job_title, role_type, lexicon):
        return ROLE_RELATED_TYPE
    return ROLE_FLOOR


# ── Experience fit ───────────────────────────────────────────────────────


def extract_job_level(title: str) -> str:
    """Seniority level implied by a job title; ``mid`` when nothing matches."""
    t = (title or "").lower()
    if "intern" in t:
        return "intern"
    if "junior" in t or "jr." in t or "entry" in t:
        return "junior"
    if "principal" in t:
        return "principal"
    if "staff" in t:
        return "staff"
    if "senior" in t or "sr." in t:
        return "senior"
    if "lead" in t:
        return "lead"
    if "manager" in t and "product manager" not in t:
        return "manager"
    if "director" in t:
        return "director"
    if "vp" in t or "vice president" in t:
        return "vp"
    return "mid"


def extract_required_experience(job: JobPosting, lexicon: Lexicon) -> int:
    """Years the posting asks for; the job level's minimum when unstated."""
    description = (job.description or "").lower()
    for pattern in _REQUIRED_YEARS_RES:
        match = pattern.search(description)
        if match:
            return int(match.group(1))
    level = extract_job_level(job.title)
    return lexicon.experience_levels.get(level, _UNBOUNDED_BAND)[0]


def relevant_experience(profile: CandidateProfile, job: JobPosting) -> int:
    """Years in the profile category that matches the posting's domain."""
    t = (job.title or "").lower()
    if "engineer" in t or "developer" in t:
        return profile.category_years("Engineering")
    if "product manager" in t or "program manager" in t:
        return profile.category_years("Product")
    if "designer" in t or "ux" in t or "ui" in t:
        return profile.category_years("Design")
    if "data" in t or "analyst" in t or "ml" in t:
        return profile.category_years("Data")
    if "manager" in t or "director" in t or "lead" in t:
        return profile.category_years("Management")
    return profile.total_years_experience


def band_score(relevant: int, band: tuple[int, int]) -> int:
    """Score a candidate's relevant years against a level's [min, max] band.

    Checks run in a fixed order: perfect fit, close fit, under-qualified,
    over-qualified. Boundary values take the first branch they satisfy.
    """
    lo, hi = band
    if lo <= relevant <= hi + 2:
        return 100
    if lo - 1 <= relevant <= hi + 3:
        return 80
    if relevant < lo:
        return max(0, UNDER_QUALIFIED_BASE - UNDER_QUALIFIED_SLOPE * (lo - relevant))
    return max(OVER_QUALIFIED_FLOOR, OVER_QUALIFIED_BASE - OVER_QUALIFIED_SLOPE * (relevant - hi))


def experience_score(profile: CandidateProfile, job: JobPosting, lexicon: Lexicon) -> int:
    level = extract_job_level(job.title)
    relevant = relevant_experience(profile, job)
    score = band_score(relevant, lexicon.experience_levels.get(level, _UNBOUNDED_BAND))

    if (
        profile.total_years_experience > PIVOT_MIN_TOTAL_YEARS
        and relevant < PIVOT_MAX_RELEVANT_YEARS
    ):
        if level in _PIVOT_CAPPED_LEVELS:
            score = min(score, PIVOT_SENIOR_CAP)
        elif level in _PIVOT_BOOSTED_LEVELS:
            score = max(score, PIVOT_ACCESSIBLE_FLOOR)
    return score


# ── Skill overlap ────────────────────────────────────────────────────────


def content_score(profile: CandidateProfile, job: JobPosting, lexicon: Lexicon) -> int:
    skills = [s.lower() for s in profile.skills.technical]
    job_text = f"{job.title or ''} {job.description or ''}".lower()

    matched = sum(1 for skill in skills if skill in job_text)
    stated = sum(1 for term in lexicon.content_reference_terms if term in job_text)

    if stated == 0:
        return CONTENT_NO_REQUIREMENTS_WITH_SKILLS if skills else CONTENT_NO_REQUIREMENTS_NO_SKILLS
    return int(_round_half_up(min(100.0, CONTENT_SCALE * matched / stated)))


# ── Confidence and categories ────────────────────────────────────────────


def confidence(total: float) -> int:
    """Map a weighted total onto the display confidence scale."""
    if total >= 85:
        return int(min(95, _round_half_up(90 + (total - 85) * 0.33)))
    if total >= 60:
        return int(_round_half_up(70 + (total - 60) * 0.76))
    if total >= 40:
        return int(_round_half_up(50 + (total - 40) * 0.95))
    return int(_round_half_up(total * 1.25))


def categorize(conf: float) -> str:
    if 90 <= conf <= 95:
        return RECOMMENDED
    if 70 <= conf < 90:
        return WORTH_EXPLORING
    return UNRANKED


def explain_match(scores: ScoreBreakdown, profile: CandidateProfile) -> list[str]:
    explanations: list[str] = []

    if scores.role >= 85:
        title = profile.primary_role.title if profile.primary_role else ""
        explanations.append(f"Strong role alignment with your {title or 'background'}")
    elif scores.role >= 60:
        explanations.append("Related to your career experience")

    if scores.experience >= 80:
        explanations.append("Experience level matches well")
    elif scores.experience >= 60:
        explanations.append("Slight stretch for experience level")
    elif scores.experience < 50:
        explanations.append("May require more experience in this specific area")

    if scores.content >= 70:
        explanations.append("Many of your skills match the requirements")

    return explanations


# ── Public API ───────────────────────────────────────────────────────────


def score_job(profile: CandidateProfile, job: JobPosting, lexicon: Lexicon | None = None) -> ScoredJob:
    lexicon = lexicon or load_lexicon()
    role = role_score(profile, job, lexicon)
    experience = experience_score(profile, job, lexicon)
    content = content_score(profile, job, lexicon)
    total = _round_half_up(
        role * ROLE_WEIGHT + experience * EXPERIENCE_WEIGHT + content * CONTENT_WEIGHT, 2,
    )
    scores = ScoreBreakdown(role=role, experience=experience, content=content, total=total)
    conf = confidence(total)
    log.debug(
        "Scored %r @ %s: role=%d exp=%d content=%d total=%.2f conf=%d",
        job.title, job.company, role, experience, content, total, conf,
    )
    return ScoredJob(
        job=job,
        scores=scores,
        confidence=conf,
        category=categorize(conf),
        required_years=extract_required_experience(job, lexicon),
        explanation=tuple(explain_match(scores, profile)),
    )


def match_jobs(
    profile: CandidateProfile,
    postings: Iterable[JobPosting],
    *,
    lexicon: Lexicon | None = None,
    workers: int = 1,
) -> MatchResult:
    """Score every posting, sort by total (stable) and bucket by confidence."""
    lexicon = lexicon or load_lexicon()
    postings = list(postings)

    if workers > 1 and len(postings) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            scored = list(pool.map(lambda job: score_job(profile, job, lexicon), postings))
    else:
        scored = [score_job(profile, job, lexicon) for job in postings]

    # sorted() is stable with reverse=True, so ties keep input order
    ranked = sorted(scored, key=lambda s: s.scores.total, reverse=True)
    result = MatchResult(
        recommended=[s for s in ranked if s.category == RECOMMENDED],
        worth_exploring=[s for s in ranked if s.category == WORTH_EXPLORING],
        all=ranked,
    )
    log.info(
        "Matched %d jobs: %d recommended, %d worth exploring",
        len(ranked), len(result.recommended), len(result.worth_exploring),
    )
    return result
