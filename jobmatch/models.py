"""Data models for candidate profiles, job postings and match results."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

# Seniority tiers
ENTRY = "entry"
MID = "mid"
SENIOR = "senior"
MANAGER = "manager"

# Match categories
RECOMMENDED = "Recommended"
WORTH_EXPLORING = "WorthExploring"
UNRANKED = "Unranked"


@dataclass(frozen=True)
class RoleRecord:
    title: str
    years: int | None = None
    company: str | None = None
    raw_line: str | None = None


@dataclass(frozen=True)
class CategoryExperience:
    years: int
    roles: tuple[str, ...] = ()


@dataclass(frozen=True)
class PrimaryRole:
    type: str = "General"
    title: str = "Professional"
    years_in_role: int = 0


@dataclass(frozen=True)
class Skills:
    technical: tuple[str, ...] = ()


@dataclass(frozen=True)
class CandidateProfile:
    roles: tuple[RoleRecord, ...]
    experience_by_category: Mapping[str, CategoryExperience]
    total_years_experience: int
    skills: Skills
    seniority_level: str
    education: tuple[str, ...]
    primary_role: PrimaryRole
    keywords: tuple[str, ...]
    raw_text: str = field(default="", repr=False)

    def category_years(self, category: str) -> int:
        entry = self.experience_by_category.get(category)
        return entry.years if entry else 0


@dataclass(frozen=True)
class JobPosting:
    title: str
    company: str
    description: str = ""
    location: str = "Remote"
    url: str = "#"
    salary: str | None = None
    posted_date: str | None = None
    source: str = "unknown"
    id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JobPosting":
        """Build a posting from a loose record, filling display placeholders.

        Numbers are stringified; nested lists or mappings are not text and
        fall back to the placeholder like a missing field.
        """
        return cls(
            title=_text(data.get("title"), "Job Title"),
            company=_text(data.get("company"), "Company"),
            description=_text(data.get("description"), ""),
            location=_text(data.get("location"), "Remote"),
            url=_text(data.get("url"), "#"),
            salary=_text(data.get("salary"), None),
            posted_date=_text(data.get("posted_date") or data.get("posted"), None),
            source=_text(data.get("source"), "unknown"),
            id=_text(data.get("id"), ""),
        )


def _text(value: Any, placeholder: str | None) -> str | None:
    if value is None or isinstance(value, (list, tuple, set, dict)):
        return placeholder
    text = str(value).strip()
    return text or placeholder


@dataclass(frozen=True)
class ScoreBreakdown:
    role: int
    experience: int
    content: int
    total: float


@dataclass(frozen=True)
class ScoredJob:
    job: JobPosting
    scores: ScoreBreakdown
    confidence: int
    category: str
    required_years: int = 0
    explanation: tuple[str, ...] = ()


@dataclass
class MatchResult:
    recommended: list[ScoredJob] = field(default_factory=list)
    worth_exploring: list[ScoredJob] = field(default_factory=list)
    all: list[ScoredJob] = field(default_factory=list)
