"""Shared fixtures for jobmatch tests."""

from datetime import date
from types import MappingProxyType

import pytest

from jobmatch.lexicon import load_lexicon
from jobmatch.models import (
    CandidateProfile,
    CategoryExperience,
    JobPosting,
    PrimaryRole,
    RoleRecord,
    Skills,
)

SAMPLE_RESUME = """\
Jane Doe
jane@example.com

EXPERIENCE
Senior Software Engineer 2015 - Present
Built services in Python and Go on AWS.

EDUCATION
B.S. in Computer Science
"""


@pytest.fixture
def lexicon():
    return load_lexicon()


@pytest.fixture
def today():
    return date(2026, 6, 1)


@pytest.fixture
def sample_resume():
    return SAMPLE_RESUME


def make_profile(
    *,
    title="Software Engineer",
    role_type="Engineering",
    experience=None,
    total=None,
    skills=("Python", "Aws"),
    roles=None,
    seniority="mid",
):
    experience = experience if experience is not None else {"Engineering": 4}
    rollup = {
        name: CategoryExperience(years=years, roles=(title,))
        for name, years in experience.items()
    }
    role_titles = roles if roles is not None else [title]
    return CandidateProfile(
        roles=tuple(RoleRecord(title=t) for t in role_titles),
        experience_by_category=MappingProxyType(rollup),
        total_years_experience=total if total is not None else sum(experience.values()),
        skills=Skills(technical=tuple(skills)),
        seniority_level=seniority,
        education=(),
        primary_role=PrimaryRole(
            type=role_type, title=title, years_in_role=max(experience.values(), default=0),
        ),
        keywords=(),
    )


def job(title, description="", company="Acme"):
    return JobPosting(title=title, company=company, description=description)
