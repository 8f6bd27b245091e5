"""Build job-search queries from a candidate profile."""
from __future__ import annotations

from jobmatch.lexicon import Lexicon, load_lexicon
from jobmatch.log import get_logger
from jobmatch.models import CandidateProfile

log = get_logger(__name__)

MAX_QUERIES = 5
_ANALYST_VARIATIONS = ("Analyst", "Business Analyst", "Data Analyst")


def build_search_queries(
    profile: CandidateProfile,
    lexicon: Lexicon | None = None,
    max_queries: int = MAX_QUERIES,
) -> list[str]:
    lexicon = lexicon or load_lexicon()
    prefix = lexicon.seniority_query_prefixes.get(profile.seniority_level, "")
    title = profile.primary_role.title if profile.primary_role and profile.roles else ""
    queries: list[str] = []

    if title:
        queries.append(title)
        queries.append(f"{prefix} {title}".strip())

    role_type = profile.primary_role.type if profile.primary_role else ""
    for variation in lexicon.query_role_variations.get(role_type, ()):
        queries.append(f"{prefix} {variation}".strip())

    if "analyst" in title.lower():
        queries.extend(_ANALYST_VARIATIONS)
        queries.append(f"{prefix} Analyst".strip())

    if title:
        for skill in profile.skills.technical[:2]:
            queries.append(f"{skill} {title}")

    final = list(dict.fromkeys(q for q in queries if q))[:max_queries]
    log.info("Search queries: %s", final)
    return final
