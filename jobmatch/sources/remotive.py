"""Remotive: free remote-job board, no API key.

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

from typing import Any

import requests

from jobmatch.models import JobPosting
from jobmatch.retry import retry
from jobmatch.sources.base import JobSource, posting_id

API_URL = "https://remotive.com/api/remote-jobs"
DEFAULT_TERM = "engineer"

# Remotive's search is a plain substring filter, so one distinctive word
# finds far more than a full title does.
_GENERIC_WORDS = frozenset({
    "senior", "junior", "lead", "staff", "principal", "manager",
    "engineer", "specialist", "consultant", "ii", "iii", "iv",
})


def search_term(query: str) -> str:
    words = query.lower().split()
    distinctive = [w for w in words if w not in _GENERIC_WORDS]
    return (distinctive or words or [""])[0]


class RemotiveSource(JobSource):
    name = "Remotive"
    max_queries = 2

    def __init__(self, results_per_query: int = 10) -> None:
        self.results_per_query = results_per_query

    def search(self, queries: list[str], limit: int = 20) -> list[JobPosting]:
        terms = [search_term(q) for q in queries[: self.max_queries] if q.strip()]
        return self._search_each(list(dict.fromkeys(terms)) or [DEFAULT_TERM], limit)

    @retry(max_attempts=2, base_delay=1.5)
    def _fetch(self, query: str) -> list[JobPosting]:
        params: dict[str, Any] = {"limit": self.results_per_query}
        if query:
            params["search"] = query
        r = requests.get(API_URL, params=params, timeout=15)
        r.raise_for_status()
        return [self._to_posting(hit) for hit in r.json().get("jobs", [])]

    def _to_posting(self, hit: dict[str, Any]) -> JobPosting:
        title = hit.get("title") or "Job Title"
        company = hit.get("company_name") or "Company"
        # tags carry most of the stack keywords the content score looks for
        description = " ".join([hit.get("description") or "", *(hit.get("tags") or [])]).strip()
        return JobPosting(
            id=posting_id("remotive", hit.get("id", f"{title}{company}")),
            title=title,
            company=company,
            location=hit.get("candidate_required_location") or "Remote",
            url=hit.get("url") or "#",
            description=description,
            salary=hit.get("salary") or None,
            posted_date=hit.get("publication_date"),
            source=self.name,
        )
