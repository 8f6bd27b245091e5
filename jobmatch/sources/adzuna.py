"""Adzuna job search (US index).

Free tier: 250 requests/day. Sign up at https://developer.adzuna.com/
"""
from __future__ import annotations

from typing import Any

import requests

from jobmatch.models import JobPosting
from jobmatch.retry import retry
from jobmatch.sources.base import JobSource, format_salary, nested_name, posting_id

COUNTRY = "us"
SEARCH_URL = f"https://api.adzuna.com/v1/api/jobs/{COUNTRY}/search/1"


class AdzunaSource(JobSource):
    name = "Adzuna"

    def __init__(self, env_getter, results_per_query: int = 10) -> None:
        self.app_id: str = env_getter("ADZUNA_APP_ID")
        self.app_key: str = env_getter("ADZUNA_APP_KEY")
        self.results_per_query = results_per_query

    def search(self, queries: list[str], limit: int = 20) -> list[JobPosting]:
        return self._search_each(queries, limit)

    @retry(max_attempts=3, base_delay=2.0)
    def _fetch(self, query: str) -> list[JobPosting]:
        r = requests.get(
            SEARCH_URL,
            params={
                "app_id": self.app_id,
                "app_key": self.app_key,
                "what": query,
                "results_per_page": self.results_per_query,
                "content-type": "application/json",
            },
            timeout=15,
        )
        r.raise_for_status()
        return [self._to_posting(hit) for hit in r.json().get("results", [])]

    def _to_posting(self, hit: dict[str, Any]) -> JobPosting:
        title = hit.get("title") or "Job Title"
        company = nested_name(hit, "company") or "Company"
        return JobPosting(
            id=posting_id("adzuna", hit.get("id", f"{title}{company}")),
            title=title,
            company=company,
            location=nested_name(hit, "location") or "Remote",
            url=hit.get("redirect_url") or "#",
            description=hit.get("description") or "",
            salary=format_salary(hit.get("salary_min"), hit.get("salary_max")),
            posted_date=hit.get("created"),
            source=self.name,
        )
