"""JSearch (RapidAPI): Google for Jobs listings aggregated from many boards."""
from __future__ import annotations

from typing import Any

import requests

from jobmatch.log import get_logger
from jobmatch.models import JobPosting
from jobmatch.retry import retry
from jobmatch.sources.base import JobSource, format_salary, posting_id

log = get_logger(__name__)

HOST = "jsearch.p.rapidapi.com"


class JSearchSource(JobSource):
    name = "JSearch"

    def __init__(self, env_getter) -> None:
        self.api_key: str = env_getter("JSEARCH_API_KEY")

    def search(self, queries: list[str], limit: int = 20) -> list[JobPosting]:
        return self._search_each(queries, limit)

    @retry(max_attempts=3, base_delay=2.0)
    def _fetch(self, query: str) -> list[JobPosting]:
        r = requests.get(
            f"https://{HOST}/search",
            params={"query": query, "page": "1", "num_pages": "1"},
            headers={"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": HOST},
            timeout=15,
        )
        if r.status_code == 403:
            # key valid but not subscribed to the JSearch plan
            log.warning("JSearch returned 403 for %r; check the RapidAPI subscription", query)
            return []
        r.raise_for_status()
        return [self._to_posting(hit) for hit in r.json().get("data") or []]

    def _to_posting(self, hit: dict[str, Any]) -> JobPosting:
        city, state = hit.get("job_city"), hit.get("job_state")
        if city:
            location = f"{city}, {state}" if state else city
        else:
            location = hit.get("job_country") or "Remote"
        return JobPosting(
            id=posting_id("jsearch", hit.get("job_id") or hit.get("job_title", "")),
            title=hit.get("job_title") or "Job Title",
            company=hit.get("employer_name") or "Company",
            location=location,
            url=hit.get("job_apply_link") or hit.get("job_google_link") or "#",
            description=hit.get("job_description") or "",
            salary=format_salary(hit.get("job_min_salary"), hit.get("job_max_salary")),
            posted_date=hit.get("job_posted_at_datetime_utc"),
            source=self.name,
        )
