from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import Any

import requests

from jobmatch.log import get_logger
from jobmatch.models import JobPosting

log = get_logger(__name__)


class JobSource(ABC):
    """A job board queried with a handful of search phrases.

    Subclasses implement :meth:`search`. HTTP-backed boards also define
    ``_fetch(query)`` and delegate to :meth:`_search_each`, which runs one
    request per query and logs (rather than raises) network failures.
    """

    name: str = "unknown"
    max_queries: int = 3

    @abstractmethod
    def search(self, queries: list[str], limit: int = 20) -> list[JobPosting]:
        pass

    def _search_each(self, queries: list[str], limit: int) -> list[JobPosting]:
        """Call the subclass's ``_fetch(query)`` for each of the first ``max_queries`` queries."""
        postings: list[JobPosting] = []
        seen_ids: set[str] = set()
        for query in queries[: self.max_queries]:
            try:
                batch = self._fetch(query)
            except requests.RequestException as exc:
                log.warning("[%s] query=%r failed: %s", self.name, query, exc)
                continue
            log.debug("[%s] query=%r returned %d jobs", self.name, query, len(batch))
            for p in batch:
                if p.id not in seen_ids:
                    seen_ids.add(p.id)
                    postings.append(p)
        return postings[:limit]


def posting_id(source: str, raw_id: object) -> str:
    digest = hashlib.sha256(str(raw_id).encode()).hexdigest()[:12]
    return f"{source}-{digest}"


def format_salary(low: float | None, high: float | None) -> str | None:
    if not low:
        return None
    upper = f"${high:,.0f}" if high else "N/A"
    return f"${low:,.0f} - {upper}"


def nested_name(hit: dict[str, Any], key: str) -> str | None:
    """``hit[key]["display_name"]`` when the provider nests it, else None."""
    return (hit.get(key) or {}).get("display_name")
