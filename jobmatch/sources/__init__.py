from typing import Callable

from .base import JobSource
from .adzuna import AdzunaSource
from .jsearch import JSearchSource
from .remotive import RemotiveSource

from jobmatch.log import get_logger

log = get_logger(__name__)

__all__ = [
    "JobSource", "AdzunaSource", "JSearchSource", "RemotiveSource",
    "get_sources",
]


def get_sources(settings: dict, env_getter: Callable[[str], str]) -> list[JobSource]:
    per_query = int(settings.get("results_per_query", 10))
    sources: list[JobSource] = []

    if env_getter("JSEARCH_API_KEY"):
        sources.append(JSearchSource(env_getter))
        log.info("Registered source: JSearch")

    if env_getter("ADZUNA_APP_ID") and env_getter("ADZUNA_APP_KEY"):
        sources.append(AdzunaSource(env_getter, results_per_query=per_query))
        log.info("Registered source: Adzuna")

    if settings.get("remotive", True):
        sources.append(RemotiveSource(results_per_query=per_query))
        log.info("Registered source: Remotive (free, remote jobs)")

    if not sources:
        log.warning("No job sources configured; pass a jobs file instead")
    return sources
