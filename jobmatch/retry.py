"""Exponential backoff for job-source HTTP calls."""
from __future__ import annotations

import functools
import random
import time
from typing import Any, Callable

import requests

from jobmatch.log import get_logger

log = get_logger(__name__)

NETWORK_ERRORS: tuple[type[BaseException], ...] = (requests.RequestException, OSError)


def is_permanent(exc: BaseException) -> bool:
    """HTTP 4xx answers other than 429 will not improve on a second try."""
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        status = exc.response.status_code
        return 400 <= status < 500 and status != 429
    return False


def backoff_delay(attempt: int, base_delay: float, max_delay: float,
                  backoff_factor: float = 2.0, jitter: bool = True) -> float:
    delay = min(base_delay * backoff_factor ** (attempt - 1), max_delay)
    return delay * (0.5 + random.random()) if jitter else delay


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: tuple[type[BaseException], ...] = NETWORK_ERRORS,
    giveup: Callable[[BaseException], bool] = is_permanent,
) -> Callable:
    """Retry the wrapped call on *retryable* errors.

    Errors for which *giveup* returns true, and the last failure, are
    re-raised to the caller.
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if giveup(exc):
                        log.warning("%s not retried: %s", fn.__qualname__, exc)
                        raise
                    if attempt >= max_attempts:
                        log.error("%s gave up after %d attempts: %s", fn.__qualname__, attempt, exc)
                        raise
                    delay = backoff_delay(attempt, base_delay, max_delay, backoff_factor, jitter)
                    log.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        fn.__qualname__, attempt, max_attempts, exc, delay,
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
