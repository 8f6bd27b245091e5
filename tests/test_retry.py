from unittest.mock import MagicMock, patch

import pytest
import requests

from jobmatch.retry import backoff_delay, is_permanent, retry


def _http_error(status: int) -> requests.HTTPError:
    return requests.HTTPError(f"{status} error", response=MagicMock(status_code=status))


def _decorated(side_effect, **kwargs):
    inner = MagicMock(side_effect=side_effect)

    @retry(**kwargs)
    def fetch():
        return inner()

    return fetch, inner


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("jobmatch.retry.time.sleep") as sleep:
        yield sleep


def test_retries_until_success(no_sleep):
    fetch, inner = _decorated(
        [requests.ConnectionError("reset"), requests.ConnectionError("reset"), "ok"],
        max_attempts=3, base_delay=1.0, jitter=False,
    )
    assert fetch() == "ok"
    assert inner.call_count == 3
    assert [c.args[0] for c in no_sleep.call_args_list] == [1.0, 2.0]


def test_reraises_after_last_attempt():
    fetch, inner = _decorated(requests.Timeout("slow"), max_attempts=2)
    with pytest.raises(requests.Timeout):
        fetch()
    assert inner.call_count == 2


def test_client_errors_are_not_retried():
    fetch, inner = _decorated(_http_error(404), max_attempts=3)
    with pytest.raises(requests.HTTPError):
        fetch()
    assert inner.call_count == 1


def test_rate_limit_and_server_errors_are_retried():
    fetch, inner = _decorated([_http_error(429), _http_error(503), "done"], max_attempts=3)
    assert fetch() == "done"


def test_other_exceptions_pass_through():
    fetch, inner = _decorated(KeyError("x"), max_attempts=3)
    with pytest.raises(KeyError):
        fetch()
    assert inner.call_count == 1


def test_is_permanent():
    assert is_permanent(_http_error(401))
    assert not is_permanent(_http_error(429))
    assert not is_permanent(_http_error(500))
    assert not is_permanent(requests.ConnectionError())


def test_backoff_delay_capped():
    assert backoff_delay(1, 2.0, 30.0, jitter=False) == 2.0
    assert backoff_delay(3, 2.0, 30.0, jitter=False) == 8.0
    assert backoff_delay(10, 2.0, 30.0, jitter=False) == 30.0
    assert 15.0 <= backoff_delay(10, 2.0, 30.0) <= 45.0
