"""Tests for job sources and posting collection (HTTP is mocked)."""
from unittest.mock import MagicMock, patch

import pytest
import requests

from jobmatch.models import JobPosting
from jobmatch.pipeline import dedupe_postings, gather_postings
from jobmatch.sources import AdzunaSource, JobSource, JSearchSource, RemotiveSource, get_sources
from jobmatch.sources.base import format_salary, posting_id
from jobmatch.sources.remotive import search_term


def _response(payload, status=200):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


class _StaticSource(JobSource):
    def __init__(self, name, postings):
        self.name = name
        self.postings = postings

    def search(self, queries, limit=20):
        return list(self.postings)


class _BrokenSource(JobSource):
    name = "Broken"

    def search(self, queries, limit=20):
        raise RuntimeError("provider down")


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("jobmatch.retry.time.sleep"):
        yield


def test_get_sources_from_env():
    env = {"JSEARCH_API_KEY": "k", "ADZUNA_APP_ID": "id", "ADZUNA_APP_KEY": "key"}
    sources = get_sources({"remotive": True}, lambda k: env.get(k, ""))
    assert [type(s) for s in sources] == [JSearchSource, AdzunaSource, RemotiveSource]


def test_get_sources_keyless():
    sources = get_sources({"remotive": True}, lambda k: "")
    assert [type(s) for s in sources] == [RemotiveSource]
    assert get_sources({"remotive": False}, lambda k: "") == []


def test_gather_tolerates_failing_source():
    a = JobPosting(title="Software Engineer", company="Acme")
    b = JobPosting(title="Data Analyst", company="Globex")
    sources = [_BrokenSource(), _StaticSource("One", [a, b])]
    assert gather_postings(sources, ["Software Engineer"]) == [a, b]


def test_gather_dedupes_across_sources_in_source_order():
    a = JobPosting(title="Software Engineer", company="Acme", source="One")
    dup = JobPosting(title="software engineer ", company="ACME", source="Two")
    c = JobPosting(title="Product Manager", company="Acme", source="Two")
    sources = [_StaticSource("One", [a]), _StaticSource("Two", [dup, c])]
    assert gather_postings(sources, []) == [a, c]


def test_gather_without_sources():
    assert gather_postings([], ["x"]) == []


def test_dedupe_keeps_first():
    first = JobPosting(title="A", company="B", url="1")
    second = JobPosting(title="a", company="b", url="2")
    assert dedupe_postings([first, second]) == [first]


def test_remotive_maps_fields():
    payload = {"jobs": [{
        "id": 42,
        "title": "Backend Engineer",
        "company_name": "Remote Co",
        "candidate_required_location": "Worldwide",
        "url": "https://remotive.com/jobs/42",
        "description": "Python services",
        "tags": ["django", "aws"],
        "publication_date": "2026-01-02",
    }]}
    with patch("jobmatch.sources.remotive.requests.get", return_value=_response(payload)) as get:
        postings = RemotiveSource().search(["Senior Backend Engineer"])
    assert get.call_args.kwargs["params"]["search"] == "backend"
    assert len(postings) == 1
    p = postings[0]
    assert (p.title, p.company, p.location, p.source) == ("Backend Engineer", "Remote Co", "Worldwide", "Remotive")
    assert p.description == "Python services django aws"
    assert p.id == posting_id("remotive", 42)


def test_remotive_network_failure_returns_nothing():
    with patch(
        "jobmatch.sources.remotive.requests.get",
        side_effect=requests.ConnectionError("down"),
    ) as get:
        assert RemotiveSource().search(["Data Analyst"]) == []
    assert get.call_count == 2  # retried once


def test_jsearch_maps_fields():
    payload = {"data": [{
        "job_id": "abc",
        "job_title": "Data Scientist",
        "employer_name": "Initech",
        "job_city": "Austin",
        "job_state": "TX",
        "job_description": "Pandas and SQL",
        "job_apply_link": "https://example.com/apply",
        "job_min_salary": 120000,
        "job_max_salary": 150000,
    }]}
    env = {"JSEARCH_API_KEY": "k"}
    with patch("jobmatch.sources.jsearch.requests.get", return_value=_response(payload)):
        postings = JSearchSource(lambda k: env.get(k, "")).search(["Data Scientist"])
    p = postings[0]
    assert p.location == "Austin, TX"
    assert p.salary == "$120,000 - $150,000"
    assert p.url == "https://example.com/apply"


def test_jsearch_forbidden_returns_empty():
    with patch("jobmatch.sources.jsearch.requests.get", return_value=_response({}, status=403)):
        assert JSearchSource(lambda k: "k").search(["x"]) == []


def test_adzuna_placeholders_for_missing_fields():
    payload = {"results": [{"id": 7, "title": "QA Engineer"}]}
    with patch("jobmatch.sources.adzuna.requests.get", return_value=_response(payload)):
        postings = AdzunaSource(lambda k: "x").search(["QA Engineer"])
    p = postings[0]
    assert (p.company, p.location, p.url, p.description, p.salary) == ("Company", "Remote", "#", "", None)


def test_search_term_skips_generic_words():
    assert search_term("Senior Product Manager") == "product"
    assert search_term("Lead") == "lead"


def test_format_salary():
    assert format_salary(None, 10) is None
    assert format_salary(90000, None) == "$90,000 - N/A"


def test_search_only_source_is_instantiable():
    source = _StaticSource("Static", [])
    assert source.search(["anything"]) == []
    assert source.max_queries == 3


def test_http_source_fetches_first_queries_only():
    with patch("jobmatch.sources.adzuna.requests.get", return_value=_response({"results": []})) as get:
        AdzunaSource(lambda k: "x").search(["a", "b", "c", "d", "e"])
    assert [c.kwargs["params"]["what"] for c in get.call_args_list] == ["a", "b", "c"]
