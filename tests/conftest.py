"""
Shared fixtures for the aggregation tests.

Provides a scripted in-memory source, a Job factory and helpers that mimic
`requests` responses so no test touches the network.
"""

import time
from typing import List, Optional
from unittest.mock import MagicMock

import pytest
import requests

from job_aggregator.models import CanonicalQuery, Job
from job_aggregator.sources.base import BaseSource


class FakeSource(BaseSource):
    """Source returning canned jobs (or raising / stalling) and recording queries."""

    def __init__(self, name: str, jobs: Optional[List[Job]] = None, exc: Optional[Exception] = None,
                 delay: float = 0.0, available: bool = True) -> None:
        super().__init__()
        self.name = name
        self.jobs = list(jobs or [])
        self.exc = exc
        self.delay = delay
        self.available = available
        self.queries: List[CanonicalQuery] = []

    def is_available(self) -> bool:
        return self.available

    def fetch_jobs(self, query: CanonicalQuery) -> List[Job]:
        self.queries.append(query)
        if self.delay:
            time.sleep(self.delay)
        if self.exc:
            raise self.exc
        return list(self.jobs)

    def map_item(self, item: dict, index: int, now: str) -> Job:
        return Job(**item)


def mock_response(payload=None, status: int = 200) -> MagicMock:
    """A stand-in for requests.Response with json() and raise_for_status()."""
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def make_job():
    """Factory for canonical jobs with sensible tech defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> Job:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "job_id": f"job-{n}",
            "title": "Python developer",
            "company": "Acme",
            "location": "Paris, FR",
            "description": "Build APIs",
            "url": f"https://jobs.example.com/{n}",
            "source": "LinkedIn",
            "posted_at": "2026-10-18T09:00:00Z",
        }
        fields.update(overrides)
        return Job(**fields)

    return _make


@pytest.fixture
def client():
    """Create a test client for the Flask app."""
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
