"""
Tests for the Flask API routes.
"""

from unittest.mock import MagicMock

import pytest

import app as app_module
from job_aggregator.models import FilterSet


@pytest.fixture
def mock_aggregator(monkeypatch):
    aggregator = MagicMock()
    aggregator.search.return_value = []
    monkeypatch.setattr(app_module, "aggregator", aggregator)
    return aggregator


@pytest.fixture
def mock_enricher(monkeypatch):
    enricher = MagicMock()
    monkeypatch.setattr(app_module, "enricher", enricher)
    return enricher


class TestJobsRoute:

    def test_returns_jobs(self, client, mock_aggregator, make_job):
        job = make_job(title="Développeur React", salary="45k-65k€")
        mock_aggregator.search.return_value = [job]

        resp = client.get("/api/jobs?q=react&location=Paris&remote=on&type=CDI&datePosted=7d")

        assert resp.status_code == 200
        data = resp.get_json()
        assert data == {"jobs": [job.to_dict()]}
        query, filters = mock_aggregator.search.call_args[0]
        assert query == "react"
        assert filters == FilterSet(location="Paris", remote_only=True, job_type="CDI", date_posted="7d")

    def test_no_matches_is_not_an_error(self, client, mock_aggregator):
        resp = client.get("/api/jobs?q=nothing")

        assert resp.status_code == 200
        assert resp.get_json() == {"jobs": []}

    def test_internal_fault_returns_500(self, client, mock_aggregator):
        mock_aggregator.search.side_effect = RuntimeError("classifier exploded")

        resp = client.get("/api/jobs")

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "classifier exploded"}

    def test_fault_without_message(self, client, mock_aggregator):
        mock_aggregator.search.side_effect = KeyError()

        resp = client.get("/api/jobs")
        assert resp.status_code == 500
        assert resp.get_json()["error"]

    def test_cors_header(self, client, mock_aggregator):
        resp = client.get("/api/jobs")
        assert resp.headers["Access-Control-Allow-Origin"] == "*"


class TestEnrichRoute:

    def test_enriches_posted_jobs(self, client, mock_enricher, make_job):
        job = make_job(image_url="")
        enriched = make_job(job_id=job.job_id, url=job.url, image_url="https://img/og.png")
        mock_enricher.enrich.return_value = [enriched]

        resp = client.post("/api/jobs/enrich", json={"jobs": [job.to_dict()]})

        assert resp.status_code == 200
        assert resp.get_json()["jobs"][0]["imageUrl"] == "https://img/og.png"
        [sent] = mock_enricher.enrich.call_args[0][0]
        assert sent.job_id == job.job_id
        assert sent.url == job.url

    def test_string_remote_flag_is_not_flipped(self, client, mock_enricher):
        mock_enricher.enrich.side_effect = lambda jobs: jobs

        resp = client.post("/api/jobs/enrich", json={"jobs": [{"id": "x", "title": "Dev", "remote": "false"}]})

        assert resp.status_code == 200
        assert resp.get_json()["jobs"][0]["remote"] is False

    @pytest.mark.parametrize("body", [{}, {"jobs": "nope"}, ["a"]])
    def test_rejects_bad_body(self, client, mock_enricher, body):
        resp = client.post("/api/jobs/enrich", json=body)

        assert resp.status_code == 400
        assert "error" in resp.get_json()
        mock_enricher.enrich.assert_not_called()


class TestInfoRoutes:

    def test_sources(self, client):
        resp = client.get("/api/sources")

        assert resp.status_code == 200
        names = [s["name"] for s in resp.get_json()]
        assert names == ["JSearch", "Arbeitnow", "Remotive"]

    def test_taxonomy(self, client):
        resp = client.get("/api/taxonomy")

        assert resp.status_code == 200
        assert "react" in resp.get_json()["keywords"]
