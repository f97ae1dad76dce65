"""
Unit tests for the image enricher (link preview, then domain logo).
"""

from unittest.mock import MagicMock

import pytest
import requests

import config
import job_aggregator.enricher as enricher_module
from job_aggregator.enricher import Enricher

from .conftest import mock_response


@pytest.fixture(autouse=True)
def logo_template(monkeypatch):
    monkeypatch.setattr(config, "LOGO_URL_TEMPLATE", "https://logo.clearbit.com/{hostname}")
    monkeypatch.setattr(config, "MICROLINK_URL", "https://api.microlink.io/")


def _enricher(response=None, side_effect=None, max_workers=4):
    session = MagicMock()
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        session.get.return_value = response
    return Enricher(max_workers=max_workers, session=session), session


class TestEnricher:

    def test_uses_open_graph_image(self, make_job):
        payload = {"status": "success", "data": {"image": {"url": "https://cdn.acme.io/og.png"}}}
        enricher, session = _enricher(mock_response(payload))
        job = make_job(url="https://jobs.acme.io/1", image_url="")

        [result] = enricher.enrich([job])

        assert result.image_url == "https://cdn.acme.io/og.png"
        args, kwargs = session.get.call_args
        assert args[0] == "https://api.microlink.io/"
        assert kwargs["params"] == {"url": "https://jobs.acme.io/1", "audio": "false",
                                    "video": "false", "screenshot": "false"}

    def test_uses_logo_when_no_image(self, make_job):
        payload = {"data": {"image": None, "logo": {"url": "https://cdn.acme.io/logo.png"}}}
        enricher, _ = _enricher(mock_response(payload))

        [result] = enricher.enrich([make_job(url="https://jobs.acme.io/1")])
        assert result.image_url == "https://cdn.acme.io/logo.png"

    def test_falls_back_to_domain_logo(self, make_job):
        enricher, _ = _enricher(side_effect=requests.ConnectionError("down"))

        [result] = enricher.enrich([make_job(url="https://www.acme.io/jobs/1")])
        assert result.image_url == "https://logo.clearbit.com/www.acme.io"

    def test_falls_back_on_error_status(self, make_job):
        enricher, _ = _enricher(mock_response({"status": "fail"}, status=429))

        [result] = enricher.enrich([make_job(url="https://www.acme.io/jobs/1")])
        assert result.image_url == "https://logo.clearbit.com/www.acme.io"

    def test_total_failure_leaves_job_unchanged(self, make_job, monkeypatch):
        def broken_logo(url):
            raise RuntimeError("logo service misconfigured")

        monkeypatch.setattr(enricher_module, "logo_url_for", broken_logo)
        enricher, _ = _enricher(side_effect=requests.Timeout("slow"))
        job = make_job(url="https://www.acme.io/jobs/1")

        assert enricher.enrich([job]) == [job]

    def test_skips_jobs_with_image_or_unsafe_url(self, make_job):
        enricher, session = _enricher(mock_response({}))
        has_image = make_job(image_url="https://img/1.png")
        no_link = make_job(url="#")
        script = make_job(url="javascript:alert(1)")

        assert enricher.enrich([has_image, no_link, script]) == [has_image, no_link, script]
        session.get.assert_not_called()

    def test_preserves_order_and_input(self, make_job):
        def preview(url, params=None, timeout=None):
            return mock_response({"data": {"image": {"url": params["url"] + "/og.png"}}})

        enricher, _ = _enricher(side_effect=preview, max_workers=3)
        jobs = [make_job(url=f"https://acme.io/{i}") for i in range(10)]

        result = enricher.enrich(jobs)

        assert [j.image_url for j in result] == [f"https://acme.io/{i}/og.png" for i in range(10)]
        assert all(j.image_url == "" for j in jobs)

    def test_empty_input(self):
        enricher, session = _enricher(mock_response({}))
        assert enricher.enrich([]) == []
        session.get.assert_not_called()

    def test_worker_bound(self):
        assert Enricher(max_workers=0, session=MagicMock()).max_workers == 1
        assert Enricher(max_workers=-3, session=MagicMock()).max_workers == 1

    def test_worker_default_from_config(self, monkeypatch):
        monkeypatch.setattr(config, "ENRICH_MAX_WORKERS", 5)
        assert Enricher(session=MagicMock()).max_workers == 5
