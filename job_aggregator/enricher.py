"""
Image enricher – best-effort backfill of `image_url` for jobs without one.

1. Ask the Microlink link-preview API for the posting's og:image / logo.
2. Fall back to a domain-keyed logo service (Clearbit) for the URL's host.

Every lookup is independent and failures are absorbed: a job whose image
cannot be resolved is returned unchanged.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import List, Optional

import requests

import config
from .models import URL_PLACEHOLDER, Job
from .normalize import logo_url_for, sanitize_url

logger = logging.getLogger(__name__)


class Enricher:
    """Resolves missing job images with bounded concurrency."""

    def __init__(self, max_workers: Optional[int] = None, session: Optional[requests.Session] = None) -> None:
        workers = config.ENRICH_MAX_WORKERS if max_workers is None else max_workers
        self.max_workers = max(1, workers)
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.timeout = config.ENRICH_TIMEOUT

    def enrich(self, jobs: List[Job]) -> List[Job]:
        """Return the jobs in the same order, with images filled in where possible."""
        pending = [i for i, job in enumerate(jobs) if self._needs_image(job)]
        if not pending:
            return list(jobs)

        enriched = list(jobs)
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(pending)),
                                thread_name_prefix="enrich") as pool:
            for idx, job in zip(pending, pool.map(self.enrich_one, [jobs[i] for i in pending])):
                enriched[idx] = job

        filled = sum(1 for i in pending if enriched[i].image_url)
        logger.info("Enriched images for %d/%d jobs", filled, len(pending))
        return enriched

    def enrich_one(self, job: Job) -> Job:
        """Resolve one job's image; never raises."""
        if not self._needs_image(job):
            return job
        try:
            image = self._preview_image(job.url) or logo_url_for(job.url)
        except Exception as exc:
            logger.debug("Image lookup failed for %s: %s", job.url, exc)
            return job
        return replace(job, image_url=image) if image else job

    # ── helpers ────────────────────────────────────────────────
    @staticmethod
    def _needs_image(job: Job) -> bool:
        return not job.image_url and sanitize_url(job.url) != URL_PLACEHOLDER

    def _preview_image(self, url: str) -> str:
        """og:image or logo URL reported by the link-preview service, or ''."""
        params = {"url": url, "audio": "false", "video": "false", "screenshot": "false"}
        try:
            resp = self.session.get(config.MICROLINK_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.debug("Link preview failed for %s: %s", url, exc)
            return ""

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            return ""
        for key in ("image", "logo"):
            asset = data.get(key)
            if isinstance(asset, dict) and asset.get("url"):
                return str(asset["url"])
        return ""
