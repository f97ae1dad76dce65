"""
Common plumbing for provider adapters: one HTTP session each, a fetch()
that turns every upstream failure into an empty result, and payload checks.
Concrete adapters implement `fetch_jobs()` and `map_item()`.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from ..models import CanonicalQuery, Job, utc_now_iso
import config

logger = logging.getLogger(__name__)


class SourceResponseError(ValueError):
    """Raised when an upstream payload does not have the expected shape."""


class BaseSource(ABC):
    """One upstream job API mapped onto canonical `Job` records."""

    name: str = "Source"
    requires_api_key: bool = False
    base_url: str = ""

    def __init__(self) -> None:
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": "JobAggregator/1.0",
            "Accept": "application/json",
        })
        self.timeout = config.REQUEST_TIMEOUT

    def fetch(self, query: CanonicalQuery) -> List[Job]:
        """
        Fetch and normalize jobs for `query`. Never raises: a missing key,
        HTTP error, network failure or unexpected payload yields an empty list
        so one provider's outage cannot fail the whole aggregation.
        """
        if not self.is_available():
            logger.info("[%s] Skipped – no API key configured", self.name)
            return []
        start = time.time()
        try:
            jobs = self.fetch_jobs(query)
        except requests.RequestException as exc:
            logger.error("[%s] Request failed: %s", self.name, exc)
            return []
        except Exception as exc:
            logger.error("[%s] Could not read response: %s", self.name, exc)
            return []
        logger.info("[%s] Found %d jobs in %.1fs", self.name, len(jobs), time.time() - start)
        return jobs

    @abstractmethod
    def fetch_jobs(self, query: CanonicalQuery) -> List[Job]:
        """
        Call the upstream API once and map its listings.
        May raise; `fetch()` absorbs every error.
        """
        ...

    @abstractmethod
    def map_item(self, item: dict, index: int, now: str) -> Job:
        """
        Map one raw listing to a canonical Job. Pure: the same item, index
        and `now` (fallback posting date) always give an equal Job.
        """
        ...

    def map_items(self, items: List[dict], now: Optional[str] = None) -> List[Job]:
        now = now or utc_now_iso()
        return [self.map_item(item, idx, now) for idx, item in enumerate(items) if isinstance(item, dict)]

    def is_available(self) -> bool:
        """False when a required credential is missing."""
        return True

    # ── helpers ────────────────────────────────────────────────
    def _get(self, url: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """GET with the adapter timeout; non-2xx statuses raise HTTPError."""
        response = self.session.get(url, params=params, timeout=self.timeout, **kwargs)
        response.raise_for_status()
        return response

    def _get_listings(self, url: str, key: str, params: Optional[Dict] = None, **kwargs) -> List[dict]:
        """GET a JSON object and return its list under `key`."""
        payload = self._get(url, params=params, **kwargs).json()
        if not isinstance(payload, dict):
            raise SourceResponseError(f"expected a JSON object, got {type(payload).__name__}")
        listings = payload.get(key)
        if listings is None:
            return []
        if not isinstance(listings, list):
            raise SourceResponseError(f"'{key}' is {type(listings).__name__}, not a list")
        return listings

    @staticmethod
    def _strip_html(html: str) -> str:
        """Visible text of an HTML fragment, tags removed."""
        if not html:
            return ""
        return BeautifulSoup(html, "html.parser").get_text(separator=" ", strip=True)
