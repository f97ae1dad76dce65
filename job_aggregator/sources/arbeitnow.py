"""
Arbeitnow – free API, no key required.
Endpoint: https://www.arbeitnow.com/api/job-board-api
The API has no search parameter: we take the first page and filter locally.
"""

from __future__ import annotations

import logging
from typing import List

from ..models import CanonicalQuery, Job
from ..normalize import format_salary, normalize_timestamp, normalize_type, parse_salary_text, string_list
from .base import BaseSource

logger = logging.getLogger(__name__)


class ArbeitnowSource(BaseSource):
    name = "Arbeitnow"
    requires_api_key = False
    base_url = "https://www.arbeitnow.com/api/job-board-api"

    def fetch_jobs(self, query: CanonicalQuery) -> List[Job]:
        listings = self._get_listings(self.base_url, "data")
        needle = (query.text or "").strip().lower()
        if needle:
            total = len(listings)
            listings = [item for item in listings if isinstance(item, dict) and self._matches(item, needle)]
            logger.debug("[%s] %d/%d listings match %r", self.name, len(listings), total, needle)
        return self.map_items(listings)

    def _matches(self, item: dict, needle: str) -> bool:
        """Whole-query substring match on title, company and plain-text description."""
        company = item.get("company_name") or item.get("company") or ""
        searchable = f"{item.get('title') or ''} {company} {self._strip_html(item.get('description') or '')}"
        return needle in searchable.lower()

    def map_item(self, item: dict, index: int, now: str) -> Job:
        slug = item.get("slug")
        is_remote = bool(item.get("remote"))
        job_types = item.get("job_types")
        first_type = job_types[0] if isinstance(job_types, list) and job_types else ""
        s_min, s_max = parse_salary_text(item.get("salary"))

        return Job(
            job_id=f"arb-{slug}" if slug else f"arb-{index}",
            title=item.get("title") or "",
            company=item.get("company_name") or item.get("company") or "",
            location=item.get("location") or ("Remote" if is_remote else "—"),
            description=item.get("description") or "",
            url=item.get("url") or "#",
            source=self.name,
            remote=is_remote,
            salary=format_salary(s_min, s_max),
            job_type=normalize_type(first_type),
            requirements=string_list(item.get("tags")),
            posted_at=normalize_timestamp(item.get("created_at"), now),
        )
