"""
Remotive – free API, no key required.
Endpoint: https://remotive.com/api/remote-jobs
Remote-only board; the search parameter does the keyword matching upstream.
"""

from __future__ import annotations

import logging
from typing import List

from ..models import CanonicalQuery, Job
from ..normalize import format_salary, normalize_timestamp, normalize_type, parse_salary_text, string_list
from .base import BaseSource

logger = logging.getLogger(__name__)


class RemotiveSource(BaseSource):
    name = "Remotive"
    requires_api_key = False
    base_url = "https://remotive.com/api/remote-jobs"

    def fetch_jobs(self, query: CanonicalQuery) -> List[Job]:
        listings = self._get_listings(self.base_url, "jobs", params={"search": query.text or ""})
        if not listings:
            logger.debug("[%s] No listings for %r", self.name, query.text)
        return self.map_items(listings)

    def map_item(self, item: dict, index: int, now: str) -> Job:
        raw_id = item.get("id")
        s_min, s_max = parse_salary_text(item.get("salary"))

        return Job(
            job_id=f"rem-{raw_id}" if raw_id else f"rem-{index}",
            title=item.get("title") or "",
            company=item.get("company_name") or "",
            location=item.get("candidate_required_location") or "Remote",
            description=item.get("description") or "",
            url=item.get("url") or "#",
            source=self.name,
            remote=True,
            salary=format_salary(s_min, s_max),
            job_type=normalize_type(item.get("job_type")),
            requirements=string_list(item.get("tags")),
            posted_at=normalize_timestamp(item.get("publication_date"), now),
            image_url=item.get("company_logo") or item.get("company_logo_url") or "",
        )
