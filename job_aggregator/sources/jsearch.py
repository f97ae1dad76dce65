"""
JSearch (RapidAPI) – requires an API key.
Register at https://rapidapi.com/letscrape-6bRBa3QguO5/api/jsearch
Endpoint: https://jsearch.p.rapidapi.com/search

JSearch aggregates Google for Jobs, so each listing names its real
publisher (LinkedIn, Indeed, Welcome to the Jungle …) in `job_publisher`.
"""

from __future__ import annotations

import logging
from typing import List

import config
from ..models import CanonicalQuery, Job
from ..normalize import compose_location, format_salary, logo_url_for, normalize_timestamp, normalize_type, string_list
from .base import BaseSource

logger = logging.getLogger(__name__)


def build_search_text(query: CanonicalQuery) -> str:
    """Compose JSearch's single query string: text plus location:/company:/remote tokens."""
    tokens = []
    if query.text:
        tokens.append(query.text)
    if query.location:
        tokens.append(f"location:{query.location}")
    if query.company:
        tokens.append(f"company:{query.company}")
    if query.remote_only:
        tokens.append("remote")
    return " ".join(tokens)


class JSearchSource(BaseSource):
    name = "JSearch"
    requires_api_key = True

    @property
    def base_url(self) -> str:
        return f"https://{config.RAPIDAPI_HOST}/search"

    def is_available(self) -> bool:
        return bool(config.RAPIDAPI_KEY)

    def fetch_jobs(self, query: CanonicalQuery) -> List[Job]:
        params = {
            "query": build_search_text(query),
            "page": "1",
            "num_pages": "1",
        }
        headers = {
            "X-RapidAPI-Key": config.RAPIDAPI_KEY,
            "X-RapidAPI-Host": config.RAPIDAPI_HOST,
        }
        logger.debug("[%s] query=%r", self.name, params["query"])
        listings = self._get_listings(self.base_url, "data", params=params, headers=headers)
        return self.map_items(listings)

    def map_item(self, item: dict, index: int, now: str) -> Job:
        url = item.get("job_apply_link") or item.get("job_google_link") or "#"
        image_url = item.get("employer_logo") or logo_url_for(url)

        return Job(
            job_id=str(item.get("job_id") or f"j-{index}"),
            title=item.get("job_title") or "",
            company=item.get("employer_name") or "",
            location=compose_location(item.get("job_city"), item.get("job_country")),
            description=item.get("job_description") or "",
            url=url,
            source=item.get("job_publisher") or self.name,
            remote=bool(item.get("job_is_remote")),
            salary=format_salary(item.get("job_min_salary"), item.get("job_max_salary")),
            job_type=normalize_type(item.get("job_employment_type")),
            requirements=string_list(item.get("job_required_skills")),
            posted_at=normalize_timestamp(item.get("job_posted_at_datetime_utc"), now),
            image_url=image_url,
        )
