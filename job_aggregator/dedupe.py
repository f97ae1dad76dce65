"""
Deduplication of postings surfaced by several sources.
"""

from __future__ import annotations

from typing import List

from .models import URL_PLACEHOLDER, Job


def dedupe_key(job: Job) -> str:
    """The job's URL when it is a real link, else its id ('' if neither)."""
    url = (job.url or "").strip()
    if url and url != URL_PLACEHOLDER:
        return url
    return (job.job_id or "").strip()


def dedupe(jobs: List[Job]) -> List[Job]:
    """Order-preserving: the first record for each key wins, unkeyable records are dropped."""
    seen = set()
    unique: List[Job] = []
    for job in jobs:
        key = dedupe_key(job)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(job)
    return unique
