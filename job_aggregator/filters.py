"""
Filter / sort engine applied to the merged job list.

All text matching is case-insensitive substring matching; with
``fold_diacritics`` accents are also ignored (``Pôle`` matches ``pole``).
"""

from __future__ import annotations

import logging
import unicodedata
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

import config
from .models import FilterSet, Job
from .normalize import parse_timestamp

logger = logging.getLogger(__name__)

# (trigger in requested source, needles accepted in job.source)
SourceSynonym = Tuple[str, Tuple[str, ...]]

WELCOME_SYNONYM: SourceSynonym = ("welcome", ("welcome",))
POLE_EMPLOI_SYNONYM: SourceSynonym = ("pole emploi", ("pole", "emploi"))


def fold(text, fold_diacritics: bool = False) -> str:
    """Lowercase `text`, optionally stripping accents."""
    value = str(text or "").lower()
    if fold_diacritics:
        value = "".join(c for c in unicodedata.normalize("NFD", value) if not unicodedata.combining(c))
    return value


def source_matches(
    source: str,
    requested: str,
    synonyms: Sequence[SourceSynonym] = (WELCOME_SYNONYM,),
    fold_diacritics: bool = False,
) -> bool:
    wanted = fold(requested, fold_diacritics).strip()
    if not wanted:
        return True
    name = fold(source, fold_diacritics)
    if wanted in name:
        return True
    for trigger, needles in synonyms:
        if trigger in wanted and any(n in name for n in needles):
            return True
    return False


def filter_by_source(
    jobs: List[Job],
    requested: str,
    synonyms: Sequence[SourceSynonym] = (WELCOME_SYNONYM,),
    fold_diacritics: bool = False,
) -> List[Job]:
    if not requested:
        return list(jobs)
    return [j for j in jobs if source_matches(j.source, requested, synonyms, fold_diacritics)]


def filter_allowed(jobs: List[Job], allowed: Iterable[str]) -> List[Job]:
    """Keep only jobs whose source contains one of the allow-listed names."""
    names = [a.lower() for a in allowed if a]
    if not names:
        return list(jobs)
    return [j for j in jobs if any(n in (j.source or "").lower() for n in names)]


def window_start(date_posted: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Oldest accepted posting time for a 24h/7d/14d/30d bucket, or None for no limit."""
    days = config.DATE_POSTED_WINDOWS.get((date_posted or "").strip().lower(), 0)
    if days <= 0:
        return None
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=days)


def posted_since(job: Job, since: datetime) -> bool:
    stamp = parse_timestamp(job.posted_at)
    return stamp is not None and stamp >= since


def apply_filters(
    jobs: List[Job],
    filters: FilterSet,
    now: Optional[datetime] = None,
    include_source: bool = True,
    synonyms: Sequence[SourceSynonym] = (WELCOME_SYNONYM,),
    fold_diacritics: bool = False,
) -> List[Job]:
    """
    Apply structured filters in a fixed order: source, location, company,
    remote, contract type, posting age.
    """
    result = list(jobs)

    if include_source and filters.source:
        result = filter_by_source(result, filters.source, synonyms, fold_diacritics)

    if filters.location:
        wanted = fold(filters.location, fold_diacritics)
        result = [j for j in result if wanted in fold(j.location, fold_diacritics)]

    if filters.company:
        wanted = fold(filters.company, fold_diacritics)
        result = [j for j in result if wanted in fold(j.company, fold_diacritics)]

    if filters.remote_only:
        result = [j for j in result if j.remote]

    if filters.job_type:
        wanted = fold(filters.job_type, fold_diacritics)
        result = [j for j in result if wanted in fold(j.job_type, fold_diacritics)]

    if filters.date_posted:
        since = window_start(filters.date_posted, now)
        if since is not None:
            result = [j for j in result if posted_since(j, since)]
        else:
            logger.debug("Ignoring unknown datePosted value '%s'", filters.date_posted)

    return result


def sort_jobs(jobs: List[Job], sort: str = "") -> List[Job]:
    """'recent' orders newest first (undated last); anything else keeps provider order."""
    if (sort or "").lower() != "recent":
        return list(jobs)
    oldest = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(jobs, key=lambda j: parse_timestamp(j.posted_at) or oldest, reverse=True)


def paginate(jobs: List[Job], page_size: int, page: int = 1) -> List[Job]:
    """Slice one page of at most `page_size` jobs (pages are 1-based)."""
    if page_size <= 0:
        return []
    start = (max(1, page) - 1) * page_size
    return jobs[start:start + page_size]
