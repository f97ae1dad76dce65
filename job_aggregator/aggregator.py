"""
Aggregator – orchestrates one search across all configured sources.

• Fans out to every source in a thread pool and joins before processing.
• Sources that miss the deadline or fail contribute nothing.
• Merges in source order, then filters, classifies, dedupes and paginates.

Deployment differences (allow-list, page size, how a requested source is
honoured) live in `AggregatorProfile` rather than in separate handlers.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

import config
from .classifier import Classifier
from .dedupe import dedupe
from .filters import (
    POLE_EMPLOI_SYNONYM,
    WELCOME_SYNONYM,
    SourceSynonym,
    apply_filters,
    filter_allowed,
    filter_by_source,
    fold,
    paginate,
    sort_jobs,
)
from .models import CanonicalQuery, FilterSet, Job
from .sources import ALL_SOURCES, BaseSource

logger = logging.getLogger(__name__)

# Source policies
FILTER = "filter"                            # keep records whose source matches
PREFER_OR_MERGE = "prefer_or_merge"          # first source's matches, else everything
PREFER_OR_PROVIDER = "prefer_or_provider"    # first source's matches, else the named provider


@dataclass(frozen=True)
class AggregatorProfile:
    """How one deployment of the aggregator selects, filters and caps results."""

    name: str
    page_cap: int
    allowed_sources: Tuple[str, ...] = ()
    source_policy: str = FILTER
    default_source: str = ""
    structured_query: bool = True            # pass location/company/remote to sources
    apply_filters: bool = True
    fold_diacritics: bool = False
    source_synonyms: Tuple[SourceSynonym, ...] = (WELCOME_SYNONYM,)


PROFILES: Dict[str, AggregatorProfile] = {
    # Public endpoint: editorial allow-list, every filter, 100 results.
    # Remotive and Arbeitnow records never pass the allow-list, so without
    # RAPIDAPI_KEY this profile returns no jobs.
    "public": AggregatorProfile(
        name="public",
        page_cap=100,
        allowed_sources=tuple(config.ALLOWED_SOURCES),
    ),
    # Internal server: LinkedIn by default, free text only, 60 results
    "internal": AggregatorProfile(
        name="internal",
        page_cap=60,
        source_policy=PREFER_OR_MERGE,
        default_source="LinkedIn",
        structured_query=False,
        apply_filters=False,
        source_synonyms=(),
    ),
    # Web client: accent-insensitive source preference with provider fallback
    "client": AggregatorProfile(
        name="client",
        page_cap=100,
        source_policy=PREFER_OR_PROVIDER,
        apply_filters=False,
        fold_diacritics=True,
        source_synonyms=(WELCOME_SYNONYM, POLE_EMPLOI_SYNONYM),
    ),
}


def get_profile(name: str) -> AggregatorProfile:
    try:
        return PROFILES[(name or "public").strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown aggregator profile '{name}' (expected one of: {', '.join(PROFILES)})") from None


class Aggregator:
    """Central coordinator for job searches."""

    def __init__(
        self,
        profile: Optional[AggregatorProfile] = None,
        sources: Optional[Sequence[BaseSource]] = None,
        classifier: Optional[Classifier] = None,
        deadline: Optional[float] = None,
    ) -> None:
        self.profile = profile or get_profile(config.AGGREGATOR_PROFILE)
        # Built once: each adapter keeps one pooled requests.Session for the process
        if sources is None:
            sources = [cls() for cls in ALL_SOURCES.values()]
        self._sources = list(sources)
        self.classifier = classifier or Classifier()
        self.deadline = config.SOURCE_DEADLINE if deadline is None else deadline

    # ── public API ─────────────────────────────────────────────
    def active_sources(self) -> List[BaseSource]:
        """Sources in invocation order."""
        return list(self._sources)

    def search(self, free_text: str = "", filters: Optional[FilterSet] = None, now: Optional[datetime] = None) -> List[Job]:
        """Run one aggregated search and return at most `profile.page_cap` jobs."""
        filters = filters or FilterSet()
        profile = self.profile
        started = time.time()

        if profile.structured_query:
            query = filters.to_query(free_text)
        else:
            query = CanonicalQuery(text=free_text or "")

        results = self.fan_out(query)
        requested = filters.source or profile.default_source

        if profile.source_policy == FILTER:
            working = [job for _, jobs in results for job in jobs]
            working = filter_allowed(working, profile.allowed_sources)
            if profile.apply_filters:
                working = apply_filters(
                    working, filters, now=now,
                    synonyms=profile.source_synonyms, fold_diacritics=profile.fold_diacritics,
                )
            elif requested:
                working = filter_by_source(working, requested, profile.source_synonyms, profile.fold_diacritics)
        else:
            working = self._prefer(results, requested)
            working = filter_allowed(working, profile.allowed_sources)
            if profile.apply_filters:
                working = apply_filters(
                    working, filters, now=now, include_source=False,
                    synonyms=profile.source_synonyms, fold_diacritics=profile.fold_diacritics,
                )

        classified = self.classifier.classify(working)
        unique = dedupe(classified)
        ordered = sort_jobs(unique, filters.sort)
        page = paginate(ordered, profile.page_cap, filters.page)

        logger.info(
            "Search [%s] q=%r source=%s → %d merged, %d kept, %d unique, %d returned in %.1fs",
            profile.name, free_text, requested or "(any)",
            sum(len(jobs) for _, jobs in results), len(classified), len(unique), len(page),
            time.time() - started,
        )
        return page

    def fan_out(self, query: CanonicalQuery) -> List[Tuple[str, List[Job]]]:
        """
        Query every source concurrently and wait for all of them (or the
        deadline). Returns (source name, jobs) pairs in invocation order.
        """
        sources = self.active_sources()
        if not sources:
            return []

        pool = ThreadPoolExecutor(max_workers=len(sources), thread_name_prefix="source")
        futures = [pool.submit(self._fetch_from_source, src, query) for src in sources]
        timeout = self.deadline if self.deadline and self.deadline > 0 else None
        try:
            done, _ = wait(futures, timeout=timeout)
        finally:
            # Don't let a straggler hold the response
            pool.shutdown(wait=False, cancel_futures=True)

        results: List[Tuple[str, List[Job]]] = []
        for src, future in zip(sources, futures):
            if future in done:
                jobs = future.result()
            else:
                logger.warning("[%s] No response within %.0fs – ignored", src.name, self.deadline)
                jobs = []
            results.append((src.name, jobs))
        return results

    # ── internal ───────────────────────────────────────────────
    @staticmethod
    def _fetch_from_source(source: BaseSource, query: CanonicalQuery) -> List[Job]:
        try:
            return source.fetch(query)
        except Exception as exc:
            logger.exception("[%s] FAILED: %s", source.name, exc)
            return []

    def _prefer(self, results: List[Tuple[str, List[Job]]], requested: str) -> List[Job]:
        """
        Honour a requested source by preferring the first source's matching
        records; otherwise fall back according to the profile's policy.
        """
        profile = self.profile
        merged = [job for _, jobs in results for job in jobs]
        if not requested or not results:
            return merged

        _, primary = results[0]
        preferred = filter_by_source(primary, requested, profile.source_synonyms, profile.fold_diacritics)
        if preferred:
            return preferred

        if profile.source_policy == PREFER_OR_MERGE:
            return merged

        wanted = fold(requested, profile.fold_diacritics)
        for name, jobs in results[1:]:
            if fold(name, profile.fold_diacritics) in wanted:
                return list(jobs)
        return []
