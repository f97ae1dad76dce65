"""
"Digital job" classifier – keeps tech / product postings when there are any.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .models import Job
from .taxonomy import DIGITAL_JOBS, Taxonomy

logger = logging.getLogger(__name__)


class Classifier:
    """Filters jobs against a keyword taxonomy, never emptying a non-empty input."""

    def __init__(self, taxonomy: Optional[Taxonomy] = None) -> None:
        self.taxonomy = taxonomy or DIGITAL_JOBS

    def matches(self, job: Job) -> bool:
        text = f"{job.title} {job.description}".lower()
        return any(k in text for k in self.taxonomy.keywords)

    def classify(self, jobs: List[Job]) -> List[Job]:
        """
        Return the jobs matching the taxonomy. When none match, return the
        input unchanged so classification alone never yields zero results.
        """
        matched = [job for job in jobs if self.matches(job)]
        if matched:
            logger.debug("Classifier kept %d/%d jobs (%s v%s)",
                         len(matched), len(jobs), self.taxonomy.name, self.taxonomy.version)
            return matched
        if jobs:
            logger.debug("Classifier matched nothing – keeping all %d jobs", len(jobs))
        return list(jobs)
