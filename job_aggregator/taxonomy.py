"""
Keyword taxonomy for "digital" (tech / product) jobs.

Stems are matched as lowercase substrings, so short ones such as "ai", "po"
or "ui" also match unrelated words; that is the established behaviour of
the search results and is kept as is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Taxonomy:
    """A named, versioned, closed set of lowercase keyword stems."""

    name: str
    version: str
    keywords: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", tuple(k.lower() for k in self.keywords if k))

    def to_dict(self) -> dict:
        return {"name": self.name, "version": self.version, "keywords": list(self.keywords)}


DIGITAL_JOBS = Taxonomy(
    name="digital-jobs",
    version="1",
    keywords=(
        # Roles
        "devops", "développeur", "developpeur", "developer",
        "frontend", "front-end", "backend", "back-end", "full stack", "fullstack",
        "software", "ingénieur", "ingenieur",
        # Fields
        "data", "ml", "ai", "cloud", "sre", "qa", "test",
        "mobile", "ios", "android",
        # Stacks
        "react", "vue", "angular", "node", "python", "java", "golang", "typescript",
        "kubernetes", "aws", "gcp", "azure",
        # Product & design
        "ux", "ui", "designer", "product", "scrum", "po", "pm",
        # Security
        "secops", "cyber", "security", "sécurité",
    ),
)
