"""
Data models for aggregated job listings and search requests.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import List, Mapping, Optional

TITLE_PLACEHOLDER = "Poste"
COMPANY_PLACEHOLDER = "Entreprise non spécifiée"
SALARY_PLACEHOLDER = "—"
URL_PLACEHOLDER = "#"

_TRUTHY = ("1", "true", "yes", "on")


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_flag(value) -> bool:
    """Interpret a query-string flag such as ``remote=1`` / ``remote=on``."""
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUTHY


@dataclass
class Job:
    """Represents a single canonical job listing."""

    title: str
    company: str
    location: str
    description: str
    url: str
    source: str

    remote: bool = False
    salary: str = SALARY_PLACEHOLDER
    job_type: str = ""                          # CDI, CDD, Intérim, Stage, Alternance or raw
    experience: str = ""
    requirements: List[str] = field(default_factory=list)
    posted_at: str = field(default_factory=utc_now_iso)
    image_url: str = ""

    # Lifecycle belongs to the application tracker, never set here
    applied: bool = False
    saved: bool = False

    job_id: str = ""

    def __post_init__(self) -> None:
        """Apply placeholders so the record never carries empty required fields."""
        self.title = self.title or TITLE_PLACEHOLDER
        self.company = self.company or COMPANY_PLACEHOLDER
        self.salary = self.salary or SALARY_PLACEHOLDER
        self.url = self.url or URL_PLACEHOLDER
        self.location = self.location or ""
        self.description = self.description or ""
        self.image_url = self.image_url or ""
        self.requirements = [str(r) for r in (self.requirements or [])]
        if not self.job_id:
            self.job_id = self._generate_id()

    # ── helpers ────────────────────────────────────────────────
    def _generate_id(self) -> str:
        """Create a stable hash from source + url (or source + title + company)."""
        if self.url and self.url != URL_PLACEHOLDER:
            raw = f"{self.source}|{self.url}"
        else:
            raw = f"{self.source}|{self.title}|{self.company}"
        return hashlib.md5(raw.encode()).hexdigest()

    def to_dict(self) -> dict:
        """Wire representation (camelCase keys, as consumed by the web client)."""
        data = asdict(self)
        return {
            "id": data["job_id"],
            "title": data["title"],
            "company": data["company"],
            "location": data["location"],
            "remote": data["remote"],
            "salary": data["salary"],
            "experience": data["experience"],
            "type": data["job_type"],
            "description": data["description"],
            "requirements": data["requirements"],
            "postedAt": data["posted_at"],
            "applied": data["applied"],
            "saved": data["saved"],
            "source": data["source"],
            "imageUrl": data["image_url"],
            "url": data["url"],
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "Job":
        """Rebuild a Job from its wire representation (e.g. for enrichment)."""
        requirements = data.get("requirements") or []
        if not isinstance(requirements, list):
            requirements = [requirements]
        return cls(
            job_id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            company=str(data.get("company") or ""),
            location=str(data.get("location") or ""),
            description=str(data.get("description") or ""),
            url=str(data.get("url") or ""),
            source=str(data.get("source") or ""),
            remote=parse_flag(data.get("remote")),
            salary=str(data.get("salary") or ""),
            job_type=str(data.get("type") or ""),
            experience=str(data.get("experience") or ""),
            requirements=requirements,
            posted_at=str(data.get("postedAt") or utc_now_iso()),
            image_url=str(data.get("imageUrl") or ""),
            applied=parse_flag(data.get("applied")),
            saved=parse_flag(data.get("saved")),
        )


@dataclass
class CanonicalQuery:
    """Provider-independent search request handed to every source adapter."""

    text: str = ""
    location: str = ""
    company: str = ""
    remote_only: bool = False


@dataclass
class FilterSet:
    """Structured filters applied by the aggregator after fan-out."""

    source: str = ""
    location: str = ""
    company: str = ""
    job_type: str = ""
    date_posted: str = ""                       # 24h | 7d | 14d | 30d
    remote_only: bool = False
    sort: str = ""                              # "" keeps provider order, "recent" = newest first
    page: int = 1

    @classmethod
    def from_args(cls, args: Mapping) -> "FilterSet":
        """Build a FilterSet from request query parameters."""
        try:
            page = int(args.get("page") or 1)
        except (TypeError, ValueError):
            page = 1
        return cls(
            source=str(args.get("source") or "").strip(),
            location=str(args.get("location") or "").strip(),
            company=str(args.get("company") or "").strip(),
            job_type=str(args.get("type") or "").strip(),
            date_posted=str(args.get("datePosted") or "").strip(),
            remote_only=parse_flag(args.get("remote")),
            sort=str(args.get("sort") or "").strip().lower(),
            page=max(1, page),
        )

    def to_query(self, text: str) -> CanonicalQuery:
        return CanonicalQuery(
            text=text or "",
            location=self.location,
            company=self.company,
            remote_only=self.remote_only,
        )


def job_dicts(jobs: List[Job], limit: Optional[int] = None) -> List[dict]:
    """Serialize a sequence of jobs for a JSON response."""
    selected = jobs if limit is None else jobs[:limit]
    return [job.to_dict() for job in selected]
