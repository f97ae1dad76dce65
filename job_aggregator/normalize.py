"""
Field normalizers shared by every source adapter.

Each upstream speaks its own dialect for contract types, salaries, places and
dates; these helpers turn them into the canonical strings carried by `Job`.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Optional, Tuple
from urllib.parse import urlparse

import config
from .models import SALARY_PLACEHOLDER, URL_PLACEHOLDER

# Ordered: the first keyword found in the upper-cased label wins
_TYPE_KEYWORDS = (
    (("FULL",), "CDI"),
    (("PART", "CONTRACT"), "CDD"),
    (("TEMP",), "Intérim"),
    (("INTERN",), "Stage"),
    (("APPRENTI",), "Alternance"),
)


def normalize_type(raw) -> str:
    """Map a free-text employment type (FULLTIME, part_time …) to a French contract label."""
    if not raw:
        return ""
    label = str(raw)
    upper = label.upper()
    for needles, contract in _TYPE_KEYWORDS:
        if any(n in upper for n in needles):
            return contract
    return label


def _to_thousands(value) -> Optional[int]:
    """Divide a raw salary by 1000 and round half up; None for missing / zero."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or number <= 0:
        return None
    rounded = math.floor(number / 1000 + 0.5)
    return rounded or None


def format_salary(salary_min=None, salary_max=None) -> str:
    """
    Format a salary range as ``45k-65k€``, a single ``80k€`` upper bound,
    or the ``—`` placeholder when no usable figure exists.
    """
    low = _to_thousands(salary_min)
    high = _to_thousands(salary_max)
    if low and high:
        return f"{low}k-{high}k€"
    if high:
        return f"{high}k€"
    return SALARY_PLACEHOLDER


_NUMBER = r"\d+(?:\.\d+)?"
_PERCENT_RE = re.compile(_NUMBER + r"\s*%")
_RATE_RE = re.compile(r"\b(?:hour|hourly|heure|day|daily|jour)s?\b|/\s*(?:h|hr|j|day)\b", re.IGNORECASE)
_RANGE_RE = re.compile(r"(" + _NUMBER + r")[^\d]{0,6}?(?:-|–|—|\bto\b|\bà\b)[^\d]{0,6}?(" + _NUMBER + r")",
                       re.IGNORECASE)


def _annual(value: str) -> float:
    amount = float(value)
    # Values like 60, 90 are thousands
    return amount * 1000 if amount < 1000 else amount


def parse_salary_text(salary_str) -> Tuple[Optional[float], Optional[float]]:
    """
    Extract an annual (min, max) from strings like '$60,000 - $90,000' or
    '60k-90k'. Percentages are ignored; hourly or daily rates give (None, None).
    """
    if not salary_str or not isinstance(salary_str, str):
        return None, None
    text = salary_str.replace(",", "")
    if _RATE_RE.search(text):
        return None, None
    text = _PERCENT_RE.sub(" ", text)

    span = _RANGE_RE.search(text)
    if span:
        low, high = sorted((_annual(span.group(1)), _annual(span.group(2))))
        return low, high
    first = re.search(_NUMBER, text)
    if not first:
        return None, None
    return None, _annual(first.group(0))


def compose_location(*fragments: Optional[str]) -> str:
    """Join non-empty place fragments with ', ' (city, region, country …)."""
    return ", ".join(str(f).strip() for f in fragments if f and str(f).strip())


def normalize_timestamp(value, default: str) -> str:
    """
    Return an ISO-8601 string for an upstream date.
    Strings are kept verbatim; epoch numbers become UTC ISO strings.
    """
    if value is None or value == "" or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        seconds = float(value)
        if seconds > 1e11:  # milliseconds
            seconds /= 1000
        try:
            stamp = datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return default
        return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return str(value)


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware datetime (naive values are UTC)."""
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        stamp = datetime.fromisoformat(text)
    except ValueError:
        return None
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


def sanitize_url(url) -> str:
    """Return the URL if it is an absolute http(s) link, otherwise the '#' placeholder."""
    if not url:
        return URL_PLACEHOLDER
    try:
        parsed = urlparse(str(url).strip())
    except ValueError:
        return URL_PLACEHOLDER
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return parsed.geturl()
    return URL_PLACEHOLDER


def hostname_of(url) -> str:
    if sanitize_url(url) == URL_PLACEHOLDER:
        return ""
    try:
        return urlparse(str(url).strip()).hostname or ""
    except ValueError:
        return ""


def logo_url_for(url) -> str:
    """Domain-keyed logo URL for a job link, or '' when the link has no host."""
    hostname = hostname_of(url)
    if not hostname:
        return ""
    return config.LOGO_URL_TEMPLATE.format(hostname=hostname)


def string_list(value) -> list:
    """Coerce an upstream skills/tags field into a list of strings."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v]
    return []
