"""Job source adapters – one module per external API."""

from .base import BaseSource, SourceResponseError
from .jsearch import JSearchSource
from .arbeitnow import ArbeitnowSource
from .remotive import RemotiveSource

# Registry: name → class, in invocation order. When two sources return the
# same posting the earlier one wins deduplication.
ALL_SOURCES = {
    # ── API key required (skipped without RAPIDAPI_KEY) ───────
    "JSearch": JSearchSource,
    # ── Free (no key needed) ──────────────────────────────────
    "Arbeitnow": ArbeitnowSource,
    "Remotive": RemotiveSource,
}

FREE_SOURCES = ["Arbeitnow", "Remotive"]
API_KEY_SOURCES = ["JSearch"]

__all__ = [
    "ALL_SOURCES", "API_KEY_SOURCES", "FREE_SOURCES", "BaseSource", "SourceResponseError",
    "JSearchSource", "ArbeitnowSource", "RemotiveSource",
]
