"""
Configuration management for the Job Aggregator.
Loads settings from environment variables / .env file.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

# Error log file (WARNING and ERROR from all loggers are appended here)
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
ERROR_LOG_FILE = LOG_DIR / os.getenv("ERROR_LOG_FILE", "error_log.txt")

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# ── HTTP server ────────────────────────────────────────────────
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "5175"))

# ── API Keys (optional – sources that need them return nothing if empty) ──
# VITE_RAPIDAPI_KEY is accepted so the same .env works for the web front-end.
RAPIDAPI_KEY = os.getenv("RAPIDAPI_KEY", "") or os.getenv("VITE_RAPIDAPI_KEY", "")
RAPIDAPI_HOST = os.getenv("RAPIDAPI_HOST", "jsearch.p.rapidapi.com")

# ── Aggregation ────────────────────────────────────────────────
# Deployment profile: public (allow-list, 100 results), internal (60 results,
# prefer requested source) or client (prefer requested source, then provider).
AGGREGATOR_PROFILE = os.getenv("AGGREGATOR_PROFILE", "public").strip().lower()

# Seconds for each upstream HTTP request
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "15"))
# Seconds the aggregator waits for all sources; late sources contribute nothing
SOURCE_DEADLINE = float(os.getenv("SOURCE_DEADLINE", "20"))

# Sources kept by the public profile (case-insensitive substring on job.source)
ALLOWED_SOURCES_RAW = os.getenv(
    "ALLOWED_SOURCES", "linkedin,welcome to the jungle,welcometothejungle,monster,indeed"
)
ALLOWED_SOURCES = [s.strip().lower() for s in ALLOWED_SOURCES_RAW.split(",") if s.strip()]

# ── Image enrichment ───────────────────────────────────────────
MICROLINK_URL = os.getenv("MICROLINK_URL", "https://api.microlink.io/")
LOGO_URL_TEMPLATE = os.getenv("LOGO_URL_TEMPLATE", "https://logo.clearbit.com/{hostname}")
# Concurrent link-preview lookups per enrichment call
ENRICH_MAX_WORKERS = int(os.getenv("ENRICH_MAX_WORKERS", "8"))
ENRICH_TIMEOUT = int(os.getenv("ENRICH_TIMEOUT", "8"))

# Posting-age buckets accepted by the datePosted filter (days)
DATE_POSTED_WINDOWS = {"24h": 1, "7d": 7, "14d": 14, "30d": 30}

# Contract types shown by the front-end
JOB_TYPES = ["CDI", "CDD", "Intérim", "Stage", "Alternance"]
