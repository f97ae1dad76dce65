"""
Job Aggregator – Flask API.

Routes:
  /api/jobs             GET  – aggregated search across all sources
  /api/jobs/enrich      POST – backfill missing job images
  /api/sources          GET  – adapters and whether they can run
  /api/taxonomy         GET  – digital-job keyword taxonomy

Query parameters for /api/jobs (all optional):
  q, source, location, company, type (CDI, CDD, Intérim, Stage …),
  datePosted (24h | 7d | 14d | 30d), remote (1 | true | yes | on),
  sort (recent), page
"""

from __future__ import annotations

import logging
import time

from flask import Flask, request, jsonify, g

import config
from job_aggregator.aggregator import Aggregator
from job_aggregator.enricher import Enricher
from job_aggregator.models import FilterSet, Job, job_dicts
from job_aggregator.sources import FREE_SOURCES

# ── Logging ────────────────────────────────────────────────────
LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def _configure_logging() -> logging.Logger:
    """Console at INFO; warnings and errors are also appended to the error log."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    # Request lines come from _log_request below
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    log = logging.getLogger("job_aggregator.api")
    try:
        errors = logging.FileHandler(config.ERROR_LOG_FILE, encoding="utf-8")
    except OSError as exc:
        log.warning("Error log %s unavailable: %s", config.ERROR_LOG_FILE, exc)
        return log
    errors.setLevel(logging.WARNING)
    errors.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(errors)
    return log


logger = _configure_logging()

# ── App setup ──────────────────────────────────────────────────
app = Flask(__name__)
app.json.ensure_ascii = False

aggregator = Aggregator()
enricher = Enricher()


@app.before_request
def _start_timer():
    g.started_at = time.perf_counter()


@app.after_request
def _log_request(response):
    took_ms = (time.perf_counter() - g.get("started_at", time.perf_counter())) * 1000
    level = logging.WARNING if response.status_code >= 400 else logging.INFO
    logger.log(level, "%s %s → %d (%.0fms)", request.method, request.full_path.rstrip("?"),
               response.status_code, took_ms)
    # Called from the browser front-end on another origin
    response.headers.setdefault("Access-Control-Allow-Origin", "*")
    return response


def _error(message: str, status: int):
    return jsonify({"error": message}), status


# ╭──────────────────────────────────────────────────────────────╮
# │  API routes                                                  │
# ╰──────────────────────────────────────────────────────────────╯

@app.route("/api/jobs")
def api_jobs():
    """Aggregate jobs from every source, filtered and capped per the active profile."""
    try:
        filters = FilterSet.from_args(request.args)
        jobs = aggregator.search(request.args.get("q", ""), filters)
    except Exception as exc:
        logger.exception("Aggregation failed")
        return _error(str(exc) or "Server error", 500)
    return jsonify({"jobs": job_dicts(jobs)})


@app.route("/api/jobs/enrich", methods=["POST"])
def api_enrich_jobs():
    """Fill in missing imageUrl values for the posted jobs (best effort)."""
    body = request.get_json(silent=True)
    raw_jobs = body.get("jobs") if isinstance(body, dict) else None
    if not isinstance(raw_jobs, list):
        return _error("Body must be a JSON object with a 'jobs' list", 400)
    try:
        jobs = [Job.from_dict(item) for item in raw_jobs if isinstance(item, dict)]
        enriched = enricher.enrich(jobs)
    except Exception as exc:
        logger.exception("Enrichment failed")
        return _error(str(exc) or "Server error", 500)
    return jsonify({"jobs": job_dicts(enriched)})


@app.route("/api/sources")
def api_sources():
    """Adapters in invocation order, with whether each can currently run."""
    return jsonify(source_status())


@app.route("/api/taxonomy")
def api_taxonomy():
    """Keyword taxonomy used to keep digital jobs."""
    return jsonify(aggregator.classifier.taxonomy.to_dict())


def source_status() -> list[dict]:
    status = []
    for adapter in aggregator.active_sources():
        status.append({
            "name": adapter.name,
            "available": adapter.is_available(),
            "requires_key": adapter.requires_api_key,
            "free": adapter.name in FREE_SOURCES,
        })
    return status


# ── Startup ────────────────────────────────────────────────────

def _log_startup():
    profile = aggregator.profile
    sources = source_status()
    ready = ", ".join(s["name"] for s in sources if s["available"]) or "(none)"
    missing_key = [s["name"] for s in sources if not s["available"]]

    logger.info("  Profile:    %s (page cap %d)", profile.name, profile.page_cap)
    if profile.allowed_sources:
        logger.info("  Allowed:    %s", ", ".join(profile.allowed_sources))
    logger.info("  Sources:    %s", ready)
    if missing_key:
        logger.info("  Skipped:    %s  (set RAPIDAPI_KEY)", ", ".join(missing_key))
    logger.info("  Server:     http://%s:%d", config.API_HOST, config.API_PORT)


if __name__ == "__main__":
    _log_startup()
    app.run(host=config.API_HOST, port=config.API_PORT)
