"""
Health check blueprint.

Endpoints:
    GET /api/v1/health        - simple status
    GET /api/v1/health/ready  - simple 200 for load balancers
    GET /api/v1/health/live   - detailed system health (DB, insight function config)
"""

import logging
import time

from flask import Blueprint, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from surgiops.middleware.timing import request_summary
from surgiops.models import db

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/v1/health")


@health_bp.route("", methods=["GET"])
def health():
    return jsonify({"status": "ok", "app": "SurgiOps"}), 200


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Simple readiness probe - always 200 if app is running."""
    return jsonify({"status": "ok"}), 200


@health_bp.route("/live", methods=["GET"])
def live():
    """Detailed liveness check with dependency status."""
    checks = {}
    overall = True

    # ── Database ─────────────────────────────────────────────────────
    try:
        t0 = time.perf_counter()
        db.session.execute(db.text("SELECT 1"))
        db_ms = (time.perf_counter() - t0) * 1000
        checks["database"] = {"status": "ok", "latency_ms": round(db_ms, 1)}
    except SQLAlchemyError as exc:
        db.session.rollback()
        checks["database"] = {"status": "error", "detail": str(exc)}
        overall = False
        logger.error("Health check - database failed: %s", exc)

    # ── Insight generation function ──────────────────────────────────
    cfg = current_app.config
    checks["insight_function"] = {
        "status": "configured" if cfg.get("INSIGHTS_FUNCTION_URL") else "not_configured",
        "polling": bool(cfg.get("INSIGHTS_STATUS_URL")),
    }

    # ── Report sources ───────────────────────────────────────────────
    checks["reports"] = {
        "opportunities": bool(cfg.get("REPORTS_OPPORTUNITIES_ENABLED")),
        "transactions": bool(cfg.get("REPORTS_TRANSACTIONS_ENABLED")),
    }

    checks["requests_last_hour"] = request_summary()
    checks["app"] = {
        "name": "SurgiOps",
        "debug": current_app.debug,
        "testing": current_app.testing,
    }

    status_code = 200 if overall else 503
    return jsonify({
        "status": "healthy" if overall else "degraded",
        "checks": checks,
    }), status_code
