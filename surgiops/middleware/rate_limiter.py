"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter. The Limiter
instance is created in surgiops/__init__.py with no default limits;
this module applies granular limits per route category.

Usage:
    from surgiops.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

from flask import g, request as flask_request

logger = logging.getLogger(__name__)

INSIGHTS_LIMIT = "10/minute"
WRITE_LIMIT = "60/minute"
READ_LIMIT = "200/minute"

WRITE_BLUEPRINTS = ("surgery_case", "hospital", "team", "setup")
READ_BLUEPRINTS = ("reference", "report")


def tenant_rate_limit_key():
    """Rate limit key: tenant if resolved, else remote IP."""
    tenant_id = getattr(g, "tenant_id", None)
    if tenant_id:
        return f"tenant:{tenant_id}"
    return flask_request.remote_addr or "unknown"


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per tenant, falling back to remote IP):
        - Insights:  10/minute  (each refresh runs the AI generator)
        - Writes:    60/minute  (case booking and setup CRUD)
        - Reads:     200/minute (reference data, reports)
        - Health:    exempt

    Rate limiting is disabled in testing mode.
    """
    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    bp = app.blueprints.get("insight")
    if bp:
        limiter.limit(INSIGHTS_LIMIT, key_func=tenant_rate_limit_key)(bp)

    for bp_name in WRITE_BLUEPRINTS:
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(WRITE_LIMIT, key_func=tenant_rate_limit_key)(bp)

    for bp_name in READ_BLUEPRINTS:
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(READ_LIMIT, key_func=tenant_rate_limit_key)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info("Rate limiter configured: insights=%s write=%s read=%s",
                    INSIGHTS_LIMIT, WRITE_LIMIT, READ_LIMIT)
