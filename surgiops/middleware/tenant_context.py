"""
Tenant Context Middleware - resolves which tenant an API request acts for.

Every data collection is tenant-scoped. The tenant is taken from, in order:
  1. the ``X-Tenant-ID`` header
  2. the ``tenant_id`` query parameter
  3. ``tenant_id`` in a JSON body

The tenant must exist and be active. On success ``g.tenant_id`` and
``g.tenant`` are set for the route handlers and the log filter.
"""

import logging

from flask import g, request

from surgiops.models import db
from surgiops.models.auth import Tenant
from surgiops.utils.errors import E, api_error

logger = logging.getLogger(__name__)

TENANT_SKIP_PREFIXES = (
    "/api/v1/health",
    "/static/",
)


def _requested_tenant_id():
    raw = request.headers.get("X-Tenant-ID")
    if raw is None:
        raw = request.args.get("tenant_id")
    if raw is None and request.is_json:
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            raw = body.get("tenant_id")
    return raw


def init_tenant_context(app):
    """Register tenant context middleware as a before_request hook."""

    @app.before_request
    def _tenant_context():
        g.tenant = None
        g.tenant_id = None

        if not request.path.startswith("/api/v1/"):
            return None
        if request.path.startswith(TENANT_SKIP_PREFIXES):
            return None
        if request.method == "OPTIONS":
            return None

        raw = _requested_tenant_id()
        if raw in (None, ""):
            return api_error(E.VALIDATION_REQUIRED,
                             "Tenant is required (X-Tenant-ID header or tenant_id)")
        try:
            tenant_id = int(raw)
        except (TypeError, ValueError):
            return api_error(E.VALIDATION_INVALID, f"Invalid tenant id: {raw!r}")

        tenant = db.session.get(Tenant, tenant_id)
        if tenant is None:
            logger.warning("Unknown tenant_id %s", tenant_id)
            return api_error(E.NOT_FOUND, "Tenant not found", status=403)
        if not tenant.is_active:
            logger.warning("Request for deactivated tenant_id %s", tenant_id)
            return api_error(E.NOT_FOUND, "Tenant account is deactivated", status=403)

        g.tenant = tenant
        g.tenant_id = tenant.id
        return None

    logger.info("Tenant context middleware installed")
