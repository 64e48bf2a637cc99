"""
SurgiOps supply-chain console
Flask Application Factory.

Usage:
    from surgiops import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import event as _sa_event, engine as _sa_engine
from sqlalchemy.exc import SQLAlchemyError

from surgiops.config import config
from surgiops.core.exceptions import (
    ConflictError,
    FormValidationError,
    InsightGenerationError,
    InvalidTransitionError,
    NotFoundError,
    ReferenceDataError,
    ValidationError,
)
from surgiops.models import db
from surgiops.middleware.logging_config import configure_logging
from surgiops.middleware.rate_limiter import init_rate_limits
from surgiops.middleware.tenant_context import init_tenant_context
from surgiops.middleware.timing import init_request_timing
from surgiops.utils.errors import E, api_error
from surgiops.utils.helpers import describe_store_error

logger = logging.getLogger(__name__)


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit, applied per blueprint
)


def _register_error_handlers(app):
    """Map service-layer exceptions to the standard JSON error body."""

    @app.errorhandler(FormValidationError)
    def _form_invalid(exc):
        return api_error(E.VALIDATION_REQUIRED, str(exc), details=exc.details or None)

    @app.errorhandler(InvalidTransitionError)
    def _bad_transition(exc):
        return api_error(E.CONFLICT_STATE, str(exc), details=exc.details)

    @app.errorhandler(ValidationError)
    def _invalid(exc):
        return api_error(E.VALIDATION_CONSTRAINT, str(exc), details=exc.details or None)

    @app.errorhandler(NotFoundError)
    def _not_found(exc):
        logger.debug("Not found: %s", exc)
        return api_error(E.NOT_FOUND, f"{exc.resource} not found")

    @app.errorhandler(ConflictError)
    def _conflict(exc):
        return api_error(E.CONFLICT_DUPLICATE, str(exc), details={"field": exc.field})

    @app.errorhandler(ReferenceDataError)
    def _reference_failed(exc):
        return api_error(E.DATABASE, str(exc), status=503,
                         details={"failed": exc.failed} if exc.failed else None)

    @app.errorhandler(InsightGenerationError)
    def _insights_failed(exc):
        return api_error(E.UPSTREAM, str(exc))

    @app.errorhandler(SQLAlchemyError)
    def _store_error(exc):
        db.session.rollback()
        logger.error("Store error on %s %s: %s", request.method, request.path, exc)
        return api_error(E.DATABASE, describe_store_error(exc))

    @app.errorhandler(404)
    def _route_not_found(e):
        return {"error": "Not found", "path": request.path}, 404

    @app.errorhandler(405)
    def _method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(429)
    def _rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    @app.errorhandler(500)
    def _server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return {"error": "Internal server error"}, 500


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name]())
    app.config.setdefault("MAX_CONTENT_LENGTH", 2 * 1024 * 1024)  # 2 MB

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Request middleware ───────────────────────────────────────────────
    init_request_timing(app)
    init_tenant_context(app)

    # ── Import all models so Alembic can detect them ─────────────────────
    from surgiops.models import auth as _auth_models                  # noqa: F401
    from surgiops.models import organization as _organization_models  # noqa: F401
    from surgiops.models import clinical as _clinical_models          # noqa: F401
    from surgiops.models import ai as _ai_models                      # noqa: F401
    from surgiops.models import sales as _sales_models                # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ────────────────────────
    if config_name != "production":
        with app.app_context():
            if not app.testing:
                os.makedirs(app.instance_path, exist_ok=True)
            db.create_all()

    # ── Blueprints ───────────────────────────────────────────────────────
    from surgiops.blueprints.health_bp import health_bp
    from surgiops.blueprints.reference_bp import reference_bp
    from surgiops.blueprints.surgery_case_bp import surgery_case_bp
    from surgiops.blueprints.hospital_bp import hospital_bp
    from surgiops.blueprints.team_bp import team_bp
    from surgiops.blueprints.setup_bp import setup_bp
    from surgiops.blueprints.insight_bp import insight_bp
    from surgiops.blueprints.report_bp import report_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(reference_bp)
    app.register_blueprint(surgery_case_bp)
    app.register_blueprint(hospital_bp)
    app.register_blueprint(team_bp)
    app.register_blueprint(setup_bp)
    app.register_blueprint(insight_bp)
    app.register_blueprint(report_bp)

    _register_error_handlers(app)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-demo")
    @click.option("--slug", default=None, help="Tenant slug (default: demo-orthopedics)")
    def seed_demo_cmd(slug):
        """Seed one demo tenant with hospitals, surgeons and cases."""
        from surgiops.services.demo_seed import DEMO_SLUG, seed_demo_tenant
        summary = seed_demo_tenant(slug or DEMO_SLUG)
        logger.info("Seeded demo tenant: %s", summary)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app
