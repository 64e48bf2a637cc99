"""
AI insight listing, viewed tracking and on-demand regeneration.

Business context:
    Insights are written by an external generation function; this
    application reads them, lets a user mark one as viewed and asks the
    function for a fresh batch.

Refresh completion:
    When the function answers with a run id and a status endpoint is
    configured, the run is polled until it reaches a terminal status or
    the attempt budget runs out. When it returns no id, the older
    behaviour applies: wait a fixed delay, re-read, and if the count did
    not change wait once more and re-read again. Every refresh is recorded
    as an InsightGenerationRun.
"""

import logging
import time
from collections import Counter
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy import func, select, update

from surgiops.core.exceptions import InsightGenerationError, ValidationError
from surgiops.integrations.insight_gateway import InsightGateway
from surgiops.models import db
from surgiops.models.ai import INSIGHT_CATEGORIES, TERMINAL_RUN_STATUSES, AIInsight, InsightGenerationRun
from surgiops.services.helpers.scoped_queries import get_scoped
from surgiops.utils.helpers import commit_or_raise

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"

RECENTLY_GENERATED_MESSAGE = (
    "Insights were recently generated. Please wait a few minutes before generating new insights."
)
AI_UNAVAILABLE_MESSAGE = "AI service temporarily unavailable. Please try again later."
TIMEOUT_MESSAGE = "Request timed out. Please try again."


# ── Reads and client-side views ──────────────────────────────────────────────


def list_insights(tenant_id: int, limit: int = 50) -> list[dict]:
    """Newest insights first."""
    stmt = (
        select(AIInsight)
        .where(AIInsight.tenant_id == tenant_id)
        .order_by(AIInsight.created_at.desc(), AIInsight.id.desc())
        .limit(limit)
    )
    return [i.to_dict() for i in db.session.execute(stmt).scalars()]


def count_insights(tenant_id: int) -> int:
    stmt = select(func.count(AIInsight.id)).where(AIInsight.tenant_id == tenant_id)
    return db.session.execute(stmt).scalar_one()


def filter_by_category(rows: list[dict], category: str) -> list[dict]:
    if not category or category == ALL_CATEGORIES:
        return rows
    return [r for r in rows if r.get("insight_type") == category]


def count_by_category(rows: list[dict]) -> dict[str, int]:
    """Per-category counts for the filter chips, including ``all``."""
    counts = Counter(r.get("insight_type") for r in rows)
    return {ALL_CATEGORIES: len(rows), **{c: counts.get(c, 0) for c in INSIGHT_CATEGORIES}}


def priority_for(confidence: float | None) -> str:
    score = confidence or 0
    if score >= 0.8:
        return "high"
    if score >= 0.6:
        return "medium"
    return "low"


def mark_viewed(tenant_id: int, insight_id: int) -> dict:
    """Flag one insight as viewed.

    Only is_viewed and viewed_at are written; updated_at keeps its value.
    """
    insight = get_scoped(AIInsight, insight_id, tenant_id=tenant_id)
    db.session.execute(
        update(AIInsight)
        .where(AIInsight.id == insight.id, AIInsight.tenant_id == tenant_id)
        .values(is_viewed=True, viewed_at=datetime.now(timezone.utc),
                updated_at=AIInsight.updated_at)
        .execution_options(synchronize_session=False)
    )
    commit_or_raise("AIInsight", value=insight_id)
    logger.info("Insight marked viewed", extra={"tenant_id": tenant_id, "insight_id": insight_id})
    return insight.to_dict()


def get_run(tenant_id: int, run_id: int) -> dict:
    return get_scoped(InsightGenerationRun, run_id, tenant_id=tenant_id).to_dict()


# ── Refresh ──────────────────────────────────────────────────────────────────


def friendly_error(raw: str | None) -> str:
    """Map a raw function/transport error to the message the user sees."""
    text = raw or "Unknown error"
    lowered = text.lower()
    if "duplicate key" in lowered:
        return RECENTLY_GENERATED_MESSAGE
    if "openai" in lowered:
        return AI_UNAVAILABLE_MESSAGE
    if "timeout" in lowered or "timed out" in lowered:
        return TIMEOUT_MESSAGE
    return f"Failed to generate insights: {text}"


def _finish(run: InsightGenerationRun, status: str, tenant_id: int, error: str | None = None):
    run.status = status
    run.error_message = error
    run.insights_after = count_insights(tenant_id)
    run.completed_at = datetime.now(timezone.utc)
    commit_or_raise("InsightGenerationRun", value=run.id)


def _poll(gateway: InsightGateway, run: InsightGenerationRun, *, attempts: int,
          delay: float, sleep) -> tuple[str, str | None]:
    """Poll a run until terminal. Returns (status, raw error)."""
    for _ in range(attempts):
        sleep(delay)
        run.poll_attempts += 1
        result = gateway.get_run_status(run.external_run_id)
        if not result.ok:
            logger.warning("Insight run status check failed: %s", result.error,
                           extra={"run_id": run.id})
            return "unknown", result.error
        status = (result.data or {}).get("status", "running")
        if status in TERMINAL_RUN_STATUSES:
            return status, (result.data or {}).get("error")
    logger.warning("Insight run %s still running after %d polls", run.external_run_id, attempts,
                   extra={"run_id": run.id})
    return "unknown", None


def refresh_insights(
    tenant_id: int,
    *,
    gateway: InsightGateway | None = None,
    sleep=time.sleep,
    refresh_delay: float | None = None,
    retry_delay: float | None = None,
    poll_attempts: int | None = None,
    limit: int | None = None,
) -> dict:
    """Ask the generation function for new insights and reload the list.

    Returns:
        ``{"run": run dict, "insights": [...], "new_insights": int}``

    Raises:
        InsightGenerationError: the function reported an error (friendly message).
    """
    cfg = current_app.config
    gateway = gateway or InsightGateway.from_config(cfg)
    refresh_delay = cfg.get("INSIGHTS_REFRESH_DELAY", 2) if refresh_delay is None else refresh_delay
    retry_delay = cfg.get("INSIGHTS_RETRY_DELAY", 3) if retry_delay is None else retry_delay
    poll_attempts = cfg.get("INSIGHTS_POLL_ATTEMPTS", 10) if poll_attempts is None else poll_attempts
    limit = cfg.get("INSIGHTS_PAGE_SIZE", 50) if limit is None else limit

    before = count_insights(tenant_id)
    run = InsightGenerationRun(tenant_id=tenant_id, status="running", insights_before=before)
    db.session.add(run)
    commit_or_raise("InsightGenerationRun")

    result = gateway.invoke()
    if not result.ok:
        _finish(run, "failed", tenant_id, error=result.error)
        logger.error("Insight generation failed: %s", result.error,
                     extra={"tenant_id": tenant_id, "run_id": run.id})
        raise InsightGenerationError(friendly_error(result.error), raw=result.error)

    run.external_run_id = result.run_id
    if result.run_id and gateway.supports_polling:
        run.mode = "polled"
        status, error = _poll(gateway, run, attempts=poll_attempts, delay=refresh_delay, sleep=sleep)
        _finish(run, status, tenant_id, error=error)
        if status == "failed":
            raise InsightGenerationError(friendly_error(error), raw=error)
    else:
        run.mode = "fixed_delay"
        sleep(refresh_delay)
        if count_insights(tenant_id) == before:
            sleep(retry_delay)
        _finish(run, "completed", tenant_id)

    logger.info("Insight refresh finished: %s (+%s)", run.status, run.new_insights,
                extra={"tenant_id": tenant_id, "run_id": run.id})
    return {
        "run": run.to_dict(),
        "insights": list_insights(tenant_id, limit=limit),
        "new_insights": run.new_insights,
    }


def validate_category(category: str | None) -> str:
    category = category or ALL_CATEGORIES
    if category != ALL_CATEGORIES and category not in INSIGHT_CATEGORIES:
        raise ValidationError(
            f"category must be one of: all, {', '.join(INSIGHT_CATEGORIES)}",
            details={"category": category},
        )
    return category
