"""AI insights tab."""

import logging
import time

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from surgiops.core.exceptions import ConflictError, InsightGenerationError, NotFoundError
from surgiops.models import db
from surgiops.services import insight_service as insights
from surgiops.tabs.base import TabController

logger = logging.getLogger(__name__)


class InsightsTab(TabController):
    def __init__(self, tenant_id: int, user_id: int | None = None, *, gateway=None, sleep=time.sleep):
        super().__init__(tenant_id, user_id)
        self.items: list[dict] = []
        self.category = insights.ALL_CATEGORIES
        self.refreshing = False
        self.last_run: dict | None = None
        self._gateway = gateway
        self._sleep = sleep

    def fetch(self):
        limit = current_app.config.get("INSIGHTS_PAGE_SIZE", 50)
        self.items = insights.list_insights(self.tenant_id, limit=limit)

    def select_category(self, category: str):
        self.category = insights.validate_category(category)

    @property
    def visible(self) -> list[dict]:
        rows = insights.filter_by_category(self.items, self.category)
        return [{**r, "priority": insights.priority_for(r.get("confidence_score"))} for r in rows]

    @property
    def counts(self) -> dict[str, int]:
        return insights.count_by_category(self.items)

    def mark_viewed(self, insight_id: int) -> bool:
        try:
            row = insights.mark_viewed(self.tenant_id, insight_id)
        except NotFoundError as exc:
            self.error = str(exc)
            return False
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Mark viewed failed", extra={"insight_id": insight_id})
            self.error = "Failed to update insight. Please try again."
            return False
        # Only the viewed flags of this one row change locally
        self.items = [
            {**r, "is_viewed": row["is_viewed"], "viewed_at": row["viewed_at"]}
            if r["id"] == insight_id else r
            for r in self.items
        ]
        return True

    def refresh(self) -> bool:
        if self.refreshing:
            return False
        self.refreshing = True
        self.error = None
        try:
            result = insights.refresh_insights(
                self.tenant_id, gateway=self._gateway, sleep=self._sleep,
            )
        except InsightGenerationError as exc:
            logger.warning("Insight refresh failed: %s", exc.raw)
            self.error = str(exc)
            return False
        except (ConflictError, SQLAlchemyError):
            db.session.rollback()
            logger.exception("Insight refresh failed", extra={"tenant_id": self.tenant_id})
            self.error = "Failed to refresh insights. Please try again."
            return False
        finally:
            self.refreshing = False
        self.items = result["insights"]
        self.last_run = result["run"]
        return True
