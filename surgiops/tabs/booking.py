"""Booking and schedule tabs."""

import logging
from datetime import date, datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from surgiops.core.exceptions import NotFoundError, ValidationError
from surgiops.forms.booking import SurgeryCaseForm
from surgiops.models import db
from surgiops.services import surgery_case_service as case_service
from surgiops.services.statistics import booking_stats, cases_for_day, week_stats
from surgiops.tabs.base import TabController

logger = logging.getLogger(__name__)


class BookingTab(TabController):
    """Book cases; shows cases created in the last 30 days."""

    reference_collections = ("surgeons", "hospitals", "procedures")

    def __init__(self, tenant_id: int, user_id: int | None = None):
        super().__init__(tenant_id, user_id)
        days = current_app.config.get("RECENT_CASES_DAYS", 30)
        limit = current_app.config.get("RECENT_CASES_LIMIT", 20)
        self.cases = self.section(
            SurgeryCaseForm(),
            fetch=lambda t: case_service.list_recent_cases(t, days=days, limit=limit),
            create=case_service.create_case,
            update=case_service.update_case,
        )

    def fetch(self):
        self.cases.reload()

    @property
    def form(self) -> SurgeryCaseForm:
        return self.cases.form

    @property
    def stats(self) -> dict:
        return booking_stats(self.cases.items)

    def cancel(self, case_id: int) -> dict | None:
        """Cases are never deleted; cancelling is the way to drop one."""
        try:
            row = case_service.change_status(self.tenant_id, case_id, "cancelled", user_id=self.user_id)
        except (ValidationError, NotFoundError) as exc:
            db.session.rollback()
            self.cases.error = str(exc)
            return None
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Case cancel failed", extra={"case_id": case_id})
            self.cases.error = "Failed to cancel case. Please try again."
            return None
        self.cases.items = [row if c["id"] == case_id else c for c in self.cases.items]
        self.cases.error = None
        return row


class ScheduleTab(TabController):
    """One Sunday-to-Saturday week of scheduled cases."""

    def __init__(self, tenant_id: int, user_id: int | None = None, anchor: date | None = None):
        super().__init__(tenant_id, user_id)
        self.anchor = anchor or date.today()
        self.cases: list[dict] = []

    @property
    def window(self) -> tuple[datetime, datetime]:
        return case_service.week_window(self.anchor)

    def fetch(self):
        start, end = self.window
        self.cases = case_service.list_cases_in_window(self.tenant_id, start, end)

    def next_week(self):
        self.anchor = case_service.shift_week(self.anchor, 1)
        return self.load()

    def previous_week(self):
        self.anchor = case_service.shift_week(self.anchor, -1)
        return self.load()

    def this_week(self):
        self.anchor = date.today()
        return self.load()

    @property
    def stats(self) -> dict:
        return week_stats(self.cases)

    def day(self, day: date) -> list[dict]:
        return cases_for_day(self.cases, day)

    def change_status(self, case_id: int, status: str) -> dict | None:
        try:
            row = case_service.change_status(self.tenant_id, case_id, status, user_id=self.user_id)
        except (ValidationError, NotFoundError) as exc:
            db.session.rollback()
            self.error = str(exc)
            return None
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Status change failed", extra={"case_id": case_id})
            self.error = "Failed to update case status. Please try again."
            return None
        self.cases = [row if c["id"] == case_id else c for c in self.cases]
        self.error = None
        return row
