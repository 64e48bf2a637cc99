"""
Surgery case service: booking, week windows, recent list and the status
lifecycle.
"""

import re
from datetime import date, datetime, timedelta, timezone

import pytest

from surgiops.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from surgiops.models import db
from surgiops.models.clinical import SurgeryCase
from surgiops.services import setup_service
from surgiops.services import surgery_case_service as svc


def _book(tenant_id, refs, when="2025-03-10T09:30:00", **extra):
    return svc.create_case(tenant_id, {**refs, "scheduled_at": when, **extra})


class TestCaseNumber:
    def test_format(self):
        number = svc.generate_case_number(datetime(2025, 3, 10, 9, 30))
        assert re.fullmatch(r"CASE-2025-[A-Z0-9]{2}\d{6}", number)

    def test_numbers_differ(self):
        numbers = {svc.generate_case_number() for _ in range(20)}
        assert len(numbers) > 1


class TestWeekWindow:
    def test_sunday_to_saturday(self):
        start, end = svc.week_window(date(2025, 3, 12))  # Wednesday
        assert start == datetime(2025, 3, 9)
        assert end.date() == date(2025, 3, 15)
        assert end == datetime(2025, 3, 15, 23, 59, 59, 999999)

    def test_sunday_anchor_starts_its_own_week(self):
        start, _ = svc.week_window(date(2025, 3, 9))
        assert start == datetime(2025, 3, 9)

    def test_saturday_anchor(self):
        start, _ = svc.week_window(datetime(2025, 3, 15, 22, 0))
        assert start == datetime(2025, 3, 9)

    def test_shift_week(self):
        assert svc.shift_week(date(2025, 3, 12), -1) == date(2025, 3, 5)


class TestCreate:
    def test_booking_stores_local_timestamp(self, default_tenant, case_refs):
        row = _book(default_tenant.id, case_refs)
        assert row["scheduled_at"] == "2025-03-10T09:30:00"
        assert row["status"] == "scheduled"
        assert row["case_number"].startswith("CASE-")
        assert row["surgeon"] == {"first_name": "Alex", "last_name": "Morgan"}
        assert row["hospital"]["name"] == "Memorial Medical Center"

    def test_booked_case_in_its_week(self, default_tenant, case_refs):
        _book(default_tenant.id, case_refs)
        rows = svc.list_week_cases(default_tenant.id, date(2025, 3, 12))
        assert [r["scheduled_at"] for r in rows] == ["2025-03-10T09:30:00"]
        assert svc.list_week_cases(default_tenant.id, date(2025, 3, 17)) == []

    def test_missing_reference_rejected(self, default_tenant, case_refs):
        refs = {**case_refs, "procedure_id": None}
        with pytest.raises(ValidationError):
            _book(default_tenant.id, refs)
        assert SurgeryCase.query.count() == 0

    def test_inactive_surgeon_rejected(self, default_tenant, case_refs):
        setup_service.delete_surgeon(default_tenant.id, case_refs["surgeon_id"])
        with pytest.raises(ValidationError, match="surgeon"):
            _book(default_tenant.id, case_refs)

    def test_foreign_tenant_reference_rejected(self, other_tenant, case_refs):
        with pytest.raises(ValidationError):
            _book(other_tenant.id, case_refs)

    def test_scheduled_at_required(self, default_tenant, case_refs):
        with pytest.raises(ValidationError, match="scheduled_at"):
            svc.create_case(default_tenant.id, dict(case_refs))

    def test_unknown_status_rejected(self, default_tenant, case_refs):
        with pytest.raises(ValidationError):
            _book(default_tenant.id, case_refs, status="booked")


class TestRead:
    def test_recent_cases_newest_first(self, default_tenant, case_refs):
        first = _book(default_tenant.id, case_refs)
        second = _book(default_tenant.id, case_refs, when="2025-03-11T08:00:00")
        rows = svc.list_recent_cases(default_tenant.id)
        assert [r["id"] for r in rows] == [second["id"], first["id"]]

    def test_recent_cases_window_and_limit(self, default_tenant, case_refs):
        old = _book(default_tenant.id, case_refs)
        case = db.session.get(SurgeryCase, old["id"])
        case.created_at = datetime.now(timezone.utc) - timedelta(days=45)
        db.session.commit()
        _book(default_tenant.id, case_refs)
        _book(default_tenant.id, case_refs)

        rows = svc.list_recent_cases(default_tenant.id, limit=1)
        assert len(rows) == 1
        assert old["id"] not in [r["id"] for r in svc.list_recent_cases(default_tenant.id)]

    def test_tenant_isolation(self, default_tenant, other_tenant, case_refs):
        row = _book(default_tenant.id, case_refs)
        assert svc.list_recent_cases(other_tenant.id) == []
        with pytest.raises(NotFoundError):
            svc.get_case(other_tenant.id, row["id"])

    def test_window_status_filter(self, default_tenant, case_refs):
        _book(default_tenant.id, case_refs)
        done = _book(default_tenant.id, case_refs, when="2025-03-11T08:00:00")
        svc.change_status(default_tenant.id, done["id"], "cancelled")
        start, end = svc.week_window(date(2025, 3, 10))
        rows = svc.list_cases_in_window(default_tenant.id, start, end, status="cancelled")
        assert [r["id"] for r in rows] == [done["id"]]


class TestUpdateAndStatus:
    def test_update_keeps_case_number(self, default_tenant, case_refs):
        row = _book(default_tenant.id, case_refs)
        updated = svc.update_case(default_tenant.id, row["id"],
                                  {"operating_room": "OR-7", "case_number": row["case_number"]})
        assert updated["operating_room"] == "OR-7"
        assert updated["case_number"] == row["case_number"]

    def test_case_number_immutable(self, default_tenant, case_refs):
        row = _book(default_tenant.id, case_refs)
        with pytest.raises(ValidationError, match="case_number"):
            svc.update_case(default_tenant.id, row["id"], {"case_number": "CASE-1999-XX000000"})

    def test_lifecycle_stamps_times(self, default_tenant, case_refs):
        row = _book(default_tenant.id, case_refs)
        started = svc.change_status(default_tenant.id, row["id"], "in_progress")
        assert started["actual_start_time"] is not None
        done = svc.change_status(default_tenant.id, row["id"], "completed", actual_cost=9800.0)
        assert done["status"] == "completed"
        assert done["actual_end_time"] is not None
        assert done["actual_cost"] == 9800.0

    def test_terminal_status_is_final(self, default_tenant, case_refs):
        row = _book(default_tenant.id, case_refs)
        svc.change_status(default_tenant.id, row["id"], "cancelled")
        with pytest.raises(InvalidTransitionError):
            svc.change_status(default_tenant.id, row["id"], "scheduled")

    def test_update_with_status_goes_through_transition(self, default_tenant, case_refs):
        row = _book(default_tenant.id, case_refs)
        with pytest.raises(InvalidTransitionError):
            svc.update_case(default_tenant.id, row["id"], {"status": "completed"})

    def test_rejected_edit_is_not_saved_by_next_write(self, default_tenant, case_refs):
        row = _book(default_tenant.id, case_refs)
        other = _book(default_tenant.id, case_refs, when="2025-03-11T08:00:00")
        with pytest.raises(InvalidTransitionError):
            svc.update_case(default_tenant.id, row["id"],
                            {"operating_room": "OR-9", "status": "completed"})

        svc.change_status(default_tenant.id, other["id"], "cancelled")
        db.session.expire_all()
        stored = db.session.get(SurgeryCase, row["id"])
        assert stored.operating_room is None
        assert stored.status == "scheduled"

    def test_rejected_status_change_keeps_actual_times(self, default_tenant, case_refs):
        row = _book(default_tenant.id, case_refs)
        other = _book(default_tenant.id, case_refs, when="2025-03-11T08:00:00")
        with pytest.raises(InvalidTransitionError):
            svc.change_status(default_tenant.id, row["id"], "completed",
                              actual_end_time="2025-03-10T12:00:00", actual_cost=500.0)

        svc.change_status(default_tenant.id, other["id"], "cancelled")
        db.session.expire_all()
        stored = db.session.get(SurgeryCase, row["id"])
        assert stored.actual_end_time is None
        assert stored.actual_cost is None
