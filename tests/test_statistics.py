"""Derived statistics over loaded rows."""

from datetime import date, datetime, timedelta, timezone

from surgiops.services.statistics import (
    GROWTH_PLACEHOLDER,
    booking_stats,
    cases_for_day,
    count_by_value,
    count_within_days,
    percentage_breakdown,
    safe_average,
    sum_field,
    week_stats,
)

NOW = datetime(2025, 3, 12, 12, 0)


def _case(status, scheduled_at):
    return {"status": status, "scheduled_at": scheduled_at.isoformat()}


class TestPrimitives:
    def test_count_within_days_uses_trailing_window(self):
        rows = [
            {"ts": (NOW - timedelta(days=1)).isoformat()},
            {"ts": (NOW - timedelta(days=8)).isoformat()},
            {"ts": None},
        ]
        assert count_within_days(rows, "ts", 7, now=NOW) == 1

    def test_count_within_days_handles_aware_values(self):
        aware = datetime.now(timezone.utc) - timedelta(hours=1)
        assert count_within_days([{"ts": aware.isoformat()}], "ts", 1) == 1

    def test_count_by_value(self):
        rows = [{"s": "a"}, {"s": "b"}, {"s": "a"}]
        assert count_by_value(rows, "s") == {"a": 2, "b": 1}

    def test_sum_field_treats_missing_as_zero(self):
        assert sum_field([{"v": 2.5}, {"v": None}, {}], "v") == 2.5

    def test_safe_average_zero_count(self):
        assert safe_average(100, 0) == 0
        assert safe_average(100, 4) == 25

    def test_percentage_breakdown_sorted(self):
        rows = [
            {"product_name": "Knee", "amount": 30},
            {"product_name": "Hip", "amount": 60},
            {"product_name": "Knee", "amount": 10},
        ]
        groups = percentage_breakdown(rows, "product_name", "amount")
        assert [g["name"] for g in groups] == ["Hip", "Knee"]
        assert groups[0]["percentage"] == 60.0
        assert groups[1]["value"] == 40

    def test_percentage_breakdown_zero_total(self):
        groups = percentage_breakdown([{"k": "a", "v": 0}], "k", "v")
        assert groups == [{"name": "a", "value": 0, "percentage": 0}]

    def test_growth_placeholder_is_zero(self):
        assert GROWTH_PLACEHOLDER == 0


class TestPanels:
    def test_booking_stats(self):
        rows = [
            _case("scheduled", NOW - timedelta(days=2)),
            _case("scheduled", NOW - timedelta(days=20)),
            _case("in_progress", NOW - timedelta(days=1)),
            _case("completed", NOW - timedelta(days=15)),
        ]
        assert booking_stats(rows, now=NOW) == {
            "this_week": 2, "confirmed": 2, "pending": 1, "this_month": 4,
        }

    def test_week_stats(self):
        rows = [_case(s, NOW) for s in ("scheduled", "scheduled", "in_progress", "completed", "cancelled")]
        assert week_stats(rows) == {"total": 5, "confirmed": 2, "in_progress": 1, "completed": 1}

    def test_recomputed_from_scratch(self):
        rows = [_case("scheduled", NOW)]
        assert week_stats(rows)["total"] == 1
        rows.append(_case("completed", NOW))
        assert week_stats(rows)["total"] == 2

    def test_cases_for_day(self):
        rows = [
            _case("scheduled", datetime(2025, 3, 10, 9, 30)),
            _case("scheduled", datetime(2025, 3, 11, 8, 0)),
        ]
        assert len(cases_for_day(rows, date(2025, 3, 10))) == 1
