"""
Derived statistics over already-loaded collections.

Everything here is a pure function of the rows passed in and is
recomputed from scratch on every call: no memoisation, no incremental
aggregation, no historical trend data.

Rows are serialized dicts (``to_dict()`` output) so timestamps arrive as
ISO strings; aware values are converted to local naive time before they
are compared with ``now``.
"""

from collections import Counter, OrderedDict
from datetime import date, datetime, timedelta

# Growth needs historical data the reports do not have.
GROWTH_PLACEHOLDER = 0


def _as_local_naive(value):
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        try:
            dt = datetime.fromisoformat(str(value))
        except ValueError:
            return None
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def count_within_days(rows: list[dict], field: str, days: int, now: datetime | None = None) -> int:
    """Count rows whose ``field`` timestamp is within the trailing ``days`` window."""
    now = _as_local_naive(now) or datetime.now()
    cutoff = now - timedelta(days=days)
    count = 0
    for row in rows:
        ts = _as_local_naive(row.get(field))
        if ts is not None and ts >= cutoff:
            count += 1
    return count


def count_by_value(rows: list[dict], field: str) -> dict[str, int]:
    """Count rows per categorical value of ``field``."""
    return dict(Counter(row.get(field) for row in rows))


def sum_field(rows: list[dict], field: str) -> float:
    """Sum a numeric field, treating missing values as zero."""
    return sum((row.get(field) or 0) for row in rows)


def safe_average(total: float, count: int) -> float:
    """total ÷ count, or 0 when there is nothing to divide by."""
    return total / count if count else 0


def percentage_breakdown(rows: list[dict], key: str, value_field: str) -> list[dict]:
    """Group rows by ``key`` and express each group's value as a share of the total.

    Returns groups sorted by value descending:
    ``[{"name": ..., "value": ..., "percentage": ...}, ...]``.
    Percentages are 0 for every group when the total is 0.
    """
    totals: "OrderedDict[str, float]" = OrderedDict()
    for row in rows:
        name = row.get(key) or "Unspecified"
        totals[name] = totals.get(name, 0) + (row.get(value_field) or 0)

    grand_total = sum(totals.values())
    groups = [
        {
            "name": name,
            "value": value,
            "percentage": round(value / grand_total * 100, 1) if grand_total else 0,
        }
        for name, value in totals.items()
    ]
    groups.sort(key=lambda g: g["value"], reverse=True)
    return groups


# ── Panel presets ────────────────────────────────────────────────────────────


def booking_stats(cases: list[dict], now: datetime | None = None) -> dict:
    """Quick stats for the booking panel (cases loaded for the last 30 days)."""
    by_status = count_by_value(cases, "status")
    return {
        "this_week": count_within_days(cases, "scheduled_at", 7, now=now),
        "confirmed": by_status.get("scheduled", 0),
        "pending": by_status.get("in_progress", 0),
        "this_month": len(cases),
    }


def week_stats(cases: list[dict]) -> dict:
    """Stats for the cases loaded into one schedule week."""
    by_status = count_by_value(cases, "status")
    return {
        "total": len(cases),
        "confirmed": by_status.get("scheduled", 0),
        "in_progress": by_status.get("in_progress", 0),
        "completed": by_status.get("completed", 0),
    }


def cases_for_day(cases: list[dict], day: date) -> list[dict]:
    """Cases from a loaded week whose scheduled_at falls on ``day``."""
    result = []
    for case in cases:
        ts = _as_local_naive(case.get("scheduled_at"))
        if ts is not None and ts.date() == day:
            result.append(case)
    return result
