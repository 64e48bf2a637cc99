"""Shared utility functions for parsing form input and committing writes.

parse_date:          lenient date parsing (returns None on bad input)
combine_date_time:   booking form date + time fields → one naive local timestamp
describe_store_error: friendlier text for store errors (string matching)
commit_or_raise:     commit the session, IntegrityError → ConflictError
"""
import logging
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError

from surgiops.core.exceptions import ConflictError, ValidationError
from surgiops.models import db

logger = logging.getLogger(__name__)


def parse_date(value):
    """Parse a date string (ISO or DD.MM.YYYY) to a date object.

    Returns None for empty/invalid input. Supports:
    - YYYY-MM-DD (ISO format)
    - YYYY-MM-DDTHH:MM:SS (datetime ISO → .date())
    - DD.MM.YYYY
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        pass
    try:
        return datetime.strptime(str(value), "%d.%m.%Y").date()
    except (ValueError, TypeError):
        return None


def parse_datetime(value):
    """Parse an ISO timestamp string. Returns None for empty input.

    Raises ValidationError for malformed input so callers surface a 422
    instead of persisting garbage.
    """
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid timestamp: {value!r}") from exc


def combine_date_time(date_str: str, time_str: str) -> datetime:
    """Combine ``YYYY-MM-DD`` and ``HH:MM`` into one naive local timestamp.

    >>> combine_date_time("2025-03-10", "09:30").isoformat()
    '2025-03-10T09:30:00'
    """
    try:
        return datetime.fromisoformat(f"{date_str.strip()}T{time_str.strip()}:00")
    except (ValueError, AttributeError) as exc:
        raise ValidationError(
            "Invalid scheduled date or time",
            details={"scheduled_date": date_str, "scheduled_time": time_str},
        ) from exc


# ── Store error translation ──────────────────────────────────────────────────

_UNIQUE_MARKERS = ("duplicate key value violates unique constraint", "unique constraint failed")


def describe_store_error(exc: Exception, fallback: str = "Database error") -> str:
    """Collapse a store error into one human-readable string.

    The store reports errors as text; the friendlier hints come from
    substring checks.
    """
    text = str(getattr(exc, "orig", exc))
    lowered = text.lower()
    if any(marker in lowered for marker in _UNIQUE_MARKERS):
        return "A record with the same unique value already exists."
    if "foreign key constraint" in lowered:
        return "A referenced record does not exist or is inactive."
    if "not null constraint" in lowered:
        return "A required value is missing."
    if "no such table" in lowered or "does not exist" in lowered:
        return "This table is not provisioned yet."
    return f"{fallback}: {text}" if text else fallback


# ── Database commit helper ───────────────────────────────────────────────────

def commit_or_raise(resource: str, field: str = "id", value=None):
    """Commit the current SQLAlchemy session, raising ConflictError on integrity errors.

    IntegrityError → rollback + ConflictError (409) with a friendly hint.
    Any other error → rollback and re-raise for the app-level 500 handler.
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit (%s): %s", resource, exc.orig)
        raise ConflictError(resource, field, value, hint=describe_store_error(exc)) from exc
    except Exception:
        db.session.rollback()
        logger.exception("Unexpected database error on commit (%s)", resource)
        raise
