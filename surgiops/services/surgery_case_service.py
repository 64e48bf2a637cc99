"""
Surgery case booking and scheduling.

Business context:
    A case is booked from the booking form (surgeon, hospital, procedure,
    date + time) and then followed through the schedule view. The booking
    panel shows recently *created* cases; the schedule shows cases
    *scheduled* inside one Sunday-to-Saturday week.

Rules:
    - case_number is generated once and is immutable.
    - surgeon, hospital and procedure must be active rows of the same tenant.
    - status moves only along CASE_TRANSITIONS; in_progress stamps
      actual_start_time and completed stamps actual_end_time.
"""

import logging
import secrets
import string
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import select

from surgiops.core.exceptions import InvalidTransitionError, ValidationError
from surgiops.models import db
from surgiops.models.clinical import CASE_STATUSES, CASE_TRANSITIONS, Procedure, Surgeon, SurgeryCase
from surgiops.models.organization import Hospital
from surgiops.services.helpers import crud
from surgiops.services.helpers.scoped_queries import get_scoped
from surgiops.utils.helpers import commit_or_raise, parse_datetime

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "surgeon_id", "hospital_id", "procedure_id", "patient_identifier",
    "scheduled_at", "operating_room", "estimated_cost", "actual_cost", "notes",
)

_CASE_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


# ── Case numbers and week windows ────────────────────────────────────────────


def generate_case_number(now: datetime | None = None) -> str:
    """``CASE-<year>-<2 random uppercase alnum><last 6 digits of epoch ms>``."""
    now = now or datetime.now()
    epoch_ms = int(now.timestamp() * 1000)
    prefix = "".join(secrets.choice(_CASE_SUFFIX_ALPHABET) for _ in range(2))
    return f"CASE-{now.year}-{prefix}{str(epoch_ms)[-6:]}"


def week_window(anchor: date | datetime) -> tuple[datetime, datetime]:
    """Sunday 00:00:00 → Saturday 23:59:59.999999 of the week containing anchor."""
    day = anchor.date() if isinstance(anchor, datetime) else anchor
    # weekday(): Monday=0 … Sunday=6
    start_day = day - timedelta(days=(day.weekday() + 1) % 7)
    start = datetime(start_day.year, start_day.month, start_day.day)
    end = start + timedelta(days=7) - timedelta(microseconds=1)
    return start, end


def shift_week(anchor: date | datetime, weeks: int) -> date | datetime:
    return anchor + timedelta(days=7 * weeks)


# ── Reads ────────────────────────────────────────────────────────────────────


def list_recent_cases(tenant_id: int, days: int = 30, limit: int = 20,
                      now: datetime | None = None) -> list[dict]:
    """Cases created in the trailing window, newest first."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)
    stmt = (
        select(SurgeryCase)
        .where(SurgeryCase.tenant_id == tenant_id, SurgeryCase.created_at >= cutoff)
        .order_by(SurgeryCase.created_at.desc(), SurgeryCase.id.desc())
        .limit(limit)
    )
    return [c.to_dict() for c in db.session.execute(stmt).unique().scalars()]


def list_cases_in_window(tenant_id: int, start: datetime, end: datetime,
                         status: str | None = None) -> list[dict]:
    """Cases whose scheduled_at falls inside [start, end], ascending."""
    stmt = select(SurgeryCase).where(
        SurgeryCase.tenant_id == tenant_id,
        SurgeryCase.scheduled_at >= start,
        SurgeryCase.scheduled_at <= end,
    )
    if status:
        stmt = stmt.where(SurgeryCase.status == status)
    stmt = stmt.order_by(SurgeryCase.scheduled_at, SurgeryCase.id)
    return [c.to_dict() for c in db.session.execute(stmt).unique().scalars()]


def list_week_cases(tenant_id: int, anchor: date | datetime) -> list[dict]:
    start, end = week_window(anchor)
    return list_cases_in_window(tenant_id, start, end)


def get_case(tenant_id: int, case_id: int) -> dict:
    return get_scoped(SurgeryCase, case_id, tenant_id=tenant_id).to_dict()


# ── Writes ───────────────────────────────────────────────────────────────────


def _check_references(tenant_id: int, data: dict, *, required: bool):
    for model, key, label in (
        (Surgeon, "surgeon_id", "surgeon"),
        (Hospital, "hospital_id", "hospital"),
        (Procedure, "procedure_id", "procedure"),
    ):
        if required or key in data:
            crud.require_reference(model, data.get(key), tenant_id=tenant_id,
                                   label=label, required=True)


def _coerce_scheduled_at(data: dict) -> dict:
    if "scheduled_at" in data and not isinstance(data["scheduled_at"], datetime):
        data = {**data, "scheduled_at": parse_datetime(data["scheduled_at"])}
    value = data.get("scheduled_at")
    if isinstance(value, datetime) and value.tzinfo is not None:
        # Stored as naive local time
        data = {**data, "scheduled_at": value.astimezone().replace(tzinfo=None)}
    return data


def create_case(tenant_id: int, data: dict, user_id: int | None = None) -> dict:
    """Book a new case. Status starts at ``scheduled`` unless another is given."""
    data = _coerce_scheduled_at(data)
    if data.get("scheduled_at") is None:
        raise ValidationError("scheduled_at is required", details={"scheduled_at": "required"})
    _check_references(tenant_id, data, required=True)

    status = data.get("status") or "scheduled"
    crud.require_choice(status, CASE_STATUSES, label="status", allow_none=False)

    case = SurgeryCase(
        tenant_id=tenant_id,
        case_number=generate_case_number(),
        status=status,
    )
    crud.apply_fields(case, data, UPDATABLE_FIELDS)
    case = crud.save_new(case, user_id=user_id, resource="SurgeryCase")
    logger.info("Surgery case booked: %s", case.case_number,
                extra={"tenant_id": tenant_id, "case_id": case.id})
    return case.to_dict()


def update_case(tenant_id: int, case_id: int, data: dict, user_id: int | None = None) -> dict:
    """Edit a booked case. A changed status goes through the transition rules."""
    case = get_scoped(SurgeryCase, case_id, tenant_id=tenant_id)
    if "case_number" in data and data["case_number"] not in (None, case.case_number):
        raise ValidationError("case_number cannot be changed",
                              details={"case_number": case.case_number})
    data = _coerce_scheduled_at(data)
    if "scheduled_at" in data and data["scheduled_at"] is None:
        raise ValidationError("scheduled_at is required", details={"scheduled_at": "required"})
    _check_references(tenant_id, data, required=False)

    new_status = data.get("status")
    moving = bool(new_status) and new_status != case.status
    if moving:
        _check_transition(case, new_status)
    crud.apply_fields(case, data, UPDATABLE_FIELDS)
    if moving:
        _apply_transition(case, new_status)
    return crud.save_changes(case, user_id=user_id, resource="SurgeryCase").to_dict()


def _check_transition(case: SurgeryCase, new_status: str):
    crud.require_choice(new_status, CASE_STATUSES, label="status", allow_none=False)
    if new_status not in CASE_TRANSITIONS[case.status]:
        raise InvalidTransitionError("SurgeryCase", case.status, new_status)


def _apply_transition(case: SurgeryCase, new_status: str, at: datetime | None = None):
    _check_transition(case, new_status)
    at = at or datetime.now()
    if new_status == "in_progress" and case.actual_start_time is None:
        case.actual_start_time = at
    if new_status == "completed" and case.actual_end_time is None:
        case.actual_end_time = at
    case.status = new_status


def change_status(tenant_id: int, case_id: int, new_status: str, *,
                  actual_start_time=None, actual_end_time=None,
                  actual_cost: float | None = None, user_id: int | None = None) -> dict:
    """Move a case along its lifecycle, stamping actual times."""
    case = get_scoped(SurgeryCase, case_id, tenant_id=tenant_id)
    previous = case.status
    _check_transition(case, new_status)
    if actual_start_time is not None:
        case.actual_start_time = parse_datetime(actual_start_time)
    if actual_end_time is not None:
        case.actual_end_time = parse_datetime(actual_end_time)
    if actual_cost is not None:
        case.actual_cost = actual_cost
    _apply_transition(case, new_status)
    if user_id is not None:
        case.updated_by = user_id
    commit_or_raise("SurgeryCase", value=case_id)
    logger.info("Surgery case %s: %s → %s", case.case_number, previous, new_status,
                extra={"tenant_id": tenant_id, "case_id": case_id})
    return case.to_dict()
