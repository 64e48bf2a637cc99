"""
Surgery case booking & schedule blueprint.

Endpoints:
    GET    /api/v1/surgery-cases/recent           booking panel list + stats
    GET    /api/v1/surgery-cases/week?date=       one Sunday–Saturday week + stats
    GET    /api/v1/surgery-cases/stats?date=      week stats only
    GET    /api/v1/surgery-cases?start=&end=      arbitrary scheduled_at window
    POST   /api/v1/surgery-cases                  book (flat form mapping)
    GET    /api/v1/surgery-cases/<id>
    GET    /api/v1/surgery-cases/<id>/form        prefill values
    PUT    /api/v1/surgery-cases/<id>             edit (flat form mapping)
    POST   /api/v1/surgery-cases/<id>/status      status transition
"""

import logging
from datetime import date

from flask import Blueprint, current_app, jsonify, request

from surgiops.blueprints import (
    bad_request,
    current_tenant_id,
    current_user_id,
    json_body,
    list_response,
)
from surgiops.forms.booking import SurgeryCaseForm
from surgiops.services import surgery_case_service as case_service
from surgiops.services.statistics import booking_stats, cases_for_day, week_stats
from surgiops.utils.errors import E, api_error
from surgiops.utils.helpers import parse_date, parse_datetime

logger = logging.getLogger(__name__)

surgery_case_bp = Blueprint("surgery_case", __name__, url_prefix="/api/v1/surgery-cases")


def _anchor():
    raw = request.args.get("date")
    if raw is None:
        return date.today()
    return parse_date(raw)


@surgery_case_bp.route("/recent", methods=["GET"])
def recent_cases():
    """Cases created in the trailing window (default 30 days, 20 rows)."""
    days = request.args.get("days", current_app.config["RECENT_CASES_DAYS"], type=int)
    limit = request.args.get("limit", current_app.config["RECENT_CASES_LIMIT"], type=int)
    items = case_service.list_recent_cases(current_tenant_id(), days=days, limit=limit)
    return list_response(items, stats=booking_stats(items))


@surgery_case_bp.route("/week", methods=["GET"])
def week_cases():
    """Cases scheduled in the week containing ?date= (default today).

    With ?day=YYYY-MM-DD the list is narrowed to that day of the week.
    """
    anchor = _anchor()
    if anchor is None:
        return bad_request("date must be YYYY-MM-DD")
    start, end = case_service.week_window(anchor)
    items = case_service.list_cases_in_window(current_tenant_id(), start, end)
    stats = week_stats(items)
    day_raw = request.args.get("day")
    if day_raw:
        day = parse_date(day_raw)
        if day is None:
            return bad_request("day must be YYYY-MM-DD")
        items = cases_for_day(items, day)
    return list_response(
        items,
        stats=stats,
        week_start=start.isoformat(),
        week_end=end.isoformat(),
        previous_week=case_service.shift_week(anchor, -1).isoformat(),
        next_week=case_service.shift_week(anchor, 1).isoformat(),
    )


@surgery_case_bp.route("/stats", methods=["GET"])
def case_stats():
    anchor = _anchor()
    if anchor is None:
        return bad_request("date must be YYYY-MM-DD")
    start, end = case_service.week_window(anchor)
    items = case_service.list_cases_in_window(current_tenant_id(), start, end)
    return jsonify(week_stats(items)), 200


@surgery_case_bp.route("", methods=["GET"])
def list_cases():
    start = parse_datetime(request.args.get("start"))
    end = parse_datetime(request.args.get("end"))
    if start is None or end is None:
        return api_error(E.VALIDATION_REQUIRED, "start and end are required")
    items = case_service.list_cases_in_window(
        current_tenant_id(), start, end, status=request.args.get("status"),
    )
    return list_response(items)


@surgery_case_bp.route("", methods=["POST"])
def create_case():
    payload = SurgeryCaseForm.parse_payload(json_body())
    row = case_service.create_case(current_tenant_id(), payload, user_id=current_user_id())
    return jsonify(row), 201


@surgery_case_bp.route("/<int:case_id>", methods=["GET"])
def get_case(case_id: int):
    return jsonify(case_service.get_case(current_tenant_id(), case_id)), 200


@surgery_case_bp.route("/<int:case_id>/form", methods=["GET"])
def case_form(case_id: int):
    row = case_service.get_case(current_tenant_id(), case_id)
    return jsonify({"id": case_id, "values": SurgeryCaseForm().prefill(row)}), 200


@surgery_case_bp.route("/<int:case_id>", methods=["PUT"])
def update_case(case_id: int):
    data = json_body()
    payload = SurgeryCaseForm.parse_payload(data)
    if "case_number" in data:
        payload["case_number"] = data["case_number"]
    row = case_service.update_case(current_tenant_id(), case_id, payload, user_id=current_user_id())
    return jsonify(row), 200


@surgery_case_bp.route("/<int:case_id>/status", methods=["POST"])
def change_status(case_id: int):
    """Body: {"status": str, "actual_start_time"?, "actual_end_time"?, "actual_cost"?}"""
    data = json_body()
    status = data.get("status")
    if not status:
        return api_error(E.VALIDATION_REQUIRED, "status is required")
    actual_cost = data.get("actual_cost")
    try:
        actual_cost = float(actual_cost) if actual_cost not in (None, "") else None
    except (TypeError, ValueError):
        return bad_request("actual_cost must be a number")
    row = case_service.change_status(
        current_tenant_id(), case_id, status,
        actual_start_time=data.get("actual_start_time"),
        actual_end_time=data.get("actual_end_time"),
        actual_cost=actual_cost,
        user_id=current_user_id(),
    )
    return jsonify(row), 200
