"""
Sales reports blueprint.

Endpoints:
    GET /api/v1/reports?date_range=month&region_id=&report_type=
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from surgiops.blueprints import current_tenant_id
from surgiops.services import report_service

logger = logging.getLogger(__name__)

report_bp = Blueprint("report", __name__, url_prefix="/api/v1/reports")


@report_bp.route("", methods=["GET"])
def get_reports():
    """All five report payloads, or one with ?report_type=."""
    capabilities = report_service.ReportCapabilities.from_config(current_app.config)
    result = report_service.generate_reports(
        current_tenant_id(),
        capabilities,
        date_range=request.args.get("date_range", report_service.DEFAULT_DATE_RANGE),
        region_id=request.args.get("region_id", type=int),
        report_type=request.args.get("report_type"),
    )
    return jsonify(result), 200
