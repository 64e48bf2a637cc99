"""
AI insights blueprint.

Endpoints:
    GET  /api/v1/insights?category=          newest first + per-category counts
    POST /api/v1/insights/<id>/viewed        mark one insight viewed
    POST /api/v1/insights/refresh            run the generation function
    GET  /api/v1/insights/runs/<id>          one generation run
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from surgiops.blueprints import current_tenant_id, list_response
from surgiops.services import insight_service

logger = logging.getLogger(__name__)

insight_bp = Blueprint("insight", __name__, url_prefix="/api/v1/insights")


@insight_bp.route("", methods=["GET"])
def list_insights():
    """Category filtering is applied to the loaded page; counts cover the whole page."""
    category = insight_service.validate_category(request.args.get("category"))
    limit = request.args.get("limit", current_app.config["INSIGHTS_PAGE_SIZE"], type=int)
    rows = insight_service.list_insights(current_tenant_id(), limit=limit)
    visible = [
        {**r, "priority": insight_service.priority_for(r.get("confidence_score"))}
        for r in insight_service.filter_by_category(rows, category)
    ]
    return list_response(visible, category=category,
                         counts=insight_service.count_by_category(rows))


@insight_bp.route("/<int:insight_id>/viewed", methods=["POST"])
def mark_viewed(insight_id: int):
    row = insight_service.mark_viewed(current_tenant_id(), insight_id)
    return jsonify(row), 200


@insight_bp.route("/refresh", methods=["POST"])
def refresh():
    """Blocks until the run finishes (polled) or the fixed re-read delays pass."""
    result = insight_service.refresh_insights(current_tenant_id())
    return jsonify(result), 200


@insight_bp.route("/runs/<int:run_id>", methods=["GET"])
def get_run(run_id: int):
    return jsonify(insight_service.get_run(current_tenant_id(), run_id)), 200
