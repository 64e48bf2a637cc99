"""
Reference data blueprint.

Endpoints:
    GET /api/v1/reference-data?collections=regions,hospitals
"""

import logging

from flask import Blueprint, jsonify, request

from surgiops.blueprints import bad_request, current_tenant_id
from surgiops.services.reference_data import DEFAULT_COLLECTIONS, load_reference_data

logger = logging.getLogger(__name__)

reference_bp = Blueprint("reference", __name__, url_prefix="/api/v1/reference-data")


@reference_bp.route("", methods=["GET"])
def get_reference_data():
    """All requested lookup collections, or one error for the whole group."""
    raw = request.args.get("collections", "")
    collections = [c.strip() for c in raw.split(",") if c.strip()] or list(DEFAULT_COLLECTIONS)
    try:
        data = load_reference_data(current_tenant_id(), collections)
    except ValueError as exc:
        return bad_request(str(exc))
    return jsonify(data), 200
