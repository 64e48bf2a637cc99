"""
SurgiOps supply-chain console
Blueprint registry helpers.

The tenant is resolved once per request by the tenant context middleware
(``g.tenant_id``). The acting user id, when a caller has one, arrives in
the ``X-User-ID`` header and is only used for audit columns.
"""

from flask import g, jsonify, request

from surgiops.utils.errors import E, api_error


def current_tenant_id() -> int:
    return g.tenant_id


def current_user_id() -> int | None:
    raw = request.headers.get("X-User-ID")
    return int(raw) if raw and raw.isdigit() else None


def json_body() -> dict:
    """Request JSON as a dict, without the routing-only tenant_id key."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return {}
    return {k: v for k, v in data.items() if k != "tenant_id"}


def list_response(items: list[dict], **extra):
    return jsonify({"items": items, "total": len(items), **extra}), 200


def register_crud(bp, path: str, *, name: str, form, list_fn, get_fn,
                  create_fn, update_fn, delete_fn, with_list: bool = True):
    """Add the six standard routes for one setup collection.

        GET    <path>             list active rows
        POST   <path>             create from the flat form mapping
        GET    <path>/<id>        one row
        GET    <path>/<id>/form   row decomposed into form values
        PUT    <path>/<id>        full update from the flat form mapping
        DELETE <path>/<id>        soft delete
    """

    def _list():
        return list_response(list_fn(current_tenant_id()))

    def _create():
        payload = form.parse_payload(json_body())
        row = create_fn(current_tenant_id(), payload, user_id=current_user_id())
        return jsonify(row), 201

    def _get(pk: int):
        return jsonify(get_fn(current_tenant_id(), pk)), 200

    def _form(pk: int):
        row = get_fn(current_tenant_id(), pk)
        return jsonify({"id": pk, "values": form().prefill(row)}), 200

    def _update(pk: int):
        payload = form.parse_payload(json_body())
        row = update_fn(current_tenant_id(), pk, payload, user_id=current_user_id())
        return jsonify(row), 200

    def _delete(pk: int):
        delete_fn(current_tenant_id(), pk, user_id=current_user_id())
        return jsonify({"message": f"{form.resource} deleted", "id": pk}), 200

    if with_list:
        bp.add_url_rule(path, f"list_{name}", _list, methods=["GET"])
    bp.add_url_rule(path, f"create_{name}", _create, methods=["POST"])
    bp.add_url_rule(f"{path}/<int:pk>", f"get_{name}", _get, methods=["GET"])
    bp.add_url_rule(f"{path}/<int:pk>/form", f"form_{name}", _form, methods=["GET"])
    bp.add_url_rule(f"{path}/<int:pk>", f"update_{name}", _update, methods=["PUT"])
    bp.add_url_rule(f"{path}/<int:pk>", f"delete_{name}", _delete, methods=["DELETE"])


def bad_request(message: str):
    return api_error(E.VALIDATION_INVALID, message)
