"""
Shared write/read steps for the tenant-scoped setup collections.

Every entity service follows the same shape (list active → create →
update → soft delete); the repeated parts live here so each service only
states its own fields and foreign references.
"""

import logging

from sqlalchemy import select

from surgiops.core.exceptions import NotFoundError, ValidationError
from surgiops.models import db
from surgiops.services.helpers.scoped_queries import get_active_scoped
from surgiops.utils.helpers import commit_or_raise

logger = logging.getLogger(__name__)


def list_active(model, tenant_id: int, *order_by, **filters) -> list:
    """Active rows of one tenant, optionally filtered by equality on columns."""
    stmt = select(model).where(model.tenant_id == tenant_id, model.is_active.is_(True))
    for column, value in filters.items():
        if value is not None:
            stmt = stmt.where(getattr(model, column) == value)
    stmt = stmt.order_by(*(order_by or (model.id,)))
    return list(db.session.execute(stmt).unique().scalars())


def require_reference(model, pk, *, tenant_id: int, label: str, required: bool = False):
    """Check a foreign reference from a write payload.

    The referenced row must exist in the same tenant and be active.
    Returns None when the value is empty and not required.
    """
    if pk in (None, ""):
        if required:
            raise ValidationError(f"{label} is required", details={label: "required"})
        return None
    try:
        return get_active_scoped(model, int(pk), tenant_id=tenant_id)
    except (NotFoundError, TypeError, ValueError) as exc:
        raise ValidationError(
            f"Selected {label.replace('_', ' ')} does not exist or is inactive",
            details={label: pk},
        ) from exc


def require_choice(value, choices, *, label: str, allow_none: bool = True):
    if value is None and allow_none:
        return None
    if value not in choices:
        raise ValidationError(
            f"{label} must be one of: {', '.join(choices)}", details={label: value},
        )
    return value


def apply_fields(obj, data: dict, allowed: tuple[str, ...]):
    """Copy the allowed keys present in ``data`` onto ``obj``."""
    for key in allowed:
        if key in data:
            setattr(obj, key, data[key])


def save_new(obj, *, user_id=None, resource: str):
    if user_id is not None:
        obj.created_by = user_id
        obj.updated_by = user_id
    db.session.add(obj)
    commit_or_raise(resource)
    logger.info("%s created", resource,
                extra={"tenant_id": obj.tenant_id, "event_type": f"{resource}.created"})
    return obj


def save_changes(obj, *, user_id=None, resource: str):
    if user_id is not None:
        obj.updated_by = user_id
    commit_or_raise(resource, value=obj.id)
    logger.info("%s %s updated", resource, obj.id,
                extra={"tenant_id": obj.tenant_id, "event_type": f"{resource}.updated"})
    return obj


def soft_delete(model, pk: int, *, tenant_id: int, user_id=None) -> None:
    """Flip is_active off. The row stays for historical references."""
    obj = get_active_scoped(model, pk, tenant_id=tenant_id)
    obj.soft_delete(user_id=user_id)
    commit_or_raise(model.__name__, value=pk)
    logger.info("%s %s soft-deleted", model.__name__, pk,
                extra={"tenant_id": tenant_id, "event_type": f"{model.__name__}.deleted"})


def require_text(data: dict, keys: tuple[str, ...], *, partial: bool = False):
    """Non-blank check for required text fields.

    With ``partial`` (updates), keys absent from ``data`` are left alone.
    """
    for key in keys:
        if partial and key not in data:
            continue
        if not (data.get(key) or "").strip():
            raise ValidationError(f"{key} is required", details={key: "required"})
