"""
Tenant-scoped query helpers.

Every get-by-id in the platform goes through these helpers instead of
Model.query.get(pk) or db.session.get(Model, pk). Direct .get() calls
bypass tenant isolation.

Usage:
    hospital = get_scoped(Hospital, hospital_id, tenant_id=tenant_id)

    # Only active rows (foreign-reference checks at write time)
    surgeon = get_active_scoped(Surgeon, surgeon_id, tenant_id=tenant_id)
"""

import logging

from sqlalchemy import select

from surgiops.core.exceptions import NotFoundError
from surgiops.models import db

logger = logging.getLogger(__name__)


def get_scoped(model, pk: int, *, tenant_id: int, active_only: bool = False):
    """Fetch a single entity by PK within a tenant.

    Cross-tenant access is indistinguishable from a missing record: both
    raise NotFoundError → HTTP 404.

    Args:
        model: SQLAlchemy model class with `id` and `tenant_id` columns.
        pk: Primary key value to look up.
        tenant_id: Tenant scope. Required.
        active_only: Also require ``is_active`` (soft-deleted rows count as missing).

    Returns:
        The model instance if found within the given scope.

    Raises:
        ValueError: If tenant_id is None.
        NotFoundError: If the entity does not exist, is inactive (when
                       active_only) or belongs to a different tenant.
    """
    if tenant_id is None:
        raise ValueError(
            f"{model.__name__} id={pk} requires a tenant_id scope. "
            "Unscoped lookups are forbidden."
        )

    stmt = select(model).where(model.id == pk, model.tenant_id == tenant_id)
    if active_only and hasattr(model, "is_active"):
        stmt = stmt.where(model.is_active.is_(True))

    result = db.session.execute(stmt).unique().scalar_one_or_none()

    if result is None:
        logger.debug(
            "get_scoped: %s id=%s not found for tenant %s (active_only=%s)",
            model.__name__, pk, tenant_id, active_only,
        )
        raise NotFoundError(resource=model.__name__, resource_id=pk)

    return result


def get_active_scoped(model, pk: int, *, tenant_id: int):
    """Same as get_scoped but soft-deleted rows are treated as missing."""
    return get_scoped(model, pk, tenant_id=tenant_id, active_only=True)
