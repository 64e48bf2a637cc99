"""
TenantModel - Abstract base class for tenant-scoped models.

Every table in the platform inherits from TenantModel instead of db.Model
directly. This adds:
  - tenant_id FK column with index
  - audit columns (created_at, updated_at, created_by, updated_by)
"""

from datetime import datetime, timezone

from surgiops.models import db


def _utcnow():
    return datetime.now(timezone.utc)


def isoformat(value):
    """Serialize a date/datetime column value, passing None through."""
    return value.isoformat() if value else None


class AuditMixin:
    """created_at / updated_at timestamps plus the acting user ids."""

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    created_by = db.Column(db.Integer, nullable=True)
    updated_by = db.Column(db.Integer, nullable=True)

    def audit_dict(self) -> dict:
        return {
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
            "created_by": self.created_by,
            "updated_by": self.updated_by,
        }


class TenantModel(AuditMixin, db.Model):
    """Abstract base for tenant-scoped tables."""
    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(
        db.Integer,
        db.ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
