"""
Soft Delete Mixin.

Adds the `is_active` flag used for soft delete. Rows are never
physically removed: "deleting" flips the flag, list and lookup queries skip
inactive rows, and historical rows keep pointing at them.

Usage:
    class Hospital(SoftDeleteMixin, TenantModel):
        ...

    # Soft delete
    hospital.soft_delete()
    db.session.commit()
"""

from surgiops.models import db


class SoftDeleteMixin:
    """Mixin that adds is_active based soft delete to any tenant model."""

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    def soft_delete(self, user_id=None):
        """Mark this record as inactive."""
        self.is_active = False
        if user_id is not None:
            self.updated_by = user_id
