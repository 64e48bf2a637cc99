"""
SurgiOps
Sales reporting models.

Models:
    - SalesOpportunity: pipeline deal tracked by stage
    - SalesTransaction: booked sale, source of revenue totals
"""

from surgiops.models import db
from surgiops.models.base import TenantModel, isoformat
from surgiops.models.soft_delete import SoftDeleteMixin


OPPORTUNITY_STAGES = (
    "lead", "qualified", "proposal", "negotiation", "closed-won", "closed-lost",
)


class SalesOpportunity(SoftDeleteMixin, TenantModel):
    __tablename__ = "sales_opportunities"

    name = db.Column(db.String(200), nullable=False)
    stage = db.Column(db.String(30), nullable=False, default="lead")
    estimated_value = db.Column(db.Float, nullable=True)
    hospital_id = db.Column(db.Integer, db.ForeignKey("hospitals.id"), nullable=True)
    region_id = db.Column(db.Integer, db.ForeignKey("regions.id"), nullable=True, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "stage": self.stage,
            "estimated_value": self.estimated_value,
            "hospital_id": self.hospital_id,
            "region_id": self.region_id,
            "is_active": self.is_active,
            **self.audit_dict(),
        }


class SalesTransaction(SoftDeleteMixin, TenantModel):
    __tablename__ = "sales_transactions"

    amount = db.Column(db.Float, nullable=False, default=0.0)
    transaction_date = db.Column(db.DateTime, nullable=False, index=True)
    product_name = db.Column(db.String(200), nullable=True)
    hospital_id = db.Column(db.Integer, db.ForeignKey("hospitals.id"), nullable=True)
    region_id = db.Column(db.Integer, db.ForeignKey("regions.id"), nullable=True, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "amount": self.amount,
            "transaction_date": isoformat(self.transaction_date),
            "product_name": self.product_name,
            "hospital_id": self.hospital_id,
            "region_id": self.region_id,
            "is_active": self.is_active,
            **self.audit_dict(),
        }
