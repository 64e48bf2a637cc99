"""
SurgiOps
Clinical domain models.

Models:
    - Surgeon: practising surgeon attached to one hospital
    - Procedure: catalog of surgical procedures
    - SurgeryCase: a booked surgery (the booking/scheduling unit)
"""

from surgiops.models import db
from surgiops.models.base import TenantModel, isoformat
from surgiops.models.soft_delete import SoftDeleteMixin


PROCEDURE_TYPES = (
    "knee", "hip", "shoulder", "spine", "trauma", "sports_medicine", "other",
)

# Single authoritative status enumeration shared by booking and schedule views.
CASE_STATUSES = (
    "scheduled", "in_progress", "completed", "cancelled", "postponed", "no_show",
)

CASE_TRANSITIONS: dict[str, frozenset[str]] = {
    "scheduled": frozenset({"in_progress", "cancelled", "postponed", "no_show"}),
    "in_progress": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
    "postponed": frozenset(),
    "no_show": frozenset(),
}


# ── Surgeon ──────────────────────────────────────────────────────────────────


class Surgeon(SoftDeleteMixin, TenantModel):
    __tablename__ = "surgeons"

    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    npi = db.Column(db.String(20), nullable=True)
    specialties = db.Column(db.JSON, nullable=True)
    hospital_id = db.Column(db.Integer, db.ForeignKey("hospitals.id"), nullable=False, index=True)
    contact_info = db.Column(db.JSON, nullable=True, comment="{email, phone}")

    hospital = db.relationship("Hospital", lazy="joined")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "name": self.full_name,
            "npi": self.npi,
            "specialties": self.specialties or [],
            "hospital_id": self.hospital_id,
            "hospital_name": self.hospital.name if self.hospital else None,
            "contact_info": self.contact_info or {},
            "is_active": self.is_active,
            **self.audit_dict(),
        }

    def __repr__(self):
        return f"<Surgeon {self.id}: {self.full_name}>"


# ── Procedure ────────────────────────────────────────────────────────────────


class Procedure(SoftDeleteMixin, TenantModel):
    __tablename__ = "procedures"

    name = db.Column(db.String(200), nullable=False)
    code = db.Column(db.String(50), nullable=True)
    procedure_type = db.Column(
        db.String(30), nullable=False, default="other",
        comment="knee | hip | shoulder | spine | trauma | sports_medicine | other",
    )
    description = db.Column(db.Text, nullable=True)
    estimated_duration_minutes = db.Column(db.Integer, nullable=True)
    complexity_score = db.Column(db.Integer, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "code": self.code,
            "procedure_type": self.procedure_type,
            "description": self.description,
            "estimated_duration_minutes": self.estimated_duration_minutes,
            "complexity_score": self.complexity_score,
            "is_active": self.is_active,
            **self.audit_dict(),
        }

    def __repr__(self):
        return f"<Procedure {self.id}: {self.name}>"


# ── Surgery Case ─────────────────────────────────────────────────────────────


class SurgeryCase(TenantModel):
    """
    A booked surgery.

    case_number is generated once at creation and never rewritten.
    scheduled_at holds the naive local timestamp built from the booking
    form's date and time fields.
    """

    __tablename__ = "surgery_cases"

    case_number = db.Column(db.String(40), nullable=False, unique=True)
    surgeon_id = db.Column(db.Integer, db.ForeignKey("surgeons.id"), nullable=False, index=True)
    hospital_id = db.Column(db.Integer, db.ForeignKey("hospitals.id"), nullable=False, index=True)
    procedure_id = db.Column(db.Integer, db.ForeignKey("procedures.id"), nullable=False, index=True)
    patient_identifier = db.Column(db.String(100), nullable=True)
    scheduled_at = db.Column(db.DateTime, nullable=False, index=True)
    actual_start_time = db.Column(db.DateTime, nullable=True)
    actual_end_time = db.Column(db.DateTime, nullable=True)
    status = db.Column(
        db.String(20), nullable=False, default="scheduled",
        comment="scheduled | in_progress | completed | cancelled | postponed | no_show",
    )
    operating_room = db.Column(db.String(50), nullable=True)
    estimated_cost = db.Column(db.Float, nullable=True)
    actual_cost = db.Column(db.Float, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    surgeon = db.relationship("Surgeon", lazy="joined")
    hospital = db.relationship("Hospital", lazy="joined")
    procedure = db.relationship("Procedure", lazy="joined")

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('scheduled','in_progress','completed','cancelled','postponed','no_show')",
            name="ck_surgery_case_status",
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "case_number": self.case_number,
            "surgeon_id": self.surgeon_id,
            "hospital_id": self.hospital_id,
            "procedure_id": self.procedure_id,
            "patient_identifier": self.patient_identifier,
            "scheduled_at": isoformat(self.scheduled_at),
            "actual_start_time": isoformat(self.actual_start_time),
            "actual_end_time": isoformat(self.actual_end_time),
            "status": self.status,
            "operating_room": self.operating_room,
            "estimated_cost": self.estimated_cost,
            "actual_cost": self.actual_cost,
            "notes": self.notes,
            # Embedded display fields (one round trip)
            "surgeon": (
                {"first_name": self.surgeon.first_name, "last_name": self.surgeon.last_name}
                if self.surgeon else None
            ),
            "hospital": {"name": self.hospital.name} if self.hospital else None,
            "procedure": {"name": self.procedure.name} if self.procedure else None,
            **self.audit_dict(),
        }

    def __repr__(self):
        return f"<SurgeryCase {self.id}: {self.case_number} [{self.status}]>"
