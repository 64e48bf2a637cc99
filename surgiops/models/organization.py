"""
SurgiOps
Organization domain models.

Models:
    - Region: sales/geographic region referenced by systems, hospitals and teams
    - HospitalSystem: parent organization owning zero or more hospitals
    - Hospital: facility where surgeons operate and surgery cases take place
    - RepTeam: sales representative team led by one person
    - Territory: coverage area, optionally owned by a rep team
"""

from surgiops.models import db
from surgiops.models.base import TenantModel
from surgiops.models.soft_delete import SoftDeleteMixin


TRAUMA_LEVELS = ("Level 1", "Level 2", "Level 3", "Level 4", "None")


# ── Region ───────────────────────────────────────────────────────────────────


class Region(SoftDeleteMixin, TenantModel):
    __tablename__ = "regions"

    name = db.Column(db.String(120), nullable=False)
    code = db.Column(db.String(20), nullable=False)
    description = db.Column(db.Text, nullable=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "code", name="uq_regions_tenant_code"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "code": self.code,
            "description": self.description,
            "is_active": self.is_active,
            **self.audit_dict(),
        }

    def __repr__(self):
        return f"<Region {self.id}: {self.code}>"


# ── Hospital System ──────────────────────────────────────────────────────────


class HospitalSystem(SoftDeleteMixin, TenantModel):
    __tablename__ = "hospital_systems"

    name = db.Column(db.String(200), nullable=False)
    headquarters_address = db.Column(db.JSON, nullable=True, comment="{street, city, state, zip}")
    contact_info = db.Column(db.JSON, nullable=True, comment="{person, email, phone}")
    region_id = db.Column(db.Integer, db.ForeignKey("regions.id"), nullable=True, index=True)

    region = db.relationship("Region", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "type": "system",
            "name": self.name,
            "headquarters_address": self.headquarters_address or {},
            "contact_info": self.contact_info or {},
            "region_id": self.region_id,
            "region_name": self.region.name if self.region else None,
            "is_active": self.is_active,
            **self.audit_dict(),
        }

    def __repr__(self):
        return f"<HospitalSystem {self.id}: {self.name}>"


# ── Hospital ─────────────────────────────────────────────────────────────────


class Hospital(SoftDeleteMixin, TenantModel):
    __tablename__ = "hospitals"

    name = db.Column(db.String(200), nullable=False)
    hospital_system_id = db.Column(
        db.Integer, db.ForeignKey("hospital_systems.id"), nullable=True, index=True,
    )
    address = db.Column(db.JSON, nullable=True, comment="{street, city, state, zip}")
    contact_info = db.Column(db.JSON, nullable=True, comment="{person, email, phone}")
    region_id = db.Column(db.Integer, db.ForeignKey("regions.id"), nullable=True, index=True)
    bed_count = db.Column(db.Integer, nullable=True)
    trauma_level = db.Column(
        db.String(20), nullable=True,
        comment="Level 1 | Level 2 | Level 3 | Level 4 | None",
    )

    hospital_system = db.relationship("HospitalSystem", lazy="joined")
    region = db.relationship("Region", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "type": "hospital",
            "name": self.name,
            "hospital_system_id": self.hospital_system_id,
            "hospital_system_name": (
                self.hospital_system.name if self.hospital_system else None
            ),
            "address": self.address or {},
            "contact_info": self.contact_info or {},
            "region_id": self.region_id,
            "region_name": self.region.name if self.region else None,
            "bed_count": self.bed_count,
            "trauma_level": self.trauma_level,
            "is_active": self.is_active,
            **self.audit_dict(),
        }

    def __repr__(self):
        return f"<Hospital {self.id}: {self.name}>"


# ── Rep Team ─────────────────────────────────────────────────────────────────


class RepTeam(SoftDeleteMixin, TenantModel):
    __tablename__ = "rep_teams"

    name = db.Column(db.String(200), nullable=False)
    team_lead = db.Column(db.String(200), nullable=False)
    region_id = db.Column(db.Integer, db.ForeignKey("regions.id"), nullable=True, index=True)

    region = db.relationship("Region", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "type": "team",
            "name": self.name,
            "team_lead": self.team_lead,
            "region_id": self.region_id,
            "region_name": self.region.name if self.region else None,
            "is_active": self.is_active,
            **self.audit_dict(),
        }

    def __repr__(self):
        return f"<RepTeam {self.id}: {self.name}>"


# ── Territory ────────────────────────────────────────────────────────────────


class Territory(SoftDeleteMixin, TenantModel):
    __tablename__ = "territories"

    name = db.Column(db.String(200), nullable=False)
    team_id = db.Column(db.Integer, db.ForeignKey("rep_teams.id"), nullable=True, index=True)
    coverage_area = db.Column(db.Text, nullable=False, default="")

    team = db.relationship("RepTeam", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "type": "territory",
            "name": self.name,
            "team_id": self.team_id,
            "team_name": self.team.name if self.team else None,
            "coverage_area": self.coverage_area,
            "is_active": self.is_active,
            **self.audit_dict(),
        }

    def __repr__(self):
        return f"<Territory {self.id}: {self.name}>"
