"""
Lookup collection management: regions, surgeons and procedures.

These rows feed the reference-data loader and the booking form. Region
codes are unique per tenant; surgeons must belong to an active hospital.
"""

import logging

from surgiops.core.exceptions import ValidationError
from surgiops.models.clinical import PROCEDURE_TYPES, Procedure, Surgeon
from surgiops.models.organization import Hospital, Region
from surgiops.services.helpers import crud
from surgiops.services.helpers.scoped_queries import get_active_scoped

logger = logging.getLogger(__name__)

REGION_FIELDS = ("name", "code", "description")
SURGEON_FIELDS = ("first_name", "last_name", "npi", "specialties", "hospital_id", "contact_info")
PROCEDURE_FIELDS = (
    "name", "code", "procedure_type", "description",
    "estimated_duration_minutes", "complexity_score",
)


# ── Regions ──────────────────────────────────────────────────────────────────


def list_regions(tenant_id: int) -> list[dict]:
    return [r.to_dict() for r in crud.list_active(Region, tenant_id, Region.name)]


def get_region(tenant_id: int, region_id: int) -> dict:
    return get_active_scoped(Region, region_id, tenant_id=tenant_id).to_dict()


def create_region(tenant_id: int, data: dict, user_id: int | None = None) -> dict:
    crud.require_text(data, ("name", "code"), partial=False)
    region = Region(tenant_id=tenant_id)
    crud.apply_fields(region, data, REGION_FIELDS)
    region.code = region.code.strip().upper()
    return crud.save_new(region, user_id=user_id, resource="Region").to_dict()


def update_region(tenant_id: int, region_id: int, data: dict, user_id: int | None = None) -> dict:
    region = get_active_scoped(Region, region_id, tenant_id=tenant_id)
    crud.require_text(data, ("name", "code"), partial=True)
    crud.apply_fields(region, data, REGION_FIELDS)
    if "code" in data:
        region.code = region.code.strip().upper()
    return crud.save_changes(region, user_id=user_id, resource="Region").to_dict()


def delete_region(tenant_id: int, region_id: int, user_id: int | None = None) -> None:
    crud.soft_delete(Region, region_id, tenant_id=tenant_id, user_id=user_id)


# ── Surgeons ─────────────────────────────────────────────────────────────────


def list_surgeons(tenant_id: int, hospital_id: int | None = None) -> list[dict]:
    rows = crud.list_active(
        Surgeon, tenant_id, Surgeon.last_name, Surgeon.first_name, hospital_id=hospital_id,
    )
    return [s.to_dict() for s in rows]


def get_surgeon(tenant_id: int, surgeon_id: int) -> dict:
    return get_active_scoped(Surgeon, surgeon_id, tenant_id=tenant_id).to_dict()


def create_surgeon(tenant_id: int, data: dict, user_id: int | None = None) -> dict:
    crud.require_text(data, ("first_name", "last_name"), partial=False)
    crud.require_reference(Hospital, data.get("hospital_id"), tenant_id=tenant_id,
                           label="hospital", required=True)
    surgeon = Surgeon(tenant_id=tenant_id)
    crud.apply_fields(surgeon, data, SURGEON_FIELDS)
    return crud.save_new(surgeon, user_id=user_id, resource="Surgeon").to_dict()


def update_surgeon(tenant_id: int, surgeon_id: int, data: dict, user_id: int | None = None) -> dict:
    surgeon = get_active_scoped(Surgeon, surgeon_id, tenant_id=tenant_id)
    crud.require_text(data, ("first_name", "last_name"), partial=True)
    if "hospital_id" in data:
        crud.require_reference(Hospital, data["hospital_id"], tenant_id=tenant_id,
                               label="hospital", required=True)
    crud.apply_fields(surgeon, data, SURGEON_FIELDS)
    return crud.save_changes(surgeon, user_id=user_id, resource="Surgeon").to_dict()


def delete_surgeon(tenant_id: int, surgeon_id: int, user_id: int | None = None) -> None:
    crud.soft_delete(Surgeon, surgeon_id, tenant_id=tenant_id, user_id=user_id)


# ── Procedures ───────────────────────────────────────────────────────────────


def list_procedures(tenant_id: int, procedure_type: str | None = None) -> list[dict]:
    rows = crud.list_active(Procedure, tenant_id, Procedure.name, procedure_type=procedure_type)
    return [p.to_dict() for p in rows]


def get_procedure(tenant_id: int, procedure_id: int) -> dict:
    return get_active_scoped(Procedure, procedure_id, tenant_id=tenant_id).to_dict()


def _check_procedure(data: dict):
    if "procedure_type" in data:
        crud.require_choice(data["procedure_type"], PROCEDURE_TYPES,
                            label="procedure_type", allow_none=False)
    score = data.get("complexity_score")
    if score is not None and not 1 <= score <= 10:
        raise ValidationError("complexity_score must be between 1 and 10",
                              details={"complexity_score": score})


def create_procedure(tenant_id: int, data: dict, user_id: int | None = None) -> dict:
    crud.require_text(data, ("name",), partial=False)
    data = {"procedure_type": "other", **{k: v for k, v in data.items() if v is not None}}
    _check_procedure(data)
    procedure = Procedure(tenant_id=tenant_id)
    crud.apply_fields(procedure, data, PROCEDURE_FIELDS)
    return crud.save_new(procedure, user_id=user_id, resource="Procedure").to_dict()


def update_procedure(tenant_id: int, procedure_id: int, data: dict,
                     user_id: int | None = None) -> dict:
    procedure = get_active_scoped(Procedure, procedure_id, tenant_id=tenant_id)
    crud.require_text(data, ("name",), partial=True)
    _check_procedure(data)
    crud.apply_fields(procedure, data, PROCEDURE_FIELDS)
    return crud.save_changes(procedure, user_id=user_id, resource="Procedure").to_dict()


def delete_procedure(tenant_id: int, procedure_id: int, user_id: int | None = None) -> None:
    crud.soft_delete(Procedure, procedure_id, tenant_id=tenant_id, user_id=user_id)
