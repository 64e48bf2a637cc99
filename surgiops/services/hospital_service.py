"""
Hospital system and hospital management.

Business context:
    A hospital system groups hospitals under one headquarters. Hospitals may
    also stand alone. Both are tenant-scoped and soft-deleted; a hospital
    whose system was deactivated keeps its hospital_system_id and is shown
    as independent by the hierarchy view.

All functions take tenant_id first and return serialized dicts.
"""

import logging

from surgiops.core.exceptions import ValidationError
from surgiops.models.organization import TRAUMA_LEVELS, Hospital, HospitalSystem, Region
from surgiops.services.helpers import crud
from surgiops.services.helpers.scoped_queries import get_active_scoped
from surgiops.services.hierarchy import build_hierarchy

logger = logging.getLogger(__name__)

SYSTEM_FIELDS = ("name", "headquarters_address", "contact_info", "region_id")
HOSPITAL_FIELDS = (
    "name", "hospital_system_id", "address", "contact_info",
    "region_id", "bed_count", "trauma_level",
)

INDEPENDENT_HOSPITALS_LABEL = "Independent Hospitals"


def _check_references(tenant_id: int, data: dict):
    if "region_id" in data:
        crud.require_reference(Region, data["region_id"], tenant_id=tenant_id, label="region")
    if "hospital_system_id" in data:
        crud.require_reference(HospitalSystem, data["hospital_system_id"],
                               tenant_id=tenant_id, label="hospital_system")
    if "trauma_level" in data:
        crud.require_choice(data["trauma_level"], TRAUMA_LEVELS, label="trauma_level")
    if data.get("bed_count") is not None and data["bed_count"] < 0:
        raise ValidationError("bed_count cannot be negative", details={"bed_count": data["bed_count"]})


# ── Hospital systems ─────────────────────────────────────────────────────────


def list_hospital_systems(tenant_id: int) -> list[dict]:
    return [s.to_dict() for s in crud.list_active(HospitalSystem, tenant_id, HospitalSystem.name)]


def get_hospital_system(tenant_id: int, system_id: int) -> dict:
    return get_active_scoped(HospitalSystem, system_id, tenant_id=tenant_id).to_dict()


def create_hospital_system(tenant_id: int, data: dict, user_id: int | None = None) -> dict:
    crud.require_text(data, ("name",), partial=False)
    _check_references(tenant_id, data)
    system = HospitalSystem(tenant_id=tenant_id)
    crud.apply_fields(system, data, SYSTEM_FIELDS)
    system.name = system.name.strip()
    return crud.save_new(system, user_id=user_id, resource="HospitalSystem").to_dict()


def update_hospital_system(tenant_id: int, system_id: int, data: dict,
                           user_id: int | None = None) -> dict:
    system = get_active_scoped(HospitalSystem, system_id, tenant_id=tenant_id)
    crud.require_text(data, ("name",), partial=True)
    _check_references(tenant_id, data)
    crud.apply_fields(system, data, SYSTEM_FIELDS)
    return crud.save_changes(system, user_id=user_id, resource="HospitalSystem").to_dict()


def delete_hospital_system(tenant_id: int, system_id: int, user_id: int | None = None) -> None:
    """Soft delete only. Member hospitals are left untouched."""
    crud.soft_delete(HospitalSystem, system_id, tenant_id=tenant_id, user_id=user_id)


# ── Hospitals ────────────────────────────────────────────────────────────────


def list_hospitals(tenant_id: int, hospital_system_id: int | None = None,
                   region_id: int | None = None) -> list[dict]:
    rows = crud.list_active(
        Hospital, tenant_id, Hospital.name,
        hospital_system_id=hospital_system_id, region_id=region_id,
    )
    return [h.to_dict() for h in rows]


def get_hospital(tenant_id: int, hospital_id: int) -> dict:
    return get_active_scoped(Hospital, hospital_id, tenant_id=tenant_id).to_dict()


def create_hospital(tenant_id: int, data: dict, user_id: int | None = None) -> dict:
    crud.require_text(data, ("name",), partial=False)
    _check_references(tenant_id, data)
    hospital = Hospital(tenant_id=tenant_id)
    crud.apply_fields(hospital, data, HOSPITAL_FIELDS)
    hospital.name = hospital.name.strip()
    return crud.save_new(hospital, user_id=user_id, resource="Hospital").to_dict()


def update_hospital(tenant_id: int, hospital_id: int, data: dict,
                    user_id: int | None = None) -> dict:
    hospital = get_active_scoped(Hospital, hospital_id, tenant_id=tenant_id)
    crud.require_text(data, ("name",), partial=True)
    _check_references(tenant_id, data)
    crud.apply_fields(hospital, data, HOSPITAL_FIELDS)
    return crud.save_changes(hospital, user_id=user_id, resource="Hospital").to_dict()


def delete_hospital(tenant_id: int, hospital_id: int, user_id: int | None = None) -> None:
    crud.soft_delete(Hospital, hospital_id, tenant_id=tenant_id, user_id=user_id)


def hospital_hierarchy(tenant_id: int) -> list[dict]:
    """Systems with their hospitals, then independent hospitals."""
    return build_hierarchy(
        list_hospital_systems(tenant_id),
        list_hospitals(tenant_id),
        parent_key="hospital_system_id",
        separator_label=INDEPENDENT_HOSPITALS_LABEL,
    )
