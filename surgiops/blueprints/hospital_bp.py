"""
Hospital systems & hospitals blueprint.

Endpoints:
    /api/v1/hospital-systems[/<id>[/form]]   CRUD (soft delete)
    /api/v1/hospitals[/<id>[/form]]          CRUD (soft delete)
    GET /api/v1/hospitals/hierarchy          systems → hospitals → independents
"""

from flask import Blueprint, request

from surgiops.blueprints import current_tenant_id, list_response, register_crud
from surgiops.forms.organization import HospitalForm, HospitalSystemForm
from surgiops.services import hospital_service

hospital_bp = Blueprint("hospital", __name__, url_prefix="/api/v1")


@hospital_bp.route("/hospitals/hierarchy", methods=["GET"])
def hospital_hierarchy():
    return list_response(hospital_service.hospital_hierarchy(current_tenant_id()))


@hospital_bp.route("/hospitals", methods=["GET"])
def list_hospitals():
    """Query params: hospital_system_id?, region_id?"""
    items = hospital_service.list_hospitals(
        current_tenant_id(),
        hospital_system_id=request.args.get("hospital_system_id", type=int),
        region_id=request.args.get("region_id", type=int),
    )
    return list_response(items)


register_crud(
    hospital_bp, "/hospital-systems", name="hospital_system", form=HospitalSystemForm,
    list_fn=hospital_service.list_hospital_systems,
    get_fn=hospital_service.get_hospital_system,
    create_fn=hospital_service.create_hospital_system,
    update_fn=hospital_service.update_hospital_system,
    delete_fn=hospital_service.delete_hospital_system,
)
register_crud(
    hospital_bp, "/hospitals", name="hospital", form=HospitalForm,
    list_fn=hospital_service.list_hospitals,
    get_fn=hospital_service.get_hospital,
    create_fn=hospital_service.create_hospital,
    update_fn=hospital_service.update_hospital,
    delete_fn=hospital_service.delete_hospital,
    with_list=False,
)
