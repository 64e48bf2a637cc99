"""
Setup blueprint: the lookup collections behind the booking form.

Endpoints:
    /api/v1/regions[/<id>[/form]]       CRUD (soft delete)
    /api/v1/surgeons[/<id>[/form]]      CRUD (soft delete)
    /api/v1/procedures[/<id>[/form]]    CRUD (soft delete)
"""

from flask import Blueprint

from surgiops.forms.setup import ProcedureForm, RegionForm, SurgeonForm
from surgiops.blueprints import register_crud
from surgiops.services import setup_service

setup_bp = Blueprint("setup", __name__, url_prefix="/api/v1")

register_crud(
    setup_bp, "/regions", name="region", form=RegionForm,
    list_fn=setup_service.list_regions,
    get_fn=setup_service.get_region,
    create_fn=setup_service.create_region,
    update_fn=setup_service.update_region,
    delete_fn=setup_service.delete_region,
)
register_crud(
    setup_bp, "/surgeons", name="surgeon", form=SurgeonForm,
    list_fn=setup_service.list_surgeons,
    get_fn=setup_service.get_surgeon,
    create_fn=setup_service.create_surgeon,
    update_fn=setup_service.update_surgeon,
    delete_fn=setup_service.delete_surgeon,
)
register_crud(
    setup_bp, "/procedures", name="procedure", form=ProcedureForm,
    list_fn=setup_service.list_procedures,
    get_fn=setup_service.get_procedure,
    create_fn=setup_service.create_procedure,
    update_fn=setup_service.update_procedure,
    delete_fn=setup_service.delete_procedure,
)
