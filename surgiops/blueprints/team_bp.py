"""
Rep teams & territories blueprint.

Endpoints:
    /api/v1/rep-teams[/<id>[/form]]          CRUD (soft delete)
    /api/v1/territories[/<id>[/form]]        CRUD (soft delete)
    GET /api/v1/territories/hierarchy        teams → territories → independents
"""

from flask import Blueprint

from surgiops.blueprints import current_tenant_id, list_response, register_crud
from surgiops.forms.organization import RepTeamForm, TerritoryForm
from surgiops.services import team_service

team_bp = Blueprint("team", __name__, url_prefix="/api/v1")


@team_bp.route("/territories/hierarchy", methods=["GET"])
def territory_hierarchy():
    return list_response(team_service.territory_hierarchy(current_tenant_id()))


register_crud(
    team_bp, "/rep-teams", name="rep_team", form=RepTeamForm,
    list_fn=team_service.list_rep_teams,
    get_fn=team_service.get_rep_team,
    create_fn=team_service.create_rep_team,
    update_fn=team_service.update_rep_team,
    delete_fn=team_service.delete_rep_team,
)
register_crud(
    team_bp, "/territories", name="territory", form=TerritoryForm,
    list_fn=team_service.list_territories,
    get_fn=team_service.get_territory,
    create_fn=team_service.create_territory,
    update_fn=team_service.update_territory,
    delete_fn=team_service.delete_territory,
)
