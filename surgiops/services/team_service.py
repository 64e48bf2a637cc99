"""
Rep team and territory management.

Territories optionally belong to one rep team. Deactivating a team does not
touch its territories; readers show them as independent.
"""

import logging

from surgiops.models.organization import Region, RepTeam, Territory
from surgiops.services.helpers import crud
from surgiops.services.helpers.scoped_queries import get_active_scoped
from surgiops.services.hierarchy import build_hierarchy

logger = logging.getLogger(__name__)

TEAM_FIELDS = ("name", "team_lead", "region_id")
TERRITORY_FIELDS = ("name", "team_id", "coverage_area")

INDEPENDENT_TERRITORIES_LABEL = "Independent Territories"


# ── Rep teams ────────────────────────────────────────────────────────────────


def list_rep_teams(tenant_id: int, region_id: int | None = None) -> list[dict]:
    return [t.to_dict() for t in crud.list_active(RepTeam, tenant_id, RepTeam.name, region_id=region_id)]


def get_rep_team(tenant_id: int, team_id: int) -> dict:
    return get_active_scoped(RepTeam, team_id, tenant_id=tenant_id).to_dict()


def create_rep_team(tenant_id: int, data: dict, user_id: int | None = None) -> dict:
    crud.require_text(data, ("name", "team_lead"), partial=False)
    crud.require_reference(Region, data.get("region_id"), tenant_id=tenant_id, label="region")
    team = RepTeam(tenant_id=tenant_id)
    crud.apply_fields(team, data, TEAM_FIELDS)
    return crud.save_new(team, user_id=user_id, resource="RepTeam").to_dict()


def update_rep_team(tenant_id: int, team_id: int, data: dict, user_id: int | None = None) -> dict:
    team = get_active_scoped(RepTeam, team_id, tenant_id=tenant_id)
    crud.require_text(data, ("name", "team_lead"), partial=True)
    if "region_id" in data:
        crud.require_reference(Region, data["region_id"], tenant_id=tenant_id, label="region")
    crud.apply_fields(team, data, TEAM_FIELDS)
    return crud.save_changes(team, user_id=user_id, resource="RepTeam").to_dict()


def delete_rep_team(tenant_id: int, team_id: int, user_id: int | None = None) -> None:
    crud.soft_delete(RepTeam, team_id, tenant_id=tenant_id, user_id=user_id)


# ── Territories ──────────────────────────────────────────────────────────────


def list_territories(tenant_id: int, team_id: int | None = None) -> list[dict]:
    return [t.to_dict() for t in crud.list_active(Territory, tenant_id, Territory.name, team_id=team_id)]


def get_territory(tenant_id: int, territory_id: int) -> dict:
    return get_active_scoped(Territory, territory_id, tenant_id=tenant_id).to_dict()


def create_territory(tenant_id: int, data: dict, user_id: int | None = None) -> dict:
    crud.require_text(data, ("name", "coverage_area"), partial=False)
    crud.require_reference(RepTeam, data.get("team_id"), tenant_id=tenant_id, label="team")
    territory = Territory(tenant_id=tenant_id)
    crud.apply_fields(territory, data, TERRITORY_FIELDS)
    return crud.save_new(territory, user_id=user_id, resource="Territory").to_dict()


def update_territory(tenant_id: int, territory_id: int, data: dict,
                     user_id: int | None = None) -> dict:
    territory = get_active_scoped(Territory, territory_id, tenant_id=tenant_id)
    crud.require_text(data, ("name", "coverage_area"), partial=True)
    if "team_id" in data:
        crud.require_reference(RepTeam, data["team_id"], tenant_id=tenant_id, label="team")
    crud.apply_fields(territory, data, TERRITORY_FIELDS)
    return crud.save_changes(territory, user_id=user_id, resource="Territory").to_dict()


def delete_territory(tenant_id: int, territory_id: int, user_id: int | None = None) -> None:
    crud.soft_delete(Territory, territory_id, tenant_id=tenant_id, user_id=user_id)


def territory_hierarchy(tenant_id: int) -> list[dict]:
    """Teams with their territories, then independent territories."""
    return build_hierarchy(
        list_rep_teams(tenant_id),
        list_territories(tenant_id),
        parent_key="team_id",
        separator_label=INDEPENDENT_TERRITORIES_LABEL,
    )
