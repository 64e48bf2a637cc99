"""Hospitals tab (systems + hospitals) and teams tab (teams + territories)."""

from surgiops.forms.organization import HospitalForm, HospitalSystemForm, RepTeamForm, TerritoryForm
from surgiops.services import hospital_service as hs
from surgiops.services import team_service as ts
from surgiops.services.hierarchy import build_hierarchy
from surgiops.tabs.base import TabController


class HospitalsTab(TabController):
    reference_collections = ("regions",)

    def __init__(self, tenant_id: int, user_id: int | None = None):
        super().__init__(tenant_id, user_id)
        self.systems = self.section(
            HospitalSystemForm(),
            fetch=hs.list_hospital_systems,
            create=hs.create_hospital_system,
            update=hs.update_hospital_system,
            delete=hs.delete_hospital_system,
        )
        self.hospitals = self.section(
            HospitalForm(),
            fetch=hs.list_hospitals,
            create=hs.create_hospital,
            update=hs.update_hospital,
            delete=hs.delete_hospital,
        )

    def fetch(self):
        self.systems.reload()
        self.hospitals.reload()

    @property
    def rows(self) -> list[dict]:
        return build_hierarchy(
            self.systems.items, self.hospitals.items,
            parent_key="hospital_system_id",
            separator_label=hs.INDEPENDENT_HOSPITALS_LABEL,
        )


class TeamsTab(TabController):
    reference_collections = ("regions",)

    def __init__(self, tenant_id: int, user_id: int | None = None):
        super().__init__(tenant_id, user_id)
        self.teams = self.section(
            RepTeamForm(),
            fetch=ts.list_rep_teams,
            create=ts.create_rep_team,
            update=ts.update_rep_team,
            delete=ts.delete_rep_team,
        )
        self.territories = self.section(
            TerritoryForm(),
            fetch=ts.list_territories,
            create=ts.create_territory,
            update=ts.update_territory,
            delete=ts.delete_territory,
        )

    def fetch(self):
        self.teams.reload()
        self.territories.reload()

    @property
    def rows(self) -> list[dict]:
        return build_hierarchy(
            self.teams.items, self.territories.items,
            parent_key="team_id",
            separator_label=ts.INDEPENDENT_TERRITORIES_LABEL,
        )
