"""Setup tab for the lookup collections."""

from surgiops.forms.setup import ProcedureForm, RegionForm, SurgeonForm
from surgiops.services import setup_service as setup
from surgiops.tabs.base import TabController


class SetupTab(TabController):
    reference_collections = ("hospitals",)

    def __init__(self, tenant_id: int, user_id: int | None = None):
        super().__init__(tenant_id, user_id)
        self.regions = self.section(
            RegionForm(),
            fetch=setup.list_regions,
            create=setup.create_region,
            update=setup.update_region,
            delete=setup.delete_region,
        )
        self.surgeons = self.section(
            SurgeonForm(),
            fetch=setup.list_surgeons,
            create=setup.create_surgeon,
            update=setup.update_surgeon,
            delete=setup.delete_surgeon,
        )
        self.procedures = self.section(
            ProcedureForm(),
            fetch=setup.list_procedures,
            create=setup.create_procedure,
            update=setup.update_procedure,
            delete=setup.delete_procedure,
        )

    def fetch(self):
        self.regions.reload()
        self.surgeons.reload()
        self.procedures.reload()
