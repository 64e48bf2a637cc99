"""Form controllers: flat string state ↔ service write payloads."""

from surgiops.forms.base import REQUIRED_MESSAGE, Field, FormController
from surgiops.forms.booking import SurgeryCaseForm
from surgiops.forms.organization import HospitalForm, HospitalSystemForm, RepTeamForm, TerritoryForm
from surgiops.forms.setup import ProcedureForm, RegionForm, SurgeonForm

__all__ = [
    "REQUIRED_MESSAGE",
    "Field",
    "FormController",
    "HospitalForm",
    "HospitalSystemForm",
    "ProcedureForm",
    "RegionForm",
    "RepTeamForm",
    "SurgeonForm",
    "SurgeryCaseForm",
    "TerritoryForm",
]
