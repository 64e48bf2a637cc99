"""Forms for hospital systems, hospitals, rep teams and territories."""

from surgiops.forms.base import Field, FormController

_ADDRESS_FIELDS = (
    Field("street"),
    Field("city"),
    Field("state"),
    Field("zip"),
)
_ADDRESS = (("street", "street"), ("city", "city"), ("state", "state"), ("zip", "zip"))

_CONTACT_FIELDS = (
    Field("contact_person"),
    Field("contact_email"),
    Field("contact_phone"),
)
_CONTACT = (("person", "contact_person"), ("email", "contact_email"), ("phone", "contact_phone"))


class HospitalSystemForm(FormController):
    resource = "Hospital system"
    fields = (
        Field("name", required=True),
        Field("region_id", kind="int"),
        *_ADDRESS_FIELDS,
        *_CONTACT_FIELDS,
    )
    nested = {"headquarters_address": _ADDRESS, "contact_info": _CONTACT}


class HospitalForm(FormController):
    resource = "Hospital"
    fields = (
        Field("name", required=True),
        Field("hospital_system_id", kind="int"),
        Field("region_id", kind="int"),
        Field("bed_count", kind="int"),
        Field("trauma_level"),
        *_ADDRESS_FIELDS,
        *_CONTACT_FIELDS,
    )
    nested = {"address": _ADDRESS, "contact_info": _CONTACT}


class RepTeamForm(FormController):
    resource = "Team"
    fields = (
        Field("name", required=True),
        Field("team_lead", required=True),
        Field("region_id", kind="int"),
    )


class TerritoryForm(FormController):
    resource = "Territory"
    fields = (
        Field("name", required=True),
        Field("coverage_area", required=True),
        Field("team_id", kind="int"),
    )
