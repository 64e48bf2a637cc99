"""Forms for the lookup collections: regions, surgeons and procedures."""

from surgiops.forms.base import Field, FormController


class RegionForm(FormController):
    resource = "Region"
    fields = (
        Field("name", required=True),
        Field("code", required=True),
        Field("description"),
    )


class SurgeonForm(FormController):
    """Specialties are typed as one comma-separated string."""

    resource = "Surgeon"
    fields = (
        Field("first_name", required=True),
        Field("last_name", required=True),
        Field("hospital_id", required=True, kind="int"),
        Field("npi"),
        Field("specialties"),
        Field("contact_email"),
        Field("contact_phone"),
    )
    nested = {"contact_info": (("email", "contact_email"), ("phone", "contact_phone"))}

    def to_payload(self) -> dict:
        payload = super().to_payload()
        raw = payload.get("specialties") or ""
        payload["specialties"] = [s.strip() for s in raw.split(",") if s.strip()]
        return payload

    def prefill(self, row: dict) -> dict[str, str]:
        values = super().prefill(row)
        specialties = row.get("specialties") or []
        if isinstance(specialties, (list, tuple)):
            values["specialties"] = ", ".join(specialties)
        return values


class ProcedureForm(FormController):
    resource = "Procedure"
    fields = (
        Field("name", required=True),
        Field("procedure_type", required=True, default="other"),
        Field("code"),
        Field("description"),
        Field("estimated_duration_minutes", kind="int"),
        Field("complexity_score", kind="int"),
    )
