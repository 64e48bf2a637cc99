"""Surgery case booking form."""

from datetime import datetime

from surgiops.forms.base import Field, FormController
from surgiops.utils.helpers import combine_date_time


class SurgeryCaseForm(FormController):
    """Booking form: separate date and time inputs become one ``scheduled_at``."""

    resource = "Surgery case"
    fields = (
        Field("surgeon_id", required=True, kind="int"),
        Field("hospital_id", required=True, kind="int"),
        Field("procedure_id", required=True, kind="int"),
        Field("scheduled_date", required=True),
        Field("scheduled_time", required=True),
        Field("patient_identifier"),
        Field("operating_room"),
        Field("estimated_cost", kind="float"),
        Field("status"),
        Field("notes"),
    )

    def to_payload(self) -> dict:
        payload = super().to_payload()
        date_str = payload.pop("scheduled_date")
        time_str = payload.pop("scheduled_time")
        payload["scheduled_at"] = combine_date_time(date_str, time_str)
        if payload["status"] is None:
            payload.pop("status")
        return payload

    def prefill(self, row: dict) -> dict[str, str]:
        values = super().prefill(row)
        scheduled = row.get("scheduled_at")
        if scheduled:
            dt = scheduled if isinstance(scheduled, datetime) else datetime.fromisoformat(scheduled)
            values["scheduled_date"] = dt.strftime("%Y-%m-%d")
            values["scheduled_time"] = dt.strftime("%H:%M")
        return values
