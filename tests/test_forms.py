"""
Form controller tests: required-field validation, conversions, prefill and
the submit lifecycle (no persistence call on validation failure).
"""

import pytest

from surgiops.core.exceptions import FormValidationError, ValidationError
from surgiops.forms import (
    REQUIRED_MESSAGE,
    HospitalForm,
    HospitalSystemForm,
    ProcedureForm,
    RepTeamForm,
    SurgeonForm,
    SurgeryCaseForm,
    TerritoryForm,
)


class _Recorder:
    """Stand-in create/update callables that record calls."""

    def __init__(self, result=None, error=None):
        self.calls = []
        self.result = result if result is not None else {"id": 1}
        self.error = error

    def create(self, payload):
        self.calls.append(("create", payload))
        if self.error:
            raise self.error
        return self.result

    def update(self, pk, payload):
        self.calls.append(("update", pk, payload))
        if self.error:
            raise self.error
        return self.result


class TestValidation:
    def test_missing_required_field_blocks_submit(self):
        """A blank required field sets the one message and calls nothing."""
        form = RepTeamForm()
        form.open_create()
        form.update(name="West Reps")
        rec = _Recorder()

        assert form.submit(create=rec.create, update=rec.update) is None
        assert form.error == REQUIRED_MESSAGE
        assert rec.calls == []
        assert form.is_open

    def test_whitespace_counts_as_blank(self):
        form = TerritoryForm()
        form.open_create()
        form.update(name="  ", coverage_area="North")
        with pytest.raises(FormValidationError, match=REQUIRED_MESSAGE):
            form.validate()

    def test_surgery_case_requires_date_and_time(self):
        form = SurgeryCaseForm()
        form.open_create()
        form.update(surgeon_id="1", hospital_id="2", procedure_id="3", scheduled_date="2025-03-10")
        with pytest.raises(FormValidationError):
            form.validate()

    def test_non_numeric_int_field_rejected(self):
        form = HospitalForm()
        form.open_create()
        form.update(name="County", bed_count="lots")
        with pytest.raises(FormValidationError, match="bed_count"):
            form.to_payload()


class TestPayload:
    def test_case_date_and_time_combine(self):
        form = SurgeryCaseForm()
        form.open_create()
        form.update(surgeon_id="1", hospital_id="2", procedure_id="3",
                    scheduled_date="2025-03-10", scheduled_time="09:30",
                    estimated_cost="1250.50")
        payload = form.to_payload()

        assert payload["scheduled_at"].isoformat() == "2025-03-10T09:30:00"
        assert payload["surgeon_id"] == 1
        assert payload["estimated_cost"] == 1250.5
        assert "scheduled_date" not in payload
        assert "status" not in payload

    def test_bad_time_raises_validation_error(self):
        form = SurgeryCaseForm()
        form.open_create()
        form.update(surgeon_id="1", hospital_id="2", procedure_id="3",
                    scheduled_date="2025-03-10", scheduled_time="25:99")
        with pytest.raises(ValidationError):
            form.to_payload()

    def test_nested_json_none_when_all_blank(self):
        form = HospitalSystemForm()
        form.open_create()
        form.update(name="Pacific Health")
        payload = form.to_payload()
        assert payload["headquarters_address"] is None
        assert payload["contact_info"] is None
        assert payload["region_id"] is None

    def test_nested_json_built_from_any_part(self):
        form = HospitalForm()
        form.open_create()
        form.update(name="Memorial", city="San Diego", contact_email="ops@memorial.example")
        payload = form.to_payload()
        assert payload["address"] == {"street": "", "city": "San Diego", "state": "", "zip": ""}
        assert payload["contact_info"]["email"] == "ops@memorial.example"
        assert "city" not in payload

    def test_surgeon_specialties_split(self):
        payload = SurgeonForm.parse_payload({
            "first_name": "Priya", "last_name": "Shah", "hospital_id": "4",
            "specialties": "spine, trauma ,",
        })
        assert payload["specialties"] == ["spine", "trauma"]
        assert payload["hospital_id"] == 4

    def test_parse_payload_raises_on_missing(self):
        with pytest.raises(FormValidationError):
            ProcedureForm.parse_payload({"procedure_type": "hip"})


class TestPrefill:
    def test_case_prefill_splits_timestamp(self):
        form = SurgeryCaseForm()
        form.open_edit({"id": 7, "surgeon_id": 1, "hospital_id": 2, "procedure_id": 3,
                        "scheduled_at": "2025-03-10T09:30:00", "status": "scheduled",
                        "estimated_cost": None})
        assert form.values["scheduled_date"] == "2025-03-10"
        assert form.values["scheduled_time"] == "09:30"
        assert form.values["surgeon_id"] == "1"
        assert form.values["estimated_cost"] == ""
        assert form.editing_id == 7

    def test_hospital_prefill_decomposes_json(self):
        values = HospitalForm().prefill({
            "name": "Memorial", "address": {"city": "San Diego", "zip": "92101"},
            "contact_info": {"person": "Dana"},
        })
        assert values["city"] == "San Diego"
        assert values["zip"] == "92101"
        assert values["street"] == ""
        assert values["contact_person"] == "Dana"

    def test_view_mode_is_read_only(self):
        form = RepTeamForm()
        form.open_view({"id": 3, "name": "West", "team_lead": "Jordan"})
        form.update(name="Changed")
        rec = _Recorder()
        assert form.values["name"] == "West"
        assert form.submit(create=rec.create, update=rec.update) is None
        assert rec.calls == []


class TestSubmit:
    def test_create_success_closes_and_resets(self):
        form = RepTeamForm()
        form.open_create()
        form.update(name="West", team_lead="Jordan", region_id="")
        rec = _Recorder(result={"id": 10, "name": "West"})

        row = form.submit(create=rec.create, update=rec.update)

        assert row == {"id": 10, "name": "West"}
        assert rec.calls == [("create", {"name": "West", "team_lead": "Jordan", "region_id": None})]
        assert not form.is_open
        assert form.values == RepTeamForm.defaults()
        assert form.error is None

    def test_edit_calls_update_with_id(self):
        form = TerritoryForm()
        form.open_edit({"id": 5, "name": "North", "coverage_area": "Upstate", "team_id": None})
        rec = _Recorder()
        form.submit(create=rec.create, update=rec.update)
        assert rec.calls[0][0:2] == ("update", 5)

    def test_failure_keeps_form_open_with_error(self):
        form = RepTeamForm()
        form.open_create()
        form.update(name="West", team_lead="Jordan")
        rec = _Recorder(error=ValidationError("Selected region does not exist or is inactive"))

        assert form.submit(create=rec.create, update=rec.update) is None
        assert form.is_open
        assert form.error == "Selected region does not exist or is inactive"
        assert form.values["name"] == "West"
        assert form.saving is False

    def test_reentrant_submit_ignored(self):
        form = RepTeamForm()
        form.open_create()
        form.update(name="West", team_lead="Jordan")
        form.saving = True
        rec = _Recorder()
        assert form.submit(create=rec.create, update=rec.update) is None
        assert rec.calls == []

    def test_close_clears_error(self):
        form = RepTeamForm()
        form.open_create()
        form.submit(create=_Recorder().create, update=_Recorder().update)
        assert form.error
        form.close()
        assert form.error is None
        assert form.mode is None
