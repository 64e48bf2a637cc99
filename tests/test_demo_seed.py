"""Demo tenant seeding."""

from datetime import date

from surgiops.models.auth import Tenant
from surgiops.services import hospital_service, surgery_case_service, team_service
from surgiops.services.demo_seed import seed_demo_tenant
from surgiops.services.hierarchy import SEPARATOR_ID


def test_seed_creates_a_usable_tenant():
    summary = seed_demo_tenant(today=date(2025, 3, 12))
    t = summary["tenant_id"]

    assert summary["created"] is True
    assert summary["cases"] == 10
    assert len(surgery_case_service.list_week_cases(t, date(2025, 3, 12))) == 10
    assert SEPARATOR_ID in [r["id"] for r in hospital_service.hospital_hierarchy(t)]
    assert SEPARATOR_ID in [r["id"] for r in team_service.territory_hierarchy(t)]


def test_seed_is_idempotent():
    first = seed_demo_tenant(slug="demo-once")
    second = seed_demo_tenant(slug="demo-once")
    assert second == {"tenant_id": first["tenant_id"], "created": False}
    assert Tenant.query.filter_by(slug="demo-once").count() == 1


def test_seed_cli(app):
    result = app.test_cli_runner().invoke(args=["seed-demo", "--slug", "demo-cli"])
    assert result.exit_code == 0
    assert Tenant.query.filter_by(slug="demo-cli").count() == 1
