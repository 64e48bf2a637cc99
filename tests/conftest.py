"""
Shared pytest fixtures for the SurgiOps test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - default_tenant / other_tenant: Pre-created Tenant entities
    - region, hospital_system, hospital, surgeon, procedure: lookup rows
"""

import pytest

from surgiops import create_app
from surgiops.models import db as _db
from surgiops.models.auth import Tenant
from surgiops.services import hospital_service, setup_service


def _ensure_tenant(slug, name):
    t = Tenant.query.filter_by(slug=slug).first()
    if not t:
        t = Tenant(name=name, slug=slug)
        _db.session.add(t)
        _db.session.commit()
    return t


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        _ensure_tenant("test-default", "Test Default")
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def default_tenant():
    """Return the auto-created default test tenant."""
    return Tenant.query.filter_by(slug="test-default").first()


@pytest.fixture()
def other_tenant():
    return _ensure_tenant("test-other", "Other Tenant")


@pytest.fixture()
def headers(default_tenant):
    """Request headers scoping API calls to the default tenant."""
    return {"X-Tenant-ID": str(default_tenant.id)}


# ── Lookup rows (created through the services, committed) ────────────────


@pytest.fixture()
def region(default_tenant):
    return setup_service.create_region(default_tenant.id, {"name": "West", "code": "w"})


@pytest.fixture()
def hospital_system(default_tenant, region):
    return hospital_service.create_hospital_system(
        default_tenant.id, {"name": "Pacific Health", "region_id": region["id"]},
    )


@pytest.fixture()
def hospital(default_tenant, hospital_system, region):
    return hospital_service.create_hospital(default_tenant.id, {
        "name": "Memorial Medical Center",
        "hospital_system_id": hospital_system["id"],
        "region_id": region["id"],
        "bed_count": 300,
        "trauma_level": "Level 1",
    })


@pytest.fixture()
def surgeon(default_tenant, hospital):
    return setup_service.create_surgeon(default_tenant.id, {
        "first_name": "Alex", "last_name": "Morgan", "hospital_id": hospital["id"],
        "specialties": ["knee"],
    })


@pytest.fixture()
def procedure(default_tenant):
    return setup_service.create_procedure(default_tenant.id, {
        "name": "Total Knee Arthroplasty", "code": "TKA", "procedure_type": "knee",
    })


@pytest.fixture()
def case_refs(surgeon, hospital, procedure):
    """The three foreign references every surgery case needs."""
    return {
        "surgeon_id": surgeon["id"],
        "hospital_id": hospital["id"],
        "procedure_id": procedure["id"],
    }
