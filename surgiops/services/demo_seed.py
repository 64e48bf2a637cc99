"""
Demo tenant seed.

Creates one tenant with a small, consistent data set: regions, a hospital
system with member hospitals plus one independent hospital, surgeons,
procedures, rep teams and territories, a week of booked cases, a few
insights and some sales rows for the reports. Goes through the same
service functions the API uses, so every reference is validated.
"""

import logging
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import select

from surgiops.models import db
from surgiops.models.ai import AIInsight
from surgiops.models.auth import Tenant
from surgiops.models.sales import SalesOpportunity, SalesTransaction
from surgiops.services import hospital_service, setup_service, surgery_case_service, team_service
from surgiops.utils.helpers import commit_or_raise

logger = logging.getLogger(__name__)

DEMO_SLUG = "demo-orthopedics"

_PROCEDURES = (
    ("Total Knee Arthroplasty", "TKA", "knee", 120, 6),
    ("Total Hip Arthroplasty", "THA", "hip", 110, 6),
    ("Rotator Cuff Repair", "RCR", "shoulder", 90, 5),
    ("Lumbar Fusion", "LF", "spine", 180, 8),
    ("ACL Reconstruction", "ACL", "sports_medicine", 75, 4),
)

_INSIGHTS = (
    ("operations", "OR utilisation dips on Fridays", 0.86),
    ("sales", "Hip volume growing at Memorial", 0.72),
    ("inventory", "Knee implant kits below par at Riverside", 0.64),
    ("general_business", "Contract renewal window opening", 0.41),
)


def seed_demo_tenant(slug: str = DEMO_SLUG, today: date | None = None) -> dict:
    """Create the demo tenant (idempotent on slug). Returns a count summary."""
    existing = db.session.execute(select(Tenant).where(Tenant.slug == slug)).scalar_one_or_none()
    if existing is not None:
        logger.info("Demo tenant %s already exists (id=%s)", slug, existing.id)
        return {"tenant_id": existing.id, "created": False}

    tenant = Tenant(name="Demo Orthopedics", slug=slug)
    db.session.add(tenant)
    commit_or_raise("Tenant", "slug", slug)
    t = tenant.id
    today = today or date.today()

    west = setup_service.create_region(t, {"name": "West", "code": "W"})
    east = setup_service.create_region(t, {"name": "East", "code": "E"})

    system = hospital_service.create_hospital_system(t, {
        "name": "Pacific Health",
        "region_id": west["id"],
        "headquarters_address": {"street": "1 Harbor Way", "city": "San Diego", "state": "CA", "zip": "92101"},
        "contact_info": {"person": "Dana Reyes", "email": "dana@pacifichealth.example", "phone": "555-0100"},
    })
    memorial = hospital_service.create_hospital(t, {
        "name": "Memorial Medical Center", "hospital_system_id": system["id"],
        "region_id": west["id"], "bed_count": 420, "trauma_level": "Level 1",
    })
    riverside = hospital_service.create_hospital(t, {
        "name": "Riverside Hospital", "hospital_system_id": system["id"],
        "region_id": west["id"], "bed_count": 180, "trauma_level": "Level 3",
    })
    county = hospital_service.create_hospital(t, {
        "name": "County General", "region_id": east["id"], "bed_count": 250, "trauma_level": "Level 2",
    })

    surgeons = [
        setup_service.create_surgeon(t, {"first_name": first, "last_name": last,
                                         "hospital_id": hospital["id"], "specialties": specialties})
        for first, last, hospital, specialties in (
            ("Alex", "Morgan", memorial, ["knee", "hip"]),
            ("Priya", "Shah", memorial, ["spine"]),
            ("Sam", "Okafor", riverside, ["shoulder", "sports_medicine"]),
            ("Lee", "Chen", county, ["hip"]),
        )
    ]
    procedures = [
        setup_service.create_procedure(t, {
            "name": name, "code": code, "procedure_type": ptype,
            "estimated_duration_minutes": minutes, "complexity_score": score,
        })
        for name, code, ptype, minutes, score in _PROCEDURES
    ]

    west_team = team_service.create_rep_team(t, {"name": "West Coast Reps", "team_lead": "Jordan Blake",
                                                 "region_id": west["id"]})
    team_service.create_rep_team(t, {"name": "East Reps", "team_lead": "Casey Diaz", "region_id": east["id"]})
    team_service.create_territory(t, {"name": "San Diego", "coverage_area": "San Diego County",
                                      "team_id": west_team["id"]})
    team_service.create_territory(t, {"name": "Orange County", "coverage_area": "Orange County",
                                      "team_id": west_team["id"]})
    team_service.create_territory(t, {"name": "Unassigned North", "coverage_area": "Northern counties"})

    week_start, _ = surgery_case_service.week_window(today)
    cases = 0
    for offset in range(1, 6):
        day = week_start + timedelta(days=offset)
        for slot, hour in enumerate((8, 13)):
            surgeon = surgeons[(offset + slot) % len(surgeons)]
            surgery_case_service.create_case(t, {
                "surgeon_id": surgeon["id"],
                "hospital_id": surgeon["hospital_id"],
                "procedure_id": procedures[(offset + slot) % len(procedures)]["id"],
                "scheduled_at": day.replace(hour=hour),
                "operating_room": f"OR-{slot + 1}",
                "estimated_cost": 12000.0 + 1500 * slot,
            })
            cases += 1

    now = datetime.now(timezone.utc)
    for category, title, confidence in _INSIGHTS:
        db.session.add(AIInsight(
            tenant_id=t, insight_type=category, title=title,
            description=f"{title}.", confidence_score=confidence,
            is_actionable=confidence >= 0.6, recommendations=["Review with the regional lead"],
        ))
    for name, stage, value in (
        ("Memorial knee program", "negotiation", 250000.0),
        ("Riverside shoulder kits", "proposal", 90000.0),
        ("County hip contract", "closed-won", 180000.0),
        ("Pacific spine pilot", "lead", 60000.0),
    ):
        db.session.add(SalesOpportunity(tenant_id=t, name=name, stage=stage,
                                        estimated_value=value, region_id=west["id"]))
    for days_ago, product, amount in ((3, "Knee System", 42000.0), (10, "Hip System", 38000.0),
                                      (21, "Knee System", 27000.0)):
        db.session.add(SalesTransaction(
            tenant_id=t, amount=amount, product_name=product, region_id=west["id"],
            transaction_date=(now - timedelta(days=days_ago)).replace(tzinfo=None),
        ))
    commit_or_raise("DemoData")

    summary = {"tenant_id": t, "created": True, "hospitals": 3, "surgeons": len(surgeons),
               "procedures": len(procedures), "cases": cases, "insights": len(_INSIGHTS)}
    logger.info("Demo tenant seeded", extra={"tenant_id": t})
    return summary
