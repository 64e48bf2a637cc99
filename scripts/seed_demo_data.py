#!/usr/bin/env python3
"""
SurgiOps: Demo Data Seed Script.

Creates one demo tenant (hospitals, surgeons, procedures, teams, a week of
booked cases, insights and sales rows).

Usage:
    python scripts/seed_demo_data.py
    python scripts/seed_demo_data.py --slug acme-ortho
"""

import argparse
import logging

from surgiops import create_app
from surgiops.models import db
from surgiops.services.demo_seed import DEMO_SLUG, seed_demo_tenant

logger = logging.getLogger("seed_demo_data")


def main():
    parser = argparse.ArgumentParser(description="Seed a SurgiOps demo tenant")
    parser.add_argument("--slug", default=DEMO_SLUG, help="tenant slug (idempotent)")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        db.create_all()
        summary = seed_demo_tenant(slug=args.slug)
    logger.info("DB: %s", app.config["SQLALCHEMY_DATABASE_URI"])
    logger.info("Seed summary: %s", summary)


if __name__ == "__main__":
    main()
