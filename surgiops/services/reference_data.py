"""
Reference-data loader.

Reads the lookup collections a tab needs before it can render a form
(regions, hospitals, surgeons, procedures, ...). The collections are read
one after another in the request's session and succeed or fail together:
if any read fails the caller gets a single ReferenceDataError and no
partial mapping.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from surgiops.core.exceptions import ReferenceDataError
from surgiops.models import db
from surgiops.services import hospital_service, setup_service, team_service

logger = logging.getLogger(__name__)

LOADERS = {
    "regions": setup_service.list_regions,
    "hospital_systems": hospital_service.list_hospital_systems,
    "hospitals": hospital_service.list_hospitals,
    "surgeons": setup_service.list_surgeons,
    "procedures": setup_service.list_procedures,
    "rep_teams": team_service.list_rep_teams,
    "territories": team_service.list_territories,
}

DEFAULT_COLLECTIONS = ("regions", "hospitals", "surgeons", "procedures")


def load_reference_data(tenant_id: int, collections=DEFAULT_COLLECTIONS) -> dict[str, list[dict]]:
    """Load every requested lookup collection (active rows, display order).

    Raises:
        ValueError: an unknown collection name was requested.
        ReferenceDataError: any collection failed to load.
    """
    names = list(dict.fromkeys(collections))
    unknown = [n for n in names if n not in LOADERS]
    if unknown:
        raise ValueError(f"Unknown reference collection(s): {', '.join(unknown)}")

    result: dict[str, list[dict]] = {}
    for name in names:
        try:
            result[name] = LOADERS[name](tenant_id)
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("Reference data load failed: %s (%s)", name, exc,
                         extra={"tenant_id": tenant_id})
            raise ReferenceDataError(failed=name) from exc

    logger.debug("Reference data loaded: %s", {k: len(v) for k, v in result.items()},
                 extra={"tenant_id": tenant_id})
    return result
