"""
Tab controllers: the state one console tab holds between user actions.

A tab owns its loaded collections, the reference lookups its forms need,
an open form (if any) and one error string. Local state changes only after
a write succeeded:

    create  → the returned row is prepended
    edit    → the collection is reloaded
    delete  → the row is dropped locally (the store only flips is_active)

Controllers call the services in-process and need an application context.
"""

import logging
from functools import partial

from sqlalchemy.exc import SQLAlchemyError

from surgiops.core.exceptions import NotFoundError, ReferenceDataError
from surgiops.forms.base import MODE_CREATE
from surgiops.models import db
from surgiops.services.reference_data import load_reference_data

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load data. Please try again."


class EntitySection:
    """One list of rows plus the form that edits them."""

    def __init__(self, form, *, fetch, create, update, delete=None):
        self.form = form
        self.items: list[dict] = []
        self.error: str | None = None
        self._fetch = fetch
        self._create = create
        self._update = update
        self._delete = delete

    def reload(self):
        self.items = self._fetch()

    def find(self, row_id: int) -> dict | None:
        return next((r for r in self.items if r["id"] == row_id), None)

    def open_create(self):
        self.form.open_create()

    def open_edit(self, row: dict):
        self.form.open_edit(row)

    def open_view(self, row: dict):
        self.form.open_view(row)

    def close(self):
        self.form.close()

    def submit(self) -> dict | None:
        creating = self.form.mode == MODE_CREATE
        row = self.form.submit(create=self._create, update=self._update)
        if row is None:
            return None
        if creating:
            self.items.insert(0, row)
        else:
            try:
                self.reload()
            except SQLAlchemyError:
                db.session.rollback()
                logger.exception("Reload after edit failed")
                self.error = LOAD_FAILED_MESSAGE
        return row

    def delete(self, row_id: int) -> bool:
        if self._delete is None:
            self.error = "This record cannot be deleted."
            return False
        try:
            self._delete(row_id)
        except NotFoundError as exc:
            logger.warning("Delete failed: %s", exc)
            self.error = str(exc)
            return False
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Delete failed for id=%s", row_id)
            self.error = "Failed to delete record. Please try again."
            return False
        self.items = [r for r in self.items if r["id"] != row_id]
        self.error = None
        return True


class TabController:
    """Base class: reference data + one or more entity sections."""

    reference_collections: tuple[str, ...] = ()
    load_failed_message = LOAD_FAILED_MESSAGE

    def __init__(self, tenant_id: int, user_id: int | None = None):
        self.tenant_id = tenant_id
        self.user_id = user_id
        self.reference: dict[str, list[dict]] = {}
        self.loading = False
        self.error: str | None = None

    def section(self, form, *, fetch, create, update, delete=None) -> EntitySection:
        """Bind tenant/user scope onto service functions."""
        t, u = self.tenant_id, self.user_id
        return EntitySection(
            form,
            fetch=partial(fetch, t),
            create=lambda payload: create(t, payload, user_id=u),
            update=lambda pk, payload: update(t, pk, payload, user_id=u),
            delete=(lambda pk: delete(t, pk, user_id=u)) if delete else None,
        )

    def fetch(self):
        """Load the tab's primary collections. Subclasses override."""

    def load(self):
        self.loading = True
        try:
            if self.reference_collections:
                self.reference = load_reference_data(self.tenant_id, self.reference_collections)
            self.fetch()
            self.error = None
        except ReferenceDataError as exc:
            self.error = str(exc)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Tab load failed", extra={"tenant_id": self.tenant_id})
            self.error = self.load_failed_message
        finally:
            self.loading = False
        return self

    def retry(self):
        return self.load()
