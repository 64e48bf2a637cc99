"""
Form controller base.

A form holds a flat ``{field: str}`` mapping that is independent of the
row shape it edits. Conversion to a write payload happens once, in
``to_payload()``; the reverse (row → flat strings) in ``prefill()``.

Lifecycle:
    form.open_create()            # defaults, mode="create"
    form.open_edit(row)           # prefilled, mode="edit"
    form.open_view(row)           # prefilled, read-only
    form.update(name="St. Mary")  # user input
    result = form.submit(create=svc_create, update=svc_update)
    # success → closed and reset; failure → form.error set, still open

The JSON API reuses the same conversion through ``parse_payload()``.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from surgiops.core.exceptions import (
    ConflictError,
    FormValidationError,
    NotFoundError,
    ValidationError,
)
from surgiops.models import db
from surgiops.utils.helpers import describe_store_error

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "Please fill in all required fields"

MODE_CREATE = "create"
MODE_EDIT = "edit"
MODE_VIEW = "view"


@dataclass(frozen=True)
class Field:
    """One flat form field.

    kind: ``str`` (blank → None), ``int`` (FKs, counts) or ``float`` (currency).
    """

    name: str
    required: bool = False
    kind: str = "str"
    default: str = ""


def _blank(value) -> bool:
    return value is None or str(value).strip() == ""


def _convert(field: Field, raw):
    if _blank(raw):
        return None
    text = str(raw).strip()
    if field.kind == "int":
        try:
            return int(text)
        except ValueError as exc:
            raise FormValidationError(
                f"{field.name} must be a whole number", details={field.name: text},
            ) from exc
    if field.kind == "float":
        try:
            return float(text)
        except ValueError as exc:
            raise FormValidationError(
                f"{field.name} must be a number", details={field.name: text},
            ) from exc
    return text


class FormController:
    """Base class for every create/edit/view form."""

    resource = "Record"
    fields: tuple[Field, ...] = ()
    # payload key → ((json key, form field), ...); rebuilt only if any part is filled
    nested: dict[str, tuple[tuple[str, str], ...]] = {}

    def __init__(self):
        self.values: dict[str, str] = self.defaults()
        self.mode: str | None = None
        self.editing_id: int | None = None
        self.error: str | None = None
        self.saving = False

    # ── State ────────────────────────────────────────────────────────────

    @classmethod
    def defaults(cls) -> dict[str, str]:
        return {f.name: f.default for f in cls.fields}

    @property
    def is_open(self) -> bool:
        return self.mode is not None

    @property
    def read_only(self) -> bool:
        return self.mode == MODE_VIEW

    def open_create(self):
        self.values = self.defaults()
        self.mode = MODE_CREATE
        self.editing_id = None
        self.error = None

    def open_edit(self, row: dict):
        self.values = self.prefill(row)
        self.mode = MODE_EDIT
        self.editing_id = row.get("id")
        self.error = None

    def open_view(self, row: dict):
        self.values = self.prefill(row)
        self.mode = MODE_VIEW
        self.editing_id = row.get("id")
        self.error = None

    def close(self):
        self.values = self.defaults()
        self.mode = None
        self.editing_id = None
        self.error = None

    def update(self, **changes):
        """Apply user input. Unknown keys are ignored."""
        if self.read_only:
            return
        for name, value in changes.items():
            if name in self.values:
                self.values[name] = "" if value is None else str(value)

    # ── Conversion ───────────────────────────────────────────────────────

    def validate(self):
        """Fail fast on the first blank required field; one message for all."""
        for field in self.fields:
            if field.required and _blank(self.values.get(field.name)):
                raise FormValidationError(REQUIRED_MESSAGE)

    def to_payload(self) -> dict:
        nested_fields = {name for parts in self.nested.values() for _, name in parts}
        payload = {}
        for field in self.fields:
            if field.name in nested_fields:
                continue
            payload[field.name] = _convert(field, self.values.get(field.name))
        for key, parts in self.nested.items():
            group = {json_key: (self.values.get(name) or "").strip() for json_key, name in parts}
            payload[key] = group if any(group.values()) else None
        return payload

    def prefill(self, row: dict) -> dict[str, str]:
        """Decompose a stored row back into flat string values."""
        values = self.defaults()
        for field in self.fields:
            if field.name in row and row[field.name] is not None:
                values[field.name] = str(row[field.name])
        for key, parts in self.nested.items():
            group = row.get(key) or {}
            for json_key, name in parts:
                values[name] = str(group.get(json_key) or "")
        return values

    @classmethod
    def parse_payload(cls, data: dict | None) -> dict:
        """Validate and convert a flat mapping in one step (JSON API path)."""
        form = cls()
        form.open_create()
        form.update(**{k: v for k, v in (data or {}).items() if isinstance(k, str)})
        form.validate()
        return form.to_payload()

    # ── Submit ───────────────────────────────────────────────────────────

    def submit(self, *, create, update):
        """Validate, convert and persist through the given callables.

        create(payload) is used in create mode, update(id, payload) in edit
        mode. Returns the persisted row, or None when nothing was written.
        """
        if self.saving or self.mode not in (MODE_CREATE, MODE_EDIT):
            return None

        try:
            self.validate()
            payload = self.to_payload()
        except ValidationError as exc:
            self.error = str(exc)
            return None

        self.saving = True
        try:
            if self.mode == MODE_CREATE:
                result = create(payload)
            else:
                result = update(self.editing_id, payload)
        except (ValidationError, NotFoundError, ConflictError) as exc:
            db.session.rollback()
            logger.warning("%s save failed: %s", self.resource, exc)
            self.error = str(exc)
            return None
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.exception("%s save failed", self.resource)
            self.error = describe_store_error(exc, fallback=f"Failed to save {self.resource.lower()}")
            return None
        finally:
            self.saving = False

        self.close()
        return result
