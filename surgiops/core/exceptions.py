"""
Platform-wide exception hierarchy.

Services raise these types; blueprints (and the app-level handlers
registered in create_app) map them to HTTP status codes once, so every
endpoint answers the same way.

Usage:
    from surgiops.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Hospital", resource_id=42)
    raise ValidationError("name is required", details={"name": "required"})
"""


class NotFoundError(Exception):
    """Raised when a requested resource does not exist within the given scope.

    Used for BOTH genuinely missing records AND rows owned by another
    tenant, so a lookup never confirms that a foreign row exists.

    Args:
        resource: Human-readable model/entity name (e.g. "Hospital", "SurgeryCase").
        resource_id: The PK that was looked up. Included in logs, not in HTTP response.
        tenant_id: Optional - the scope that was enforced. For debug logging only.
    """

    def __init__(
        self,
        resource: str,
        resource_id: int | str | None = None,
        tenant_id: int | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.tenant_id = tenant_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        if tenant_id is not None:
            msg += f" (tenant={tenant_id})"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input fails business-rule validation in the service layer.

    The data was well-formed but violated a rule (inactive foreign
    reference, immutable field, unknown enum value).

    Maps to HTTP 422 in blueprint error handlers.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class FormValidationError(ValidationError):
    """Raised by a form controller when required fields are blank.

    Carries a single user-facing message; no per-field targeting.
    Maps to HTTP 400.
    """


class InvalidTransitionError(ValidationError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, resource: str, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            f"{resource} cannot move from '{current}' to '{requested}'",
            details={"current": current, "requested": requested},
        )


class ConflictError(Exception):
    """Raised when an operation would create a duplicate unique constraint violation.

    Maps to HTTP 409.

    Args:
        resource: Model name.
        field: The unique field that would be duplicated.
        value: The conflicting value.
        hint: Optional friendlier message for the UI.
    """

    def __init__(
        self,
        resource: str,
        field: str,
        value: str | None = None,
        hint: str | None = None,
    ) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        self.hint = hint
        msg = hint or f"{resource} with {field}={value!r} already exists"
        super().__init__(msg)


class ReferenceDataError(Exception):
    """Raised when any lookup collection fails to load.

    One aggregate error for the whole group; no partial result is returned.
    """

    def __init__(self, message: str = "Failed to load data. Please try again.",
                 failed: str | None = None) -> None:
        self.failed = failed
        super().__init__(message)


class InsightGenerationError(Exception):
    """Raised when the external insight generation function fails.

    Args:
        message: Friendly, user-facing explanation.
        raw: The original error text returned by the function or transport.
    """

    def __init__(self, message: str, raw: str | None = None) -> None:
        self.raw = raw
        super().__init__(message)
