"""
Platform-wide exception hierarchy.

Services raise these types; the app factory registers one JSON handler per
type so every blueprint answers with the same status codes.

Usage:
    from billing.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Project", resource_id=project_uuid)
    raise ValidationError("begin_date must not be after end_date",
                          details={"end_date": "before begin_date"})
"""


class NotFoundError(Exception):
    """Raised when a referenced record does not exist.

    Maps to HTTP 404.

    Args:
        resource: Human-readable entity name (e.g. "Project", "Role").
        resource_id: The key that was looked up. Logged, echoed in the message.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input is well-formed JSON but violates a business rule.

    Covers unknown task/transaction kinds, inverted date ranges, missing
    kind-specific fields and unparseable currency strings.

    Maps to HTTP 422.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown, keyed by field name.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class AuthorizationError(Exception):
    """Raised when the caller's role lacks the capability an operation needs.

    Maps to HTTP 403.

    Args:
        capability: The missing capability ("admin", "project", ...), if any.
        message: Optional override for the response message.
    """

    def __init__(self, capability: str | None = None, message: str | None = None) -> None:
        self.capability = capability
        if message is None:
            message = "Permission denied"
            if capability:
                message += f": '{capability}' capability required"
        super().__init__(message)


class ConflictError(Exception):
    """Raised when an operation would duplicate a unique field.

    Maps to HTTP 409.

    Args:
        resource: Model name.
        field: The unique field that would be duplicated.
        value: The conflicting value.
    """

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        msg = f"{resource} with {field}={value!r} already exists"
        super().__init__(msg)
