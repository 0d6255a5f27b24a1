"""
Typed domain errors for the Life in Weeks service.

Each error carries the HTTP status it maps to and a public message, so the
request boundary can turn any of them into a JSON error body without
inspecting the exception type.
"""


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.public_message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Snapshot store
# ---------------------------------------------------------------------------


class ValidationError(DomainError):
    """Write request carried no usable image payload."""

    status_code = 400
    public_message = "No image data provided"


class NotFoundError(DomainError):
    """Identifier is unknown or its snapshot has expired."""

    status_code = 404
    public_message = "Image not found"

    def __init__(self, snapshot_id: str = "", message: str = "") -> None:
        self.snapshot_id = snapshot_id
        super().__init__(message)


class InternalError(DomainError):
    """Unexpected failure while storing or serving a snapshot."""

    status_code = 500
    public_message = "Internal server error"
