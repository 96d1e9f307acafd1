"""
Error taxonomy for the portal.

Every failure a handler can report maps to one of these classes; the
exception handlers in app.main turn them into {"message": ...} responses
with the matching HTTP status.
"""


class PortalError(Exception):
    """Base class. Subclasses fix the HTTP status."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortalError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(PortalError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(PortalError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(PortalError):
    status_code = 404
    default_message = "Not found"


class Conflict(PortalError):
    status_code = 409
    default_message = "Conflict"


class PayloadTooLarge(PortalError):
    status_code = 413
    default_message = "Payload too large"


class InternalError(PortalError):
    status_code = 500
    default_message = "Server error"


class InvalidToken(Exception):
    """Raised by the token service; always reported as Unauthorized."""
