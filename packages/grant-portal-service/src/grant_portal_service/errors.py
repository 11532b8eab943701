"""Error taxonomy shared by guards, handlers, and the REST error renderer."""

from __future__ import annotations


class PortalError(Exception):
    """Base for errors that map onto an HTTP status with a safe message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(PortalError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(PortalError):
    status_code = 403
    default_message = "Forbidden"


class InvalidInput(PortalError):
    status_code = 400
    default_message = "Invalid request"


class NotFound(PortalError):
    status_code = 404
    default_message = "Not found"


class UpstreamFailure(PortalError):
    status_code = 500
    default_message = "Upstream service failure"
