"""
Service-layer errors. Request handlers map them to HTTP status codes
(NotFound -> 404, PermissionDenied -> 403, ValidationFailed -> 400, Conflict -> 409).
"""


class ServiceError(Exception):
    """Base class for errors raised by owner-facing services."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    pass


class PermissionDeniedError(ServiceError):
    pass


class ValidationFailedError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass
