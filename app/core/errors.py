"""
Error taxonomy shared by the store, the services and the HTTP layer.

Every error carries a human readable ``message`` and the HTTP status it
maps to. ``app.main`` turns any ``AppError`` into ``{"error": message}``.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or missing input."""
    status_code = 400


class ConflictError(AppError):
    status_code = 409


class AlreadyExistsError(ConflictError):
    """Raised by the store when a unique key is already taken."""


class UnauthorizedError(AppError):
    status_code = 401


class InvalidTokenError(UnauthorizedError):
    """Bad signature, unexpected algorithm, missing claim, or outside the validity window."""


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class InternalError(AppError):
    """Hashing or signing backend failure."""
    status_code = 500
