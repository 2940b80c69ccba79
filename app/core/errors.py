"""Error taxonomy raised by services and mapped to HTTP responses by the API layer."""


class AppError(Exception):
    """Base for expected failures; carries a client-safe message and an HTTP status."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400


class AuthenticationError(AppError):
    """Missing, malformed, expired or revoked token; bad credentials."""

    status_code = 401


class AuthorizationError(AppError):
    """Authenticated but not permitted: role, ownership, deletion rules, approval, lockout."""

    status_code = 403


class NotFoundError(AppError):
    """Unknown account or record id."""

    status_code = 404


class ConflictError(AppError):
    """Unique constraint violation (duplicate email or username)."""

    status_code = 409


class IntegrityError(AppError):
    """Operation blocked by dependent records."""

    status_code = 400


class ServerError(AppError):
    """Unclassified failure; the message shown to clients stays generic."""

    status_code = 500
