"""Typed service errors. Routes let them propagate; main.py renders them as JSON."""


class TuneshareError(Exception):
    """Base error with a user-facing message and the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(TuneshareError):
    """Bad or missing input."""

    status_code = 422


class ConflictError(TuneshareError):
    """Duplicate username/email, or an unrecoverable edge conflict."""

    status_code = 409


class AuthenticationError(TuneshareError):
    """Bad credentials or missing/expired session."""

    status_code = 401


class AuthorizationError(TuneshareError):
    """Acting identity lacks rights over the target resource."""

    status_code = 403


class NotFoundError(TuneshareError):
    status_code = 404


class VerificationError(TuneshareError):
    """Verification code mismatched or expired."""

    status_code = 400


class DependencyError(TuneshareError):
    """Email or media collaborator failure."""

    status_code = 502


class InternalError(TuneshareError):
    status_code = 500
