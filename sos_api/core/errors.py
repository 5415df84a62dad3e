"""Service-layer errors. Each carries the HTTP status the front door answers with."""


class ServiceError(Exception):
    """Base for errors raised by the auth and data-entry services."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ClientInputError(ServiceError):
    """Missing, too short, too long, or suspicious input."""

    status_code = 400


class AuthenticationError(ServiceError):
    """Bad password, role mismatch, unknown user, or credentials that trip the injection check."""

    status_code = 401


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class DatabaseConfigError(Exception):
    """Raised when the store connection parameters are missing."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DatabaseNotInitializedError(RuntimeError):
    """Raised when the pool is requested before Database.connect() has run."""
