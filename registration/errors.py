from typing import Dict, Optional


class RegistrationError(Exception):
    """Root of every failure raised by the registration front-end."""


class ValidationError(RegistrationError):
    """
    Field-scoped rejection. errors = {field: message}

    The client-side validator only ever returns the mapping; this exception
    is raised when the backend refuses a payload.
    """

    def __init__(self, errors: Dict[str, str], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = errors
        self.message = message


class RemoteError(RegistrationError):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class NotFound(RemoteError):
    pass


class ServerError(RemoteError):
    pass


class NetworkError(RemoteError):
    pass


def describe(error: RegistrationError) -> str:
    """Human-readable notice for a failure caught at a controller boundary."""
    if isinstance(error, ValidationError):
        if error.errors:
            details = "; ".join(f"{k}: {v}" for k, v in sorted(error.errors.items()))
            return f"{error.message} ({details})"
        return error.message
    if isinstance(error, NotFound):
        return f"Registration not found: {error.message}"
    if isinstance(error, NetworkError):
        return f"Could not reach the server: {error.message}"
    if isinstance(error, RemoteError) and error.status is not None:
        return f"Server error ({error.status}): {error.message}"
    return str(error)
