"""Superset-specific exceptions for error handling."""


class SupersetError(Exception):
    """Base exception for all Superset operations."""
    pass


class AuthError(SupersetError):
    """Login or CSRF token acquisition failed."""
    pass


class HTTPStatusError(SupersetError):
    """Unexpected HTTP status from the Superset REST API.

    Attributes:
        status_code: HTTP status code
        operation: Client operation that failed (e.g. "create_user")
        message: Response body text
        endpoint: URL that was called
    """

    def __init__(self, status_code: int, operation: str, message: str = "", endpoint: str = ""):
        self.status_code = status_code
        self.operation = operation
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"{operation} failed, status code: {status_code} [{endpoint}]: {message}")


class DecodeError(SupersetError):
    """Response body was not JSON or lacked an expected field."""
    pass


class NotFoundError(SupersetError):
    """Lookup returned zero results."""
    pass


class RoleNotFoundError(NotFoundError):
    """No role with the requested name exists."""
    pass
