"""
Taskboard Custom Exceptions

Error taxonomy shared by services and routes. Every exception carries the
HTTP status code the API layer renders it with.
"""


class TaskboardError(Exception):
    """Base exception for Taskboard."""
    status_code = 500

    def __init__(self, message: str = 'An internal error occurred', status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidInput(TaskboardError):
    """Raised when a request body is malformed or missing fields."""
    status_code = 400

    def __init__(self, message: str = 'Invalid input', status_code: int = None):
        super().__init__(message, status_code)


class Conflict(TaskboardError):
    """Raised when a record with the same unique key already exists."""
    status_code = 400

    def __init__(self, message: str = 'Already exists', status_code: int = None):
        super().__init__(message, status_code)


class InvalidCredentials(TaskboardError):
    """Raised when a password does not match."""
    status_code = 400

    def __init__(self, message: str = 'Incorrect password', status_code: int = None):
        super().__init__(message, status_code)


class Unauthenticated(TaskboardError):
    """Raised when a protected route is called without a session token."""
    status_code = 401

    def __init__(self, message: str = 'Authentication required', status_code: int = None):
        super().__init__(message, status_code)


class Forbidden(TaskboardError):
    """Raised on a bad session token or an ownership mismatch."""
    status_code = 403

    def __init__(self, message: str = 'Permission denied', status_code: int = None):
        super().__init__(message, status_code)


class TokenExpired(Forbidden):
    """Raised when a token signature is valid but its lifetime has passed."""

    def __init__(self, message: str = 'Session expired', status_code: int = None):
        super().__init__(message, status_code)


class TokenInvalid(Forbidden):
    """Raised when a token is malformed or its signature does not verify."""

    def __init__(self, message: str = 'Invalid session token', status_code: int = None):
        super().__init__(message, status_code)


class NotFound(TaskboardError):
    """Raised when an entity does not exist (or is not visible to the caller)."""
    status_code = 404

    def __init__(self, message: str = 'Not found', status_code: int = None):
        super().__init__(message, status_code)


class InternalError(TaskboardError):
    """Raised when the record store fails."""
    status_code = 500


class ConfigurationError(TaskboardError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str):
        super().__init__(f"Configuration error: {message}")
