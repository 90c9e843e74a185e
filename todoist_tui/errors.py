"""
Exception classes for the client.

Background operations raise these; the command runner turns them into
OperationFailed messages and the controller decides how to show them.
"""


class TodoistTuiError(Exception):
    """Base exception for all client errors."""


class ConfigurationError(TodoistTuiError):
    """Startup configuration is unusable (missing credential, bad column)."""


class ServiceError(TodoistTuiError):
    """Transport failure, timeout or non-success response from the service."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ResponseShapeError(ServiceError):
    """Response body could not be decoded or did not match its schema."""


class CacheError(TodoistTuiError):
    """Local snapshot could not be read or written."""
