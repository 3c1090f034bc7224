"""Typed Errors for the Data-Access Core.

Every failure the repository reports is one of the classes below, so callers
(the API layer, workers) can match them exhaustively and map them to their
own transport-level responses.

Permanent errors will not resolve on retry:
- Referenced job or application does not exist
- Invalid input data
- Storage constraint violations (duplicates, missing references)

Recoverable errors are transient storage issues that may resolve on retry:
- Connection loss, timeouts, operational database failures
"""


class JobboardError(Exception):
    """Base exception for all data-access errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PermanentError(JobboardError):
    """Error that won't be resolved on retry."""
    pass


class RecoverableError(JobboardError):
    """Error that may be resolved on retry."""
    pass


class NotFoundError(PermanentError):
    """Referenced job or application does not exist."""

    def __init__(self, message: str, resource: str, identifier):
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class ValidationError(PermanentError):
    """Request data is invalid (empty update, bad filter, negative window)."""
    pass


class ConflictError(PermanentError):
    """Storage constraint violation (duplicate key, missing or dependent reference).

    ``reason`` is one of the ``ConflictReason`` values, or None when the
    violated constraint could not be classified.
    """

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason


class StorageError(RecoverableError):
    """Storage failure other than a constraint violation."""
    pass
