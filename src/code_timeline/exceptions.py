"""Custom exceptions for code-timeline."""


class NotFoundError(Exception):
    """Raised when a requested snapshot is not found."""

    pass


class ValidationError(Exception):
    """Raised when validation fails."""

    pass


class StorageError(Exception):
    """Raised when the history file cannot be written."""

    pass


class RestoreTargetUnavailableError(Exception):
    """Raised when the file to restore cannot be opened for writing."""

    pass
