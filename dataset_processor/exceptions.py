"""Custom exceptions for the dataset processor."""


class DatasetProcessorError(Exception):
    """Base exception for dataset processor errors."""
    pass


class ConfigurationError(DatasetProcessorError):
    """Raised when a configuration value cannot be parsed."""
    pass


class InvalidArgumentError(DatasetProcessorError, ValueError):
    """Raised when an operation is called with an unsupported argument (before any I/O)."""
    pass


class OperationError(DatasetProcessorError):
    """
    Raised when a batch operation stops part way through.

    Attributes:
        path: The file that was being processed when the operation failed.
        operation: Short name of the step that failed (e.g. "rename", "copy").
        completed: Number of groups fully processed before the failure.
    """

    def __init__(self, message: str, path=None, operation: str = "", completed: int = 0):
        super().__init__(message)
        self.path = path
        self.operation = operation
        self.completed = completed

    def __str__(self) -> str:
        msg = super().__str__()
        if self.path is not None:
            msg = f"{msg} ({self.operation}: {self.path})"
        return msg


class CollisionError(OperationError):
    """Raised when the destination file already exists."""
    pass


class IOFailure(OperationError):
    """Raised when the filesystem refuses a read, move or copy."""
    pass


class FormatError(OperationError, ValueError):
    """Raised when a base filename is not numeric where numeric ordering is required."""
    pass
