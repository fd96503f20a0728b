class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid."""


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""


class RecordingError(DomainError):
    """Raised when an attendance record could not be written."""


class DuplicateRecordError(RecordingError):
    """Raised by repositories when the (employee, date) key already exists."""


class CameraUnavailableError(DomainError):
    """Raised when the camera cannot be opened (missing device or permission)."""
