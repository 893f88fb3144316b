"""Domain-specific exceptions, framework-independent."""


class ValidationError(Exception):
    """Raised when caller input is missing required fields or is malformed."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class JobNotReadyError(Exception):
    """Raised when a conversion job exists but has not completed yet."""

    def __init__(self, job_id: str, status: str):
        self.job_id = job_id
        self.status = status
        super().__init__(f"Conversion '{job_id}' is not completed (status: {status})")


class NoCompletedJobsError(Exception):
    """Raised when a batch has members but none of them has completed."""

    def __init__(self, batch_id: str):
        self.batch_id = batch_id
        super().__init__(f"No completed conversions in batch '{batch_id}'")


class StorageError(Exception):
    """Raised when the backing store is unreachable or a write fails."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Storage failure during {operation}{detail}")


class ConversionError(Exception):
    """Raised by a converter or when the terminal transition of a job cannot be written."""

    def __init__(self, job_id: str, message: str):
        self.job_id = job_id
        self.message = message
        super().__init__(f"Conversion '{job_id}' failed: {message}")


class ApiAccessError(Exception):
    """Raised when a metered API request is rejected.

    ``status_code`` carries the transport-level meaning (401 for bad
    credentials, 429 for an exhausted plan) so controllers can translate it
    without inspecting the message.
    """

    def __init__(self, status_code: int, message: str, details: dict | None = None):
        self.status_code = status_code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ApiServiceDisabledError(Exception):
    """Raised when API features are used while the admin has disabled them."""

    def __init__(self) -> None:
        super().__init__("API service is currently disabled by admin")


class FileTooLargeError(ValidationError):
    """Raised when an upload exceeds the configured size limit."""

    def __init__(self, filename: str, limit_bytes: int):
        self.filename = filename
        self.limit_bytes = limit_bytes
        super().__init__(
            f"File '{filename}' exceeds the {limit_bytes // (1024 * 1024)} MB limit",
            field="file",
        )
