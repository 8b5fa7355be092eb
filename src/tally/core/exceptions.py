"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class ConflictError(AppError):
    """Raised when an insert-only write collides with an existing record."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class StorageError(AppError):
    """Raised when the underlying database operation fails."""

    def __init__(self, message: str, code: str = "STORAGE_ERROR"):
        super().__init__(message, code=code)


class MigrationError(StorageError):
    """Raised when the schema cannot be brought to the latest version."""

    def __init__(self, message: str):
        super().__init__(message, code="MIGRATION_ERROR")
