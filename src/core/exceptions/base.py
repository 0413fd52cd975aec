from typing import Any


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} with id={identifier} not found"
        self.resource = resource
        super().__init__(message=message, status_code=404, details={"resource": resource})


class ValidationError(AppException):
    """Rejected input (missing file, oversized file, ...)."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message=message, status_code=400, details=details)


class InvalidFileTypeError(ValidationError):
    """Neither the file extension nor its MIME type is allowed."""

    def __init__(self, original_name: str, content_type: str):
        self.original_name = original_name
        self.content_type = content_type
        super().__init__(
            message=f"Invalid file type: {original_name} ({content_type or 'unknown'}). "
            "Only images and documents are allowed.",
            field="file",
        )


class StorageError(AppException):
    """Database or blob storage failure."""

    def __init__(self, message: str = "Storage error"):
        super().__init__(message=message, status_code=500)
