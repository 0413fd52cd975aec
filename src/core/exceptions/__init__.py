from src.core.exceptions.base import (
    AppException,
    NotFoundError,
    ValidationError,
    InvalidFileTypeError,
    StorageError,
)

__all__ = [
    "AppException",
    "NotFoundError",
    "ValidationError",
    "InvalidFileTypeError",
    "StorageError",
]
