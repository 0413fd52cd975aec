from src.shared.schemas.base import (
    BaseSchema,
    MessageResponse,
    ErrorResponse,
    ErrorDetail,
)

__all__ = [
    "BaseSchema",
    "MessageResponse",
    "ErrorResponse",
    "ErrorDetail",
]
