"""Pydantic schemas for attachments."""

from datetime import datetime

from src.shared.schemas import BaseSchema, MessageResponse


class AttachmentResponse(BaseSchema):
    """Attachment metadata, as returned after upload, get and list."""

    id: int
    bookmark_id: int
    filename: str
    original_name: str
    file_type: str
    file_size: int
    file_path: str
    created_at: datetime


class DeleteAttachmentResponse(MessageResponse):
    """Delete acknowledgement; blob cleanup is reported apart from the row deletion."""

    blob_deleted: bool
