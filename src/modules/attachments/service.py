"""Service for uploading, serving and deleting bookmark attachments."""

import io
import logging
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from botocore.exceptions import BotoCoreError, ClientError
from starlette.datastructures import UploadFile
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import InvalidFileTypeError, NotFoundError, StorageError, ValidationError
from src.core.storage import BlobNotFoundError, BlobStore
from src.modules.attachments.models import Attachment
from src.modules.bookmarks.models import Bookmark

logger = logging.getLogger(__name__)

# Matched as substrings of the extension or of the MIME type
ALLOWED_FILE_TYPES = (
    "jpeg", "jpg", "png", "gif", "webp", "pdf", "txt", "doc", "docx", "xls", "xlsx", "zip",
)
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB

_BLOB_ERRORS = (OSError, BotoCoreError, ClientError)


def is_allowed_file_type(original_name: str, content_type: str | None) -> bool:
    """True if the extension OR the MIME type mentions an allowed type."""
    ext = Path(original_name).suffix.lower()
    mime = (content_type or "").lower()
    return any(t in ext for t in ALLOWED_FILE_TYPES) or any(t in mime for t in ALLOWED_FILE_TYPES)


def generate_storage_name(original_name: str) -> str:
    """`<epoch millis>-<random>` plus the original extension. The client name is never used as a path."""
    ext = re.sub(r"[^a-z0-9]", "", Path(original_name).suffix.lower())[:20]
    unique = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return f"{unique}.{ext}" if ext else unique


@dataclass
class AttachmentFile:
    """Blob contents ready to be streamed back."""

    attachment: Attachment
    stream: BinaryIO
    media_type: str


@dataclass
class DeleteResult:
    attachment_id: int
    blob_deleted: bool


class AttachmentService:
    """Attachment lifecycle for bookmarks: list, upload, download, delete."""

    def __init__(self, session: AsyncSession, blob_store: BlobStore, max_file_size: int = MAX_FILE_SIZE):
        self.session = session
        self.blob_store = blob_store
        self.max_file_size = max_file_size

    async def list_by_bookmark(self, bookmark_id: int) -> list[Attachment]:
        """Attachments of a bookmark, newest first. Unknown bookmarks just yield an empty list."""
        stmt = (
            select(Attachment)
            .where(Attachment.bookmark_id == bookmark_id)
            .order_by(Attachment.created_at.desc(), Attachment.id.desc())
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not list attachments: {e}") from e
        return list(result.scalars().all())

    async def get_attachment(self, attachment_id: int) -> Attachment:
        result = await self.session.execute(select(Attachment).where(Attachment.id == attachment_id))
        attachment = result.scalar_one_or_none()
        if not attachment:
            raise NotFoundError("Attachment", attachment_id)
        return attachment

    async def upload(self, bookmark_id: int, file: UploadFile | str | None) -> Attachment:
        """
        Validate an uploaded file, store its bytes and create the Attachment row.

        Checks run in order: file present, size, type allow-list, bookmark
        exists. Nothing is written before all checks pass. A form field that
        is not a file counts as no file. The row is committed here; if the
        insert or commit fails after the blob was written, the blob is
        removed again.
        """
        if not isinstance(file, UploadFile) or not file.filename or not file.filename.strip():
            raise ValidationError("No file uploaded", field="file")

        max_mb = self.max_file_size // (1024 * 1024)
        if file.size is not None and file.size > self.max_file_size:
            raise ValidationError(f"File size must not exceed {max_mb} MB", field="file")

        original_name = file.filename[:255]
        content_type = file.content_type or "application/octet-stream"
        if not is_allowed_file_type(original_name, file.content_type):
            raise InvalidFileTypeError(original_name, file.content_type or "")

        # Declared size may be missing or wrong; cap what we read
        content = await file.read(self.max_file_size + 1)
        if len(content) > self.max_file_size:
            raise ValidationError(f"File size must not exceed {max_mb} MB", field="file")

        bookmark = await self.session.get(Bookmark, bookmark_id)
        if not bookmark:
            raise NotFoundError("Bookmark", bookmark_id)

        storage_name = generate_storage_name(original_name)
        try:
            location = await self.blob_store.put(storage_name, content)
        except _BLOB_ERRORS as e:
            raise StorageError(f"Could not store file: {e}") from e

        attachment = Attachment(
            bookmark_id=bookmark_id,
            filename=storage_name,
            original_name=original_name,
            file_type=content_type[:100],
            file_size=len(content),
            file_path=location,
        )
        try:
            self.session.add(attachment)
            await self.session.flush()
            await self.session.refresh(attachment)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            await self.blob_store.delete(location)
            raise StorageError(f"Could not save attachment: {e}") from e

        logger.info(
            "Stored attachment %s for bookmark %s (%s, %d bytes)",
            attachment.id, bookmark_id, storage_name, attachment.file_size,
        )
        return attachment

    async def get_file(self, attachment_id: int) -> AttachmentFile:
        """Open the blob of an attachment for download."""
        attachment = await self.get_attachment(attachment_id)
        try:
            content = await self.blob_store.get(attachment.file_path)
        except BlobNotFoundError as e:
            logger.warning("Attachment %s references missing blob %s", attachment.id, attachment.file_path)
            raise NotFoundError("File") from e
        except _BLOB_ERRORS as e:
            raise StorageError(f"Could not read file: {e}") from e
        return AttachmentFile(
            attachment=attachment,
            stream=io.BytesIO(content),
            media_type=attachment.file_type,
        )

    async def delete(self, attachment_id: int) -> DeleteResult:
        """
        Delete the row, then the blob.

        The row deletion is committed before the blob is touched; a failed
        blob removal is logged and reported in the result, never raised.
        """
        attachment = await self.get_attachment(attachment_id)
        location = attachment.file_path

        try:
            await self.session.delete(attachment)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(f"Could not delete attachment: {e}") from e

        blob_deleted = await self.blob_store.delete(location)
        if not blob_deleted:
            logger.warning("Attachment %s deleted but blob %s was not removed", attachment_id, location)
        else:
            logger.info("Deleted attachment %s and blob %s", attachment_id, location)
        return DeleteResult(attachment_id=attachment_id, blob_deleted=blob_deleted)
