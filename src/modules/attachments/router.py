"""API for listing, uploading, downloading and deleting bookmark attachments."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.database.session import get_db
from src.core.storage import BlobStore, get_blob_store
from src.modules.attachments.schemas import AttachmentResponse, DeleteAttachmentResponse
from src.modules.attachments.service import AttachmentService

router = APIRouter(prefix="/attachments", tags=["Attachments"])


def get_attachment_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
) -> AttachmentService:
    return AttachmentService(db, blob_store, max_file_size=settings.max_upload_size)


@router.get("/bookmark/{bookmark_id}", response_model=list[AttachmentResponse])
async def list_bookmark_attachments(
    bookmark_id: int,
    service: AttachmentService = Depends(get_attachment_service),
):
    """List attachments of a bookmark, newest first."""
    attachments = await service.list_by_bookmark(bookmark_id)
    return [AttachmentResponse.model_validate(a) for a in attachments]


@router.post(
    "/bookmark/{bookmark_id}",
    response_model=AttachmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_attachment(
    bookmark_id: int,
    file: UploadFile | str | None = File(None),
    service: AttachmentService = Depends(get_attachment_service),
):
    """Upload a file (multipart field `file`) for a bookmark. Images and documents only, max 10 MB."""
    attachment = await service.upload(bookmark_id, file)
    return AttachmentResponse.model_validate(attachment)


@router.get("/{attachment_id}", response_model=AttachmentResponse)
async def get_attachment_info(
    attachment_id: int,
    service: AttachmentService = Depends(get_attachment_service),
):
    """Get attachment metadata."""
    attachment = await service.get_attachment(attachment_id)
    return AttachmentResponse.model_validate(attachment)


@router.get("/{attachment_id}/file")
async def download_attachment(
    attachment_id: int,
    service: AttachmentService = Depends(get_attachment_service),
):
    """Download the attachment bytes with its stored content type."""
    attachment_file = await service.get_file(attachment_id)
    filename = quote(attachment_file.attachment.original_name)
    return StreamingResponse(
        attachment_file.stream,
        media_type=attachment_file.media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{filename}"},
    )


@router.delete("/{attachment_id}", response_model=DeleteAttachmentResponse)
async def delete_attachment(
    attachment_id: int,
    service: AttachmentService = Depends(get_attachment_service),
):
    """Delete an attachment row and its file."""
    result = await service.delete(attachment_id)
    return DeleteAttachmentResponse(
        message="Attachment deleted successfully",
        blob_deleted=result.blob_deleted,
    )
