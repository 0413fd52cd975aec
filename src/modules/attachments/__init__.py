from src.modules.attachments.models import Attachment
from src.modules.attachments.service import AttachmentService
from src.modules.attachments.router import router

__all__ = [
    "Attachment",
    "AttachmentService",
    "router",
]
