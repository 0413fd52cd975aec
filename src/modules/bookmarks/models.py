from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import BaseModel


class Bookmark(BaseModel):
    """
    Saved link that attachments hang off.

    Managed by the bookmarks application; this service only checks that a
    bookmark exists before accepting an upload for it.
    """

    __tablename__ = "bookmarks"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(2000), nullable=False)
