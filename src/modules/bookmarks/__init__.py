from src.modules.bookmarks.models import Bookmark

__all__ = ["Bookmark"]
