"""Blob store backed by a local directory."""

import logging
from pathlib import Path

from src.core.storage.base import BlobNotFoundError, BlobStore

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """Keeps every blob as a file directly inside `root`."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def _resolve(self, location: str) -> Path:
        path = Path(location)
        if not path.is_absolute():
            path = self.root / path
        path = path.resolve()
        if path.parent != self.root:
            raise BlobNotFoundError(location)
        return path

    async def put(self, name: str, content: bytes) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        full_path = self._resolve(name)
        full_path.write_bytes(content)
        return str(full_path)

    async def get(self, location: str) -> bytes:
        path = self._resolve(location)
        if not path.is_file():
            raise BlobNotFoundError(location)
        return path.read_bytes()

    async def delete(self, location: str) -> bool:
        try:
            path = self._resolve(location)
            path.unlink()
        except FileNotFoundError:
            logger.warning("Blob %s already missing", location)
            return False
        except OSError as e:
            logger.warning("Error deleting blob %s: %s", location, e)
            return False
        return True
