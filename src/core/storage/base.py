"""Blob storage abstraction for attachment bytes."""

from abc import ABC, abstractmethod


class BlobNotFoundError(FileNotFoundError):
    """Blob referenced by a location does not exist in the store."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"Blob not found: {location}")


class BlobStore(ABC):
    """
    Stores raw file bytes under generated names.

    A location returned by `put` is what gets persisted on the attachment row
    and is later handed back to `get` / `delete`.
    """

    @abstractmethod
    async def put(self, name: str, content: bytes) -> str:
        """Write bytes under `name` and return the blob location."""

    @abstractmethod
    async def get(self, location: str) -> bytes:
        """Read blob bytes. Raises BlobNotFoundError when absent."""

    @abstractmethod
    async def delete(self, location: str) -> bool:
        """Remove blob. Returns False if it was missing or could not be removed."""
