from src.core.storage.base import BlobNotFoundError, BlobStore
from src.core.storage.dependencies import get_blob_store
from src.core.storage.local import LocalBlobStore
from src.core.storage.s3 import S3BlobStore

__all__ = ["BlobNotFoundError", "BlobStore", "LocalBlobStore", "S3BlobStore", "get_blob_store"]
