from src.core.config import settings
from src.core.storage.base import BlobStore
from src.core.storage.local import LocalBlobStore
from src.core.storage.s3 import S3BlobStore


def get_blob_store() -> BlobStore:
    """Dependency for the configured blob store: S3/R2 when configured, local folder otherwise."""
    if settings.use_s3:
        return S3BlobStore(
            bucket=settings.s3_bucket,
            endpoint_url=settings.s3_endpoint_url,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
            region=settings.s3_region,
        )
    return LocalBlobStore(settings.storage_path)
