"""Blob store backed by an S3-compatible bucket (AWS S3, Cloudflare R2)."""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from src.core.storage.base import BlobNotFoundError, BlobStore

logger = logging.getLogger(__name__)


class S3BlobStore(BlobStore):
    """Blob location is the object key."""

    def __init__(
        self,
        bucket: str,
        endpoint_url: str | None,
        access_key: str | None,
        secret_key: str | None,
        region: str = "auto",
    ):
        self.bucket = bucket
        self.endpoint_url = endpoint_url
        self.access_key = access_key
        self.secret_key = secret_key
        self.region = region

    def _client(self):
        import aioboto3

        session = aioboto3.Session()
        return session.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=self.access_key,
            aws_secret_access_key=self.secret_key,
            region_name=self.region,
        )

    async def put(self, name: str, content: bytes) -> str:
        async with self._client() as s3:
            await s3.put_object(Bucket=self.bucket, Key=name, Body=content)
        return name

    async def get(self, location: str) -> bytes:
        async with self._client() as s3:
            try:
                response = await s3.get_object(Bucket=self.bucket, Key=location)
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                    raise BlobNotFoundError(location) from e
                raise
            async with response["Body"] as stream:
                return await stream.read()

    async def delete(self, location: str) -> bool:
        try:
            async with self._client() as s3:
                await s3.delete_object(Bucket=self.bucket, Key=location)
        except (BotoCoreError, ClientError) as e:
            logger.warning("Error deleting blob %s from bucket %s: %s", location, self.bucket, e)
            return False
        return True
