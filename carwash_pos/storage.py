"""
Blob storage for payment proofs.

Objects go to a Supabase Storage bucket through its S3-compatible endpoint and
are served back through the bucket's public URL.
"""

import asyncio
import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import (
    STORAGE_ACCESS_KEY_ID,
    STORAGE_PUBLIC_URL,
    STORAGE_REGION,
    STORAGE_S3_ENDPOINT,
    STORAGE_SECRET_ACCESS_KEY,
    SUPABASE_BUCKET,
)
from .exceptions import UpstreamUnavailable

logger = logging.getLogger(__name__)


def get_storage_client():
    """Create and return an S3 client for Supabase Storage."""
    return boto3.client(
        "s3",
        endpoint_url=STORAGE_S3_ENDPOINT,
        aws_access_key_id=STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=STORAGE_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        region_name=STORAGE_REGION,
    )


class BlobStore:
    """Put objects into a public bucket and hand back their public URL"""

    def __init__(
        self,
        client=None,
        bucket: str = SUPABASE_BUCKET,
        public_base_url: str = STORAGE_PUBLIC_URL,
    ):
        self._client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def client(self):
        if self._client is None:
            self._client = get_storage_client()
        return self._client

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{self.bucket}/{key}"

    def _put(self, key: str, body: bytes, content_type: str) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    async def put(self, key: str, body: bytes, content_type: str) -> str:
        """Upload bytes under key; returns the public URL"""
        try:
            await asyncio.to_thread(self._put, key, body, content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Failed to upload {key} to bucket {self.bucket}: {e}")
            raise UpstreamUnavailable("Failed to upload payment proof") from e

        url = self.public_url(key)
        logger.info(f"✅ Uploaded {key} ({len(body)} bytes) to bucket {self.bucket}")
        return url


_blob_store: Optional[BlobStore] = None


def get_blob_store() -> BlobStore:
    global _blob_store
    if _blob_store is None:
        _blob_store = BlobStore()
    return _blob_store
