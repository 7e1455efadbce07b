"""
Blob Store

Uploads processed images to Cloudflare R2 through its S3-compatible API.
Keys are deterministic, so re-uploading a key overwrites the object.
"""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ImageError

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000, immutable"


class BlobStore:
    """S3-compatible object store with a public URL base."""

    def __init__(
        self,
        endpoint: str,
        bucket: str,
        public_url: str,
        access_key_id: str,
        secret_access_key: str,
        region: str = "auto",
        client=None,
    ):
        self.bucket = bucket
        self.public_base = public_url.rstrip("/")
        self.client = client or boto3.client(
            "s3",
            endpoint_url=endpoint,
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    @classmethod
    def from_settings(cls, settings) -> "BlobStore":
        return cls(
            endpoint=settings.r2_endpoint,
            bucket=settings.r2_bucket,
            public_url=settings.r2_public_url,
            access_key_id=settings.r2_access_key_id,
            secret_access_key=settings.r2_secret_access_key,
            region=settings.r2_region,
        )

    def put(self, key: str, data: bytes, content_type: str = "image/webp") -> None:
        """
        Upload bytes under key.

        Raises:
            ImageError: If the upload fails
        """
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl=CACHE_CONTROL,
            )
        except (BotoCoreError, ClientError) as e:
            raise ImageError(f"Upload failed for {key}: {e}") from e
        logger.debug("Uploaded %s (%d bytes)", key, len(data))

    def public_url(self, key: str) -> str:
        return f"{self.public_base}/{key}"
