"""Google Cloud Storage implementation of the image storage gateway."""

import logging
from typing import Optional

from google.cloud import storage

from guideimg.config import settings

from .base import ImageStorage

logger = logging.getLogger(__name__)


class GCSImageStorage(ImageStorage):
    """Stores images as objects in a GCS bucket."""

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        client: Optional[storage.Client] = None,
    ):
        """Initialize the gateway.

        Args:
            bucket_name: Bucket to use (default from settings)
            client: Storage client (default: application credentials)
        """
        bucket_name = bucket_name or settings.storage_bucket
        if not bucket_name:
            raise ValueError("A storage bucket name is required")

        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)

    def delete_by_prefix(self, prefix: str) -> int:
        deleted = 0
        for blob in self.client.list_blobs(self.bucket, prefix=prefix):
            blob.delete()
            deleted += 1
        logger.info("Deleted %d object(s) at gs://%s/%s", deleted, self.bucket.name, prefix)
        return deleted

    def save(
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        blob = self.bucket.blob(path)
        blob.cache_control = cache_control
        if metadata:
            blob.metadata = metadata
        blob.upload_from_string(data, content_type=content_type)

    def make_public(self, path: str) -> str:
        self.bucket.blob(path).make_public()
        return f"https://storage.googleapis.com/{self.bucket.name}/{path}"
