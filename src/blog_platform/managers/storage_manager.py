"""
# Storage Manager

Issues pre-signed S3 `put_object` URLs so the editor can upload banner and inline images
straight to the bucket. The server never sees image bytes.
"""

import time
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from blog_platform.config import settings
from blog_platform.managers.logging_manager import get_logger
from blog_platform.utils.errors import DependencyError
from blog_platform.utils.identifiers import SLUG_ALPHABET, SLUG_SUFFIX_LENGTH, random_suffix

logger = get_logger(prefix="[StorageManager]")

UPLOAD_CONTENT_TYPE: str = "image/jpeg"


class StorageManager:
    """Signs upload URLs for the configured bucket."""

    def __init__(self, client: Optional[Any] = None, bucket: Optional[str] = None,
                 expires_in: Optional[int] = None):
        self._client = client
        self.bucket = bucket or settings.UPLOAD_BUCKET
        self.expires_in = expires_in or settings.UPLOAD_URL_EXPIRES_SECONDS

    @property
    def client(self) -> Any:
        if self._client is None:
            secret = settings.AWS_SECRET_ACCESS_KEY.get_secret_value() if settings.AWS_SECRET_ACCESS_KEY else None
            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=secret,
            )
        return self._client

    @staticmethod
    def new_object_key() -> str:
        """`<random>-<epoch ms>.jpeg`"""
        return f"{random_suffix(SLUG_SUFFIX_LENGTH, SLUG_ALPHABET)}-{int(time.time() * 1000)}.jpeg"

    def generate_upload_url(self) -> str:
        key = self.new_object_key()
        try:
            url = self.client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self.bucket, "Key": key, "ContentType": UPLOAD_CONTENT_TYPE},
                ExpiresIn=self.expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to sign upload URL for %s: %s", key, e)
            raise DependencyError("Failed to generate upload URL") from e

        logger.debug("Signed upload URL for %s", key)
        return url
