"""
Resume Storage Service - hands uploaded files to the asset host.

Two backends, picked by settings.storage_type:
- local: writes under settings.upload_dir, served by app.main at /uploads
- s3:    boto3 put_object, returns the public HTTPS object URL

Both return the URL that gets stored on the student profile.
"""

import logging
import mimetypes
import uuid
from pathlib import Path

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings, get_settings
from app.core.errors import InternalError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"


def _unique_name(filename: str) -> str:
    safe = Path(filename).name.replace(" ", "_")
    return f"{uuid.uuid4().hex}_{safe}"


class LocalStorage:
    """Stores files on local disk."""

    def __init__(self, settings: Settings):
        self.root = Path(settings.upload_dir)
        self.base_url = settings.public_base_url.rstrip("/")

    def upload(self, content: bytes, filename: str, folder: str) -> str:
        key = f"{folder}/{_unique_name(filename)}"
        path = self.root / key
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            logger.error(f"Local upload failed for {filename}: {e}")
            raise InternalError("Upload failed") from e
        return f"{self.base_url}{UPLOAD_URL_PREFIX}/{key}"


class S3Storage:
    """Stores files in an S3 bucket."""

    def __init__(self, settings: Settings):
        self.bucket = settings.s3_bucket_name
        self.region = settings.aws_region
        self.client = boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id or None,
            aws_secret_access_key=settings.aws_secret_access_key or None,
            region_name=settings.aws_region
        )

    def upload(self, content: bytes, filename: str, folder: str) -> str:
        key = f"{folder}/{_unique_name(filename)}"
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed for {filename}: {e}")
            raise InternalError("Upload failed") from e
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"


def get_storage():
    """FastAPI dependency - storage backend for the configured storage_type."""
    settings = get_settings()
    if settings.storage_type.lower() == "s3":
        return S3Storage(settings)
    return LocalStorage(settings)
