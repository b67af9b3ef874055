import logging
import os
import asyncio
from datetime import timedelta

import google.auth
from google.auth import impersonated_credentials
from google.cloud import storage
from fastapi import UploadFile

from cyf_blog.core.config import settings

# Configure logging
logger = logging.getLogger(__name__)


class StorageNotConfigured(RuntimeError):
    pass


class GcsStorage:
    """Avatar storage in a Google Cloud Storage bucket. The client is created on first use."""

    def __init__(self):
        self.storage_client: storage.Client | None = None
        self.bucket: storage.bucket.Bucket | None = None

    def _initialize_client(self):
        if not settings.GCS_BUCKET_NAME:
            raise StorageNotConfigured("GCS_BUCKET_NAME is not configured")

        if settings.GOOGLE_APPLICATION_CREDENTIALS and os.path.exists(settings.GOOGLE_APPLICATION_CREDENTIALS):
            logger.info(f"Initializing GCS client from service account file: {settings.GOOGLE_APPLICATION_CREDENTIALS}")
            self.storage_client = storage.Client.from_service_account_json(
                settings.GOOGLE_APPLICATION_CREDENTIALS
            )
        elif settings.TARGET_SERVICE_ACCOUNT_EMAIL:
            logger.info(f"Impersonating service account: {settings.TARGET_SERVICE_ACCOUNT_EMAIL}")
            source_credentials, project_id = google.auth.default()
            scoped_credentials = impersonated_credentials.Credentials(
                source_credentials=source_credentials,
                target_principal=settings.TARGET_SERVICE_ACCOUNT_EMAIL,
                target_scopes=['https://www.googleapis.com/auth/devstorage.read_write'],
                lifetime=3600,
            )
            self.storage_client = storage.Client(credentials=scoped_credentials, project=project_id)
        else:
            logger.info("Using Application Default Credentials for GCS.")
            self.storage_client = storage.Client()

        self.bucket = self.storage_client.bucket(settings.GCS_BUCKET_NAME)
        logger.info(f"GCS Bucket {settings.GCS_BUCKET_NAME} obtained.")

    def _get_bucket(self) -> "storage.bucket.Bucket":
        if self.bucket is None:
            self._initialize_client()
        return self.bucket

    async def upload_file_async(self, file: UploadFile, blob_name: str, content_type: str) -> str:
        bucket = self._get_bucket()
        blob = bucket.blob(blob_name)

        loop = asyncio.get_running_loop()
        await file.seek(0)
        file_content = await file.read()

        await loop.run_in_executor(
            None,
            lambda: blob.upload_from_string(file_content, content_type=content_type)
        )
        logger.info(f"File {file.filename} uploaded to GCS: {settings.GCS_BUCKET_NAME}/{blob_name}")
        return blob_name

    def public_url(self, blob_name: str) -> str:
        return f"{settings.STORAGE_PUBLIC_BASE_URL.rstrip('/')}/{settings.GCS_BUCKET_NAME}/{blob_name}"

    def blob_name_from_url(self, url: str | None) -> str | None:
        """Inverse of public_url; None for URLs that are not ours."""
        if not url:
            return None
        prefix = f"{settings.STORAGE_PUBLIC_BASE_URL.rstrip('/')}/{settings.GCS_BUCKET_NAME}/"
        if url.startswith(prefix):
            return url[len(prefix):]
        return None

    def generate_signed_url(self, blob_name: str, expiration_minutes: int = 60) -> str:
        blob = self._get_bucket().blob(blob_name)
        return blob.generate_signed_url(version="v4", expiration=timedelta(minutes=expiration_minutes))

    def delete_blob(self, blob_name: str):
        blob = self._get_bucket().blob(blob_name)
        if blob.exists():
            blob.delete()
            logger.info(f"Blob {blob_name} deleted successfully from GCS bucket {settings.GCS_BUCKET_NAME}.")

gcs_storage = GcsStorage()
