"""Proof photo storage with provider interface (GCS/S3)."""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Optional

from app.core.config import get_settings, StorageProvider
from app.services.proof_photos import build_proof_path, normalise_proof_file_path


class StorageProviderInterface(ABC):
    """Abstract interface for storage providers."""

    @abstractmethod
    async def generate_presigned_upload_url(
        self,
        object_path: str,
        mime_type: str,
        ttl_seconds: int,
    ) -> tuple[str, datetime]:
        """Generate a presigned PUT URL for direct upload.

        Returns:
            Tuple of (presigned_url, expires_at)
        """

    @abstractmethod
    async def generate_presigned_download_url(
        self,
        object_path: str,
        ttl_seconds: int,
    ) -> str:
        """Generate a presigned GET URL for download."""


class GCSStorageProvider(StorageProviderInterface):
    """Google Cloud Storage provider."""

    def __init__(self, bucket_name: str, project_id: Optional[str] = None):
        self.bucket_name = bucket_name
        self.project_id = project_id
        self._client = None

    @property
    def client(self):
        if self._client is None:
            from google.cloud import storage
            self._client = storage.Client(project=self.project_id)
        return self._client

    @property
    def bucket(self):
        return self.client.bucket(self.bucket_name)

    async def generate_presigned_upload_url(
        self,
        object_path: str,
        mime_type: str,
        ttl_seconds: int,
    ) -> tuple[str, datetime]:
        blob = self.bucket.blob(object_path)
        url = blob.generate_signed_url(
            version="v4",
            expiration=timedelta(seconds=ttl_seconds),
            method="PUT",
            content_type=mime_type,
        )
        return url, datetime.utcnow() + timedelta(seconds=ttl_seconds)

    async def generate_presigned_download_url(
        self,
        object_path: str,
        ttl_seconds: int,
    ) -> str:
        blob = self.bucket.blob(object_path)
        return blob.generate_signed_url(
            version="v4",
            expiration=timedelta(seconds=ttl_seconds),
            method="GET",
        )


class S3StorageProvider(StorageProviderInterface):
    """AWS S3 storage provider."""

    def __init__(
        self,
        bucket_name: str,
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self._client = None

    @property
    def client(self):
        if self._client is None:
            import boto3
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                aws_access_key_id=self.access_key_id,
                aws_secret_access_key=self.secret_access_key,
            )
        return self._client

    async def generate_presigned_upload_url(
        self,
        object_path: str,
        mime_type: str,
        ttl_seconds: int,
    ) -> tuple[str, datetime]:
        url = self.client.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": self.bucket_name,
                "Key": object_path,
                "ContentType": mime_type,
            },
            ExpiresIn=ttl_seconds,
        )
        return url, datetime.utcnow() + timedelta(seconds=ttl_seconds)

    async def generate_presigned_download_url(
        self,
        object_path: str,
        ttl_seconds: int,
    ) -> str:
        return self.client.generate_presigned_url(
            "get_object",
            Params={
                "Bucket": self.bucket_name,
                "Key": object_path,
            },
            ExpiresIn=ttl_seconds,
        )


class ProofStorageService:
    """Presigned upload/download of proof photos."""

    ALLOWED_MIME_TYPES = {
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/heic",
    }

    def __init__(self, provider: StorageProviderInterface):
        self.provider = provider

    async def create_presigned_upload(
        self,
        client_name: Optional[str],
        address: Optional[str],
        completed_on: date,
        task_type: str,
        mime_type: str,
        file_size_bytes: int,
    ) -> tuple[str, str, datetime]:
        """Presigned PUT for the conventional proof path of a job.

        Returns:
            Tuple of (upload_url, object_path, expires_at)

        Raises:
            ValueError: unsupported mime type or file too large
        """
        settings = get_settings()

        if mime_type not in self.ALLOWED_MIME_TYPES:
            raise ValueError(f"Unsupported mime type: {mime_type}")

        max_size = settings.max_upload_size_mb * 1024 * 1024
        if file_size_bytes > max_size:
            raise ValueError(f"File size exceeds maximum of {settings.max_upload_size_mb}MB")

        object_path = build_proof_path(client_name, address, completed_on, task_type)
        url, expires_at = await self.provider.generate_presigned_upload_url(
            object_path=object_path,
            mime_type=mime_type,
            ttl_seconds=settings.presign_ttl_seconds,
        )
        return url, object_path, expires_at

    async def get_download_url(self, photo_path: str, ttl_seconds: int = 3600) -> str:
        """Signed GET URL; accepts legacy public URLs and `proofs/` prefixes.

        Raises:
            ValueError: the path does not name a file
        """
        object_path = normalise_proof_file_path(photo_path)
        if not object_path:
            raise ValueError(f"Not a proof file path: {photo_path}")
        return await self.provider.generate_presigned_download_url(object_path, ttl_seconds)


def get_storage_service() -> ProofStorageService:
    """Factory function to get storage service based on config."""
    settings = get_settings()
    if settings.storage_provider == StorageProvider.GCS:
        provider: StorageProviderInterface = GCSStorageProvider(
            bucket_name=settings.bucket_name,
            project_id=settings.gcs_project_id,
        )
    else:
        provider = S3StorageProvider(
            bucket_name=settings.bucket_name,
            region=settings.aws_region or "ap-southeast-2",
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
        )

    return ProofStorageService(provider)
