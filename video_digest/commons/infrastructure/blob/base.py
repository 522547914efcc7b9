"""Abstract base class for blob storage operations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass
class BlobMetadata:
    """Metadata for a stored blob."""

    path: str
    size_bytes: int
    content_type: str
    created_at: datetime
    etag: str


@dataclass
class HealthStatus:
    """Health check result."""

    healthy: bool
    latency_ms: float
    message: str | None = None
    details: dict[str, str] | None = None


class BlobStorageBase(ABC):
    """Abstract base class for blob storage operations.

    Implementations should handle:
    - MinIO (local development)
    - AWS S3
    """

    URI_SCHEME = "s3"

    @abstractmethod
    async def upload_file(
        self,
        bucket: str,
        path: str,
        local_path: Path,
        content_type: str = "application/octet-stream",
    ) -> BlobMetadata:
        """Stream a local file to storage without loading it in memory.

        Args:
            bucket: Target bucket name.
            path: Path within the bucket.
            local_path: File to upload.
            content_type: MIME type of the content.

        Returns:
            Metadata of the uploaded blob.
        """

    @abstractmethod
    async def download_to_file(
        self,
        bucket: str,
        path: str,
        local_path: Path,
    ) -> None:
        """Download a blob to a local file.

        Args:
            bucket: Source bucket name.
            path: Path within the bucket.
            local_path: Local filesystem path to write to.

        Raises:
            BlobNotFoundError: If blob doesn't exist.
        """

    @abstractmethod
    async def delete(self, bucket: str, path: str) -> bool:
        """Delete a blob from storage.

        Args:
            bucket: Bucket name.
            path: Path within the bucket.

        Returns:
            True if deleted, False if didn't exist.
        """

    @abstractmethod
    async def exists(self, bucket: str, path: str) -> bool:
        """Check if a blob exists."""

    @abstractmethod
    async def get_metadata(self, bucket: str, path: str) -> BlobMetadata:
        """Get metadata for a stored blob.

        Raises:
            BlobNotFoundError: If blob doesn't exist.
        """

    @abstractmethod
    async def create_bucket(self, bucket: str) -> bool:
        """Create a new bucket.

        Returns:
            True if created, False if already exists.
        """

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health.

        Returns:
            Health status with latency info.
        """

    @classmethod
    def build_uri(cls, bucket: str, path: str) -> str:
        """Build the storage reference handed between pipeline stages."""
        return f"{cls.URI_SCHEME}://{bucket}/{path}"

    @classmethod
    def parse_uri(cls, uri: str) -> tuple[str, str]:
        """Split a storage reference into ``(bucket, path)``.

        Raises:
            ValueError: If the reference is not an ``s3://bucket/path`` URI.
        """
        prefix = f"{cls.URI_SCHEME}://"
        if not uri.startswith(prefix):
            raise ValueError(f"Not a storage reference: {uri}")
        bucket, _, path = uri[len(prefix) :].partition("/")
        if not bucket or not path:
            raise ValueError(f"Incomplete storage reference: {uri}")
        return bucket, path
