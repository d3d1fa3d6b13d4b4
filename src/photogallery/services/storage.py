"""Blob store adapters for original and thumbnail image objects."""

import hashlib
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from google.cloud import storage  # type: ignore[attr-defined]
from google.cloud.exceptions import GoogleCloudError, NotFound

from ..errors import StorageError
from ..logging_config import get_logger

logger = get_logger(__name__)

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
    ".avif": "image/avif",
}


def guess_content_type(filename: str) -> str:
    """
    Determine content type from filename.

    Args:
        filename: File name

    Returns:
        str: MIME content type
    """
    extension = Path(filename).suffix.lower()
    return CONTENT_TYPES.get(extension, "application/octet-stream")


@dataclass
class StoredObject:
    """A blob read back from the store."""

    key: str
    data: bytes
    content_type: str
    etag: str

    @property
    def size(self) -> int:
        return len(self.data)


class BlobStore(ABC):
    """Binary object storage addressed by path-like keys."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Create or replace an object."""

    @abstractmethod
    def get(self, key: str) -> StoredObject | None:
        """Read an object, or None if it does not exist."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete an object; deleting a missing object is not an error."""

    @abstractmethod
    def list_keys(self, prefix: str = "") -> list[str]:
        """List object keys starting with prefix."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether an object exists."""

    def ping(self) -> None:
        """Raise if the store is unreachable."""
        self.list_keys("originals/")


class GCSBlobStore(BlobStore):
    """Blob store backed by a Google Cloud Storage bucket."""

    def __init__(self, bucket_name: str, project_id: str | None = None, client: storage.Client | None = None) -> None:
        """
        Initialize the GCS blob store.

        Args:
            bucket_name: GCS bucket holding ``originals/`` and ``thumbnails/``
            project_id: GCP project ID (defaults to the client's project)
            client: Existing storage client

        Raises:
            StorageError: If the client cannot be created
        """
        if not bucket_name:
            raise StorageError("GCS bucket name is required")

        self.bucket_name = bucket_name
        self.project_id = project_id

        try:
            self.client = client or storage.Client(project=project_id)
            self.bucket = self.client.bucket(bucket_name)
            logger.info("gcs_blob_store_initialized", bucket=bucket_name, project_id=project_id)
        except Exception as e:
            raise StorageError(f"Failed to initialize GCS client: {e}", original_exception=e) from e

    def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            blob = self.bucket.blob(key)
            blob.upload_from_string(data, content_type=content_type)
            logger.info("blob_uploaded", key=key, size=len(data), content_type=content_type)
        except GoogleCloudError as e:
            raise StorageError(f"Failed to upload '{key}': {e}", original_exception=e) from e

    def get(self, key: str) -> StoredObject | None:
        try:
            blob = self.bucket.get_blob(key)
            if blob is None:
                return None
            data: bytes = blob.download_as_bytes()
        except NotFound:
            return None
        except GoogleCloudError as e:
            raise StorageError(f"Failed to download '{key}': {e}", original_exception=e) from e

        logger.debug("blob_downloaded", key=key, size=len(data))
        return StoredObject(
            key=key,
            data=data,
            content_type=blob.content_type or guess_content_type(key),
            etag=blob.etag or "",
        )

    def delete(self, key: str) -> None:
        try:
            self.bucket.blob(key).delete()
            logger.info("blob_deleted", key=key)
        except NotFound:
            logger.debug("blob_already_absent", key=key)
        except GoogleCloudError as e:
            raise StorageError(f"Failed to delete '{key}': {e}", original_exception=e) from e

    def list_keys(self, prefix: str = "") -> list[str]:
        try:
            return [blob.name for blob in self.client.list_blobs(self.bucket, prefix=prefix)]
        except GoogleCloudError as e:
            raise StorageError(f"Failed to list objects under '{prefix}': {e}", original_exception=e) from e

    def exists(self, key: str) -> bool:
        try:
            exists: bool = self.bucket.blob(key).exists()
            return exists
        except GoogleCloudError as e:
            raise StorageError(f"Failed to check '{key}': {e}", original_exception=e) from e


class LocalBlobStore(BlobStore):
    """
    Blob store on the local filesystem, for development.

    Objects are plain files under ``root``; content type and etag are kept in
    JSON sidecars under ``root/.meta``.
    """

    META_DIR = ".meta"

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info("local_blob_store_initialized", root=str(self.root))

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents or path.relative_to(self.root).parts[0] == self.META_DIR:
            raise StorageError(f"Invalid object key: {key}", code="invalid_key")
        return path

    def _meta_path(self, key: str) -> Path:
        return self.root / self.META_DIR / f"{key}.json"

    def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        meta_path = self._meta_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            meta_path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            meta = {"content_type": content_type, "etag": f'"{hashlib.md5(data).hexdigest()}"'}  # nosec B324
            meta_path.write_text(json.dumps(meta), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write '{key}': {e}", original_exception=e) from e
        logger.info("blob_uploaded", key=key, size=len(data), content_type=content_type)

    def get(self, key: str) -> StoredObject | None:
        path = self._path(key)
        if not path.is_file():
            return None
        try:
            data = path.read_bytes()
            meta_path = self._meta_path(key)
            meta = json.loads(meta_path.read_text(encoding="utf-8")) if meta_path.is_file() else {}
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read '{key}': {e}", original_exception=e) from e

        return StoredObject(
            key=key,
            data=data,
            content_type=meta.get("content_type") or guess_content_type(key),
            etag=meta.get("etag") or f'"{hashlib.md5(data).hexdigest()}"',  # nosec B324
        )

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
            self._meta_path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete '{key}': {e}", original_exception=e) from e
        logger.info("blob_deleted", key=key)

    def list_keys(self, prefix: str = "") -> list[str]:
        keys = []
        for path in sorted(self.root.rglob("*")):
            if not path.is_file():
                continue
            relative = path.relative_to(self.root)
            if relative.parts[0] == self.META_DIR:
                continue
            key = relative.as_posix()
            if key.startswith(prefix):
                keys.append(key)
        return keys

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()
