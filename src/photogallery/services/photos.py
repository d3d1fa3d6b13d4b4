"""
Photo service coordinating the metadata store and the blob store.

The service is the only component that creates, reads or removes blobs, and it
keeps each record consistent with its objects:

- upload writes ``originals/<fileName>`` before the metadata record, so a
  failure in between leaves an orphan blob (removed by compensation or the
  reconciliation job) and never a record whose image is missing;
- delete removes both blob variants before the metadata record, so a crash in
  between leaves a record that a repeated delete cleans up.

No step is retried. Store faults propagate to the caller unchanged.
"""

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger, log_performance, log_user_action
from ..models.photo import ImageVariant, PhotoRecord, decode_record, encode_record, original_key
from ..models.schemas import PhotoUpdate
from .auth import ADMIN_USER
from .metadata import MetadataStore
from .reconciliation import Reconciler
from .storage import BlobStore, guess_content_type

logger = get_logger(__name__)

IMAGE_CACHE_CONTROL = "public, max-age=31536000"


@dataclass
class ImageResponse:
    """Bytes and headers for serving one image variant."""

    data: bytes
    content_type: str
    headers: dict[str, str] = field(default_factory=dict)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PhotoService:
    """Upload, list, update, delete and serve photos."""

    def __init__(self, metadata_store: MetadataStore, blob_store: BlobStore, clock=_utcnow) -> None:
        """
        Initialize the photo service.

        Args:
            metadata_store: Store for JSON photo records
            blob_store: Store for image objects
            clock: Source of the current UTC time
        """
        self.metadata_store = metadata_store
        self.blob_store = blob_store
        self.reconciler = Reconciler(metadata_store, blob_store)
        self._clock = clock

    def list_photos(self) -> list[PhotoRecord]:
        """
        List every readable photo record, newest upload first.

        Records that vanish between enumeration and fetch, or that fail to
        deserialize, are skipped.
        """
        start_time = time.perf_counter()
        photos = []
        for key in self.metadata_store.list_keys():
            record = decode_record(key, self.metadata_store.get(key))
            if record is not None:
                photos.append(record)

        photos.sort(key=lambda photo: photo.uploaded_at, reverse=True)
        log_performance("list_photos", time.perf_counter() - start_time, photos_count=len(photos))
        return photos

    def get_photo(self, photo_id: str) -> PhotoRecord:
        """
        Fetch one photo record.

        Raises:
            NotFoundError: If no readable record exists for the id
        """
        record = decode_record(photo_id, self.metadata_store.get(photo_id))
        if record is None:
            raise NotFoundError("Photo not found", code="photo_not_found", details={"photo_id": photo_id})
        return record

    def upload_photo(
        self,
        content: bytes,
        mime_type: str | None,
        original_filename: str,
        title: str | None = None,
        description: str | None = None,
    ) -> PhotoRecord:
        """
        Store a new photo and its metadata record.

        Args:
            content: Raw image bytes (must not be empty)
            mime_type: MIME type sent by the client; guessed from the name if empty
            original_filename: File name sent by the client
            title: Title (defaults to the original file name)
            description: Description (defaults to an empty string)

        Returns:
            PhotoRecord: The stored record

        Raises:
            ValidationError: If the content is empty
            StorageError: If the blob write fails (nothing was stored)
            DatabaseError: If the metadata write fails (the blob is compensated)
        """
        if not content:
            raise ValidationError("No file uploaded", code="empty_file")

        original_filename = original_filename or "upload"
        record = PhotoRecord.create_new(
            original_name=original_filename,
            size=len(content),
            mime_type=mime_type or guess_content_type(original_filename),
            title=title,
            description=description,
            uploaded_at=self._clock(),
        )

        self.blob_store.put(record.original_key, content, record.mime_type)
        try:
            self.metadata_store.put(record.id, encode_record(record))
        except Exception:
            self.reconciler.compensate_upload(record.file_name)
            raise

        log_user_action(
            ADMIN_USER,
            "photo_uploaded",
            photo_id=record.id,
            file_name=record.file_name,
            size=record.size,
            mime_type=record.mime_type,
        )
        return record

    def update_photo(self, photo_id: str, updates: PhotoUpdate | dict) -> PhotoRecord:
        """
        Change the title and/or description of a photo.

        ``updated_at`` is set on every call, even when no value changed, and
        always moves forward.

        Args:
            photo_id: Photo id
            updates: New values; fields other than title and description are ignored

        Returns:
            PhotoRecord: The updated record

        Raises:
            NotFoundError: If no record exists for the id
            ValidationError: If updates is not a valid update body
        """
        if not isinstance(updates, PhotoUpdate):
            updates = PhotoUpdate.parse_body(updates)

        record = self.get_photo(photo_id)
        if updates.title is not None:
            record.title = updates.title
        if updates.description is not None:
            record.description = updates.description

        now = self._clock()
        if record.updated_at is not None and now <= record.updated_at:
            now = record.updated_at + timedelta(microseconds=1)
        record.updated_at = now

        self.metadata_store.put(record.id, encode_record(record))
        log_user_action(ADMIN_USER, "photo_updated", photo_id=record.id)
        return record

    def delete_photo(self, photo_id: str) -> None:
        """
        Remove a photo: both blob variants first, the metadata record last.

        Raises:
            NotFoundError: If no record exists for the id
        """
        record = self.get_photo(photo_id)

        self.blob_store.delete(record.original_key)
        self.blob_store.delete(record.thumbnail_key)
        self.metadata_store.delete(record.id)

        log_user_action(ADMIN_USER, "photo_deleted", photo_id=record.id, file_name=record.file_name)

    def get_image(self, file_name: str, variant: ImageVariant = ImageVariant.ORIGINAL) -> ImageResponse:
        """
        Read the stored original of an image with headers for the variant.

        Resizing is left to the CDN through ``CF-Image-*`` headers; every
        variant is served from the single stored original.

        Raises:
            ValidationError: If the file name is not a single path segment
            NotFoundError: If the original does not exist
        """
        if not file_name or "/" in file_name or "\\" in file_name or file_name in (".", ".."):
            raise ValidationError("Invalid image path", code="invalid_image_path", details={"file_name": file_name})

        stored = self.blob_store.get(original_key(file_name))
        if stored is None:
            raise NotFoundError("Image not found", code="image_not_found", details={"file_name": file_name})

        headers = {"Cache-Control": IMAGE_CACHE_CONTROL, "ETag": stored.etag}
        headers.update(variant.resize_hints())
        return ImageResponse(data=stored.data, content_type=stored.content_type, headers=headers)
