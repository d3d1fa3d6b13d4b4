"""
Photo record model for photogallery.

This module contains the PhotoRecord dataclass that represents the JSON
metadata stored for each uploaded image, and the image variants that can be
requested for it.
"""

import json
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from ..logging_config import get_logger

logger = get_logger(__name__)

ORIGINALS_PREFIX = "originals/"
THUMBNAILS_PREFIX = "thumbnails/"


class ImageVariant(Enum):
    """Renderings of an image produced by the CDN resize capability."""

    ORIGINAL = "original"
    THUMBNAIL = "thumbnail"
    MEDIUM = "medium"

    @classmethod
    def from_query(cls, size: str | None) -> "ImageVariant":
        """Map the ``size`` query parameter to a variant; unknown values mean original."""
        if size == cls.THUMBNAIL.value:
            return cls.THUMBNAIL
        if size == cls.MEDIUM.value:
            return cls.MEDIUM
        return cls.ORIGINAL

    def resize_hints(self) -> dict[str, str]:
        """Response headers asking the CDN to resize the image."""
        if self is ImageVariant.THUMBNAIL:
            return {"CF-Image-Fit": "cover", "CF-Image-Width": "300", "CF-Image-Height": "300"}
        if self is ImageVariant.MEDIUM:
            return {"CF-Image-Fit": "scale-down", "CF-Image-Width": "800"}
        return {}


def derive_file_name(photo_id: str, original_name: str) -> str:
    """
    Derive the stored file name from the photo id and the uploaded file name.

    The extension after the last dot is kept as-is; names without a dot
    produce a bare id.
    """
    if "." not in original_name:
        return photo_id
    extension = original_name.rsplit(".", 1)[1]
    if not extension:
        return photo_id
    return f"{photo_id}.{extension}"


def original_key(file_name: str) -> str:
    """Blob key of the stored original."""
    return f"{ORIGINALS_PREFIX}{file_name}"


def thumbnail_key(file_name: str) -> str:
    """Blob key of the (optional) stored thumbnail."""
    return f"{THUMBNAILS_PREFIX}{file_name}"


def _format_timestamp(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def _parse_timestamp(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass
class PhotoRecord:
    """
    Metadata describing one uploaded image.

    ``file_name`` joins the record to its blobs under ``originals/`` and
    ``thumbnails/`` and never changes after creation.
    """

    id: str
    file_name: str
    original_name: str
    size: int
    mime_type: str
    title: str
    description: str
    uploaded_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create_new(
        cls,
        original_name: str,
        size: int,
        mime_type: str,
        title: str | None = None,
        description: str | None = None,
        uploaded_at: datetime | None = None,
    ) -> "PhotoRecord":
        """
        Create a new PhotoRecord with a generated id and derived file name.

        Args:
            original_name: File name supplied by the uploader
            size: Size of the original in bytes
            mime_type: MIME type of the upload
            title: Title (defaults to the original file name)
            description: Description (defaults to an empty string)
            uploaded_at: Upload time (defaults to now)

        Returns:
            New PhotoRecord instance
        """
        photo_id = str(uuid.uuid4())
        return cls(
            id=photo_id,
            file_name=derive_file_name(photo_id, original_name),
            original_name=original_name,
            size=size,
            mime_type=mime_type,
            title=title or original_name,
            description=description or "",
            uploaded_at=uploaded_at or datetime.now(UTC),
        )

    @property
    def original_key(self) -> str:
        return original_key(self.file_name)

    @property
    def thumbnail_key(self) -> str:
        return thumbnail_key(self.file_name)

    def to_dict(self, include_id: bool = True) -> dict:
        """
        Convert the record to its JSON form.

        Args:
            include_id: Whether to include ``id`` (the metadata store key holds it already)

        Returns:
            Dictionary with camelCase keys
        """
        data: dict = {}
        if include_id:
            data["id"] = self.id
        data.update(
            {
                "fileName": self.file_name,
                "originalName": self.original_name,
                "size": self.size,
                "mimeType": self.mime_type,
                "title": self.title,
                "description": self.description,
                "uploadedAt": _format_timestamp(self.uploaded_at),
            }
        )
        if self.updated_at is not None:
            data["updatedAt"] = _format_timestamp(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, data: dict, photo_id: str | None = None) -> "PhotoRecord":
        """
        Create a PhotoRecord from its JSON form.

        Args:
            data: Dictionary with camelCase keys
            photo_id: Id to use when the dictionary does not carry one

        Returns:
            PhotoRecord instance

        Raises:
            KeyError, TypeError, ValueError: If the dictionary is not a valid record
        """
        updated_at = data.get("updatedAt")
        return cls(
            id=photo_id or data["id"],
            file_name=str(data["fileName"]),
            original_name=str(data.get("originalName") or data["fileName"]),
            size=int(data["size"]),
            mime_type=str(data.get("mimeType") or data.get("type") or "application/octet-stream"),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            uploaded_at=_parse_timestamp(data["uploadedAt"]),
            updated_at=_parse_timestamp(updated_at) if updated_at else None,
        )


def encode_record(record: PhotoRecord) -> str:
    """Serialize a record for the metadata store (the key carries the id)."""
    return json.dumps(record.to_dict(include_id=False))


def decode_record(photo_id: str, value: str | None) -> PhotoRecord | None:
    """
    Deserialize a stored record.

    Args:
        photo_id: Metadata store key
        value: Stored JSON, or None if the key vanished

    Returns:
        PhotoRecord, or None if the value is missing or unreadable
    """
    if value is None:
        return None
    try:
        return PhotoRecord.from_dict(json.loads(value), photo_id=photo_id)
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("unreadable_photo_record_skipped", photo_id=photo_id, error=str(e))
        return None
