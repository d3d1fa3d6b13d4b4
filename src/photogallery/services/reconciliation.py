"""
Reconciliation between the metadata store and the blob store.

Upload and delete touch two stores without a transaction. Upload writes the
blob first, so a failed metadata write leaves an orphan blob; delete removes the
record last, so a crash leaves a record whose blobs may be gone. This module
holds the compensating steps for both situations.
"""

import json
from dataclasses import dataclass, field

from ..logging_config import get_logger
from ..models.photo import ORIGINALS_PREFIX, THUMBNAILS_PREFIX, original_key, thumbnail_key
from .metadata import MetadataStore
from .storage import BlobStore

logger = get_logger(__name__)


@dataclass
class ReconciliationReport:
    """Outcome of a reconciliation run."""

    orphan_blobs: list[str] = field(default_factory=list)
    dangling_records: list[str] = field(default_factory=list)
    deleted_blobs: list[str] = field(default_factory=list)
    unreadable_records: list[str] = field(default_factory=list)
    dry_run: bool = False

    def to_dict(self) -> dict:
        return {
            "orphan_blobs": self.orphan_blobs,
            "dangling_records": self.dangling_records,
            "deleted_blobs": self.deleted_blobs,
            "unreadable_records": self.unreadable_records,
            "dry_run": self.dry_run,
        }


class Reconciler:
    """Finds and repairs inconsistencies left by partial failures."""

    def __init__(self, metadata_store: MetadataStore, blob_store: BlobStore) -> None:
        self.metadata_store = metadata_store
        self.blob_store = blob_store

    def _scan_records(self) -> tuple[dict[str, str], list[str]]:
        """
        Read the file name of every stored record from its raw JSON.

        Only ``fileName`` is needed, so records that the photo service cannot
        fully decode still protect their blobs.

        Returns:
            tuple: (file name to photo id, ids whose file name cannot be read)
        """
        referenced: dict[str, str] = {}
        unreadable: list[str] = []
        for key in self.metadata_store.list_keys():
            value = self.metadata_store.get(key)
            if value is None:
                continue
            try:
                data = json.loads(value)
            except ValueError:
                data = None
            file_name = data.get("fileName") if isinstance(data, dict) else None
            if isinstance(file_name, str) and file_name:
                referenced[file_name] = key
            else:
                logger.warning("record_file_name_unreadable", photo_id=key)
                unreadable.append(key)
        return referenced, unreadable

    def _referenced_file_names(self) -> dict[str, str]:
        """Map file name to photo id for every record with a readable file name."""
        return self._scan_records()[0]

    def find_orphan_blobs(self, referenced: dict[str, str] | None = None) -> list[str]:
        """Blob keys whose file name no metadata record references."""
        if referenced is None:
            referenced = self._referenced_file_names()
        orphans = []
        for prefix in (ORIGINALS_PREFIX, THUMBNAILS_PREFIX):
            for key in self.blob_store.list_keys(prefix):
                if key[len(prefix) :] not in referenced:
                    orphans.append(key)
        return orphans

    def find_dangling_records(self, referenced: dict[str, str] | None = None) -> list[str]:
        """Ids of records whose original blob is missing."""
        if referenced is None:
            referenced = self._referenced_file_names()
        return [
            photo_id for file_name, photo_id in referenced.items() if not self.blob_store.exists(original_key(file_name))
        ]

    def compensate_upload(self, file_name: str) -> None:
        """
        Undo the blob write of an upload whose metadata write failed.

        Failures are logged and swallowed so the caller can re-raise the
        original error.
        """
        for key in (original_key(file_name), thumbnail_key(file_name)):
            try:
                self.blob_store.delete(key)
            except Exception as e:
                logger.error("upload_compensation_failed", key=key, error=str(e))
                return
        logger.warning("upload_compensated", file_name=file_name)

    def reconcile(self, dry_run: bool = False) -> ReconciliationReport:
        """
        Delete orphan blobs and report dangling records.

        Dangling records are never deleted here; re-running the photo delete
        removes them. While any record has an unreadable file name, orphans are
        reported but not deleted.

        Args:
            dry_run: Only report, do not delete anything

        Returns:
            ReconciliationReport: What was found and removed
        """
        referenced, unreadable = self._scan_records()
        report = ReconciliationReport(
            orphan_blobs=self.find_orphan_blobs(referenced),
            dangling_records=self.find_dangling_records(referenced),
            unreadable_records=unreadable,
            dry_run=dry_run,
        )

        if unreadable and report.orphan_blobs and not dry_run:
            logger.warning("orphan_cleanup_skipped", unreadable_records=len(unreadable))
        elif not dry_run:
            for key in report.orphan_blobs:
                self.blob_store.delete(key)
                report.deleted_blobs.append(key)

        logger.info(
            "reconciliation_completed",
            orphan_blobs=len(report.orphan_blobs),
            dangling_records=len(report.dangling_records),
            deleted_blobs=len(report.deleted_blobs),
            unreadable_records=len(report.unreadable_records),
            dry_run=dry_run,
        )
        return report
