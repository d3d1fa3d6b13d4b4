"""
Pytest configuration and fixtures for photogallery tests.
"""

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from photogallery.api import create_app
from photogallery.config import GalleryConfig
from photogallery.models.photo import PhotoRecord
from photogallery.services.auth import SessionAuthService
from photogallery.services.metadata import DuckDBMetadataStore
from photogallery.services.photos import PhotoService
from photogallery.services.storage import LocalBlobStore

TEST_PASSWORD = "correct-horse-battery-staple"  # nosec B105


class FakeClock:
    """UTC clock that advances one second per call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


class TestDataFactory:
    """Factory class for creating test data objects."""

    @staticmethod
    def create_config(tmp_path: Path | None = None, **overrides) -> GalleryConfig:
        """Create a development GalleryConfig for testing."""
        values = {
            "environment": "test",
            "admin_password": TEST_PASSWORD,
            "session_secret": "test-session-secret",
            "metadata_db_path": ":memory:",
            "blob_backend": "local",
            "local_storage_dir": str(tmp_path / "blobs") if tmp_path else "blobs",
        }
        values.update(overrides)
        return GalleryConfig(**values)

    @staticmethod
    def create_record(
        title: str = "Sunset",
        original_name: str = "sunset.jpg",
        size: int = 100,
        uploaded_at: datetime | None = None,
    ) -> PhotoRecord:
        """Create a PhotoRecord for testing."""
        return PhotoRecord.create_new(
            original_name=original_name,
            size=size,
            mime_type="image/jpeg",
            title=title,
            uploaded_at=uploaded_at,
        )

    @staticmethod
    def create_jpeg(size: int = 100) -> bytes:
        """Create JPEG-looking bytes of an exact length (SOI marker, padding, EOI marker)."""
        assert size >= 4
        return b"\xff\xd8" + b"\x00" * (size - 4) + b"\xff\xd9"


@pytest.fixture
def test_data_factory() -> TestDataFactory:
    """Provide TestDataFactory instance for tests."""
    return TestDataFactory()


@pytest.fixture
def sample_image_data() -> bytes:
    """Provide sample image data for testing (a 100-byte JPEG-like payload)."""
    return TestDataFactory.create_jpeg(100)


@pytest.fixture
def gallery_config(tmp_path: Path) -> GalleryConfig:
    return TestDataFactory.create_config(tmp_path)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def metadata_store() -> Generator[DuckDBMetadataStore, None, None]:
    store = DuckDBMetadataStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def blob_store(tmp_path: Path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def photo_service(metadata_store: DuckDBMetadataStore, blob_store: LocalBlobStore, clock: FakeClock) -> PhotoService:
    return PhotoService(metadata_store, blob_store, clock=clock)


@pytest.fixture
def auth_service(gallery_config: GalleryConfig) -> SessionAuthService:
    return SessionAuthService(gallery_config)


@pytest.fixture
def client(
    gallery_config: GalleryConfig, photo_service: PhotoService, auth_service: SessionAuthService
) -> Generator[TestClient, None, None]:
    app = create_app(gallery_config, photo_service=photo_service, auth_service=auth_service)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(auth_service: SessionAuthService) -> dict[str, str]:
    """Cookie header carrying a valid session token."""
    return {"Cookie": f"session={auth_service.issue_token().value}"}


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set up test environment variables."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    for key in ("ADMIN_PASSWORD", "SESSION_SECRET", "BLOB_BACKEND", "GCS_PHOTOS_BUCKET"):
        monkeypatch.delenv(key, raising=False)
