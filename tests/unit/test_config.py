"""
Tests for configuration loading and validation.
"""

import pytest

from photogallery.config import (
    DEFAULT_SESSION_MAX_AGE,
    DEV_ADMIN_PASSWORD,
    EnvironmentReader,
    GalleryConfig,
    load_config,
)
from photogallery.errors import ConfigurationError


class TestEnvironmentReader:
    """Test cases for EnvironmentReader."""

    def test_missing_and_empty_values_use_default(self):
        env = EnvironmentReader({"EMPTY": ""})

        assert env.get("MISSING", "default") == "default"
        assert env.get("EMPTY", "default") == "default"

    def test_casts(self):
        env = EnvironmentReader({"INT": "42", "BOOL": "yes", "FLOAT": "1.5"})

        assert env.get("INT", cast_type=int) == 42
        assert env.get("BOOL", cast_type=bool) is True
        assert env.get("FLOAT", cast_type=float) == 1.5

    def test_invalid_cast_uses_default(self):
        env = EnvironmentReader({"INT": "many"})

        assert env.get("INT", 7, int) == 7


class TestLoadConfig:
    """Test cases for load_config."""

    def test_development_fallbacks(self):
        config = load_config({"ENVIRONMENT": "development"})

        assert config.is_development is True
        assert config.admin_password == DEV_ADMIN_PASSWORD
        assert config.session_secret
        assert config.session_max_age == DEFAULT_SESSION_MAX_AGE
        assert config.blob_backend == "local"

    def test_development_secret_is_random(self):
        first = load_config({"ENVIRONMENT": "dev"})
        second = load_config({"ENVIRONMENT": "dev"})

        assert first.session_secret != second.session_secret

    def test_defaults_to_development(self):
        assert load_config({}).environment == "development"

    def test_production_requires_password(self):
        with pytest.raises(ConfigurationError):
            load_config({"ENVIRONMENT": "production", "SESSION_SECRET": "s", "GCS_PHOTOS_BUCKET": "b"})

    def test_production_requires_secret(self):
        with pytest.raises(ConfigurationError):
            load_config({"ENVIRONMENT": "production", "ADMIN_PASSWORD": "p", "GCS_PHOTOS_BUCKET": "b"})

    def test_production_requires_bucket(self):
        with pytest.raises(ConfigurationError):
            load_config({"ENVIRONMENT": "production", "ADMIN_PASSWORD": "p", "SESSION_SECRET": "s"})

    def test_production_config(self):
        config = load_config(
            {
                "ENVIRONMENT": "Production",
                "ADMIN_PASSWORD": "p",
                "SESSION_SECRET": "s",
                "GCS_PHOTOS_BUCKET": "photos",
                "GOOGLE_CLOUD_PROJECT": "project",
                "SESSION_MAX_AGE": "3600",
                "METADATA_DB_PATH": "/var/lib/gallery/metadata.duckdb",
            }
        )

        assert config.is_production is True
        assert config.blob_backend == "gcs"
        assert config.gcs_bucket == "photos"
        assert config.gcs_project == "project"
        assert config.session_max_age == 3600
        assert config.metadata_db_path == "/var/lib/gallery/metadata.duckdb"

    def test_production_rejects_local_backend(self):
        with pytest.raises(ConfigurationError):
            load_config(
                {"ENVIRONMENT": "production", "ADMIN_PASSWORD": "p", "SESSION_SECRET": "s", "BLOB_BACKEND": "local"}
            )

    def test_production_rejects_development_password(self):
        with pytest.raises(ConfigurationError):
            load_config(
                {
                    "ENVIRONMENT": "production",
                    "ADMIN_PASSWORD": DEV_ADMIN_PASSWORD,
                    "SESSION_SECRET": "s",
                    "GCS_PHOTOS_BUCKET": "b",
                }
            )

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("ADMIN_PASSWORD", "from-env")

        assert load_config().admin_password == "from-env"


class TestGalleryConfigValidate:
    """Test cases for GalleryConfig.validate."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"admin_password": ""},
            {"session_secret": ""},
            {"session_max_age": 0},
            {"blob_backend": "s3"},
            {"blob_backend": "gcs", "gcs_bucket": None},
        ],
    )
    def test_invalid(self, overrides):
        values = {"environment": "test", "admin_password": "p", "session_secret": "s"}
        values.update(overrides)

        with pytest.raises(ConfigurationError):
            GalleryConfig(**values).validate()

    def test_valid(self, gallery_config):
        gallery_config.validate()

    def test_frozen(self, gallery_config):
        with pytest.raises(AttributeError):
            gallery_config.admin_password = "changed"
