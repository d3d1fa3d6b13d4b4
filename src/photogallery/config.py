"""Configuration management for photogallery.

Configuration is read from environment variables once at startup into an
immutable ``GalleryConfig`` that is passed explicitly to the application
factory and the authentication service. Development fallbacks exist only when
``ENVIRONMENT`` names a development environment.
"""

import os
import secrets
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ConfigurationError
from .logging_config import get_logger

logger = get_logger(__name__)

DEVELOPMENT_ENVIRONMENTS = ("development", "dev", "local", "test")
PRODUCTION_ENVIRONMENTS = ("production", "prod")

DEV_ADMIN_PASSWORD = "admin123"  # nosec B105 - development mode only
DEFAULT_SESSION_MAX_AGE = 60 * 60 * 24

BLOB_BACKENDS = ("gcs", "local")


@dataclass(frozen=True)
class GalleryConfig:
    """Settings for one running gallery instance."""

    environment: str
    admin_password: str
    session_secret: str
    session_max_age: int = DEFAULT_SESSION_MAX_AGE
    metadata_db_path: str = "data/metadata.duckdb"
    blob_backend: str = "local"
    gcs_bucket: str | None = None
    gcs_project: str | None = None
    local_storage_dir: str = "data/blobs"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in DEVELOPMENT_ENVIRONMENTS

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() in PRODUCTION_ENVIRONMENTS

    def validate(self) -> None:
        """
        Check the settings for consistency.

        Raises:
            ConfigurationError: If a setting is missing or not allowed in this environment
        """
        if not self.admin_password:
            raise ConfigurationError("ADMIN_PASSWORD must not be empty")
        if not self.session_secret:
            raise ConfigurationError("SESSION_SECRET must not be empty")
        if self.session_max_age <= 0:
            raise ConfigurationError("SESSION_MAX_AGE must be positive")
        if self.blob_backend not in BLOB_BACKENDS:
            raise ConfigurationError(
                f"Unknown BLOB_BACKEND '{self.blob_backend}', expected one of {', '.join(BLOB_BACKENDS)}"
            )
        if self.blob_backend == "gcs" and not self.gcs_bucket:
            raise ConfigurationError("GCS_PHOTOS_BUCKET is required for the gcs blob backend")
        if not self.is_development:
            if self.blob_backend == "local":
                raise ConfigurationError("The local blob backend is only available in development mode")
            if self.admin_password == DEV_ADMIN_PASSWORD:
                raise ConfigurationError("The development admin password must not be used outside development mode")


class EnvironmentReader:
    """Typed access to a mapping of environment variables."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = os.environ if environ is None else environ

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """Get configuration value from the environment.

        Args:
            key: Configuration key
            default: Default value if not found
            cast_type: Type to cast the value to (str, int, bool, float)

        Returns:
            Configuration value cast to the specified type
        """
        value: Any = self._environ.get(key)
        if value is None or value == "":
            return default

        try:
            if cast_type is bool:
                return value.lower() in ("true", "1", "yes", "on")
            if cast_type is not str:
                return cast_type(value)
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to cast config value '{key}' to {cast_type.__name__}: {e}")
            return default
        return value


def load_config(environ: Mapping[str, str] | None = None) -> GalleryConfig:
    """
    Build a ``GalleryConfig`` from environment variables.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        GalleryConfig: Validated configuration

    Raises:
        ConfigurationError: If required settings are missing outside development mode
    """
    env = EnvironmentReader(environ)
    environment = str(env.get("ENVIRONMENT", "development")).strip().lower()
    is_dev = environment in DEVELOPMENT_ENVIRONMENTS

    admin_password = env.get("ADMIN_PASSWORD")
    if admin_password is None:
        if not is_dev:
            raise ConfigurationError("ADMIN_PASSWORD is required outside development mode")
        logger.warning("development_admin_password_in_use", environment=environment)
        admin_password = DEV_ADMIN_PASSWORD

    session_secret = env.get("SESSION_SECRET")
    if session_secret is None:
        if not is_dev:
            raise ConfigurationError("SESSION_SECRET is required outside development mode")
        # Sessions do not survive a restart in development.
        session_secret = secrets.token_urlsafe(32)

    config = GalleryConfig(
        environment=environment,
        admin_password=admin_password,
        session_secret=session_secret,
        session_max_age=env.get("SESSION_MAX_AGE", DEFAULT_SESSION_MAX_AGE, int),
        metadata_db_path=env.get("METADATA_DB_PATH", "data/metadata.duckdb"),
        blob_backend=str(env.get("BLOB_BACKEND", "local" if is_dev else "gcs")).lower(),
        gcs_bucket=env.get("GCS_PHOTOS_BUCKET"),
        gcs_project=env.get("GOOGLE_CLOUD_PROJECT"),
        local_storage_dir=env.get("LOCAL_STORAGE_DIR", "data/blobs"),
        log_level=env.get("LOG_LEVEL", "INFO"),
    )
    config.validate()

    logger.info(
        "configuration_loaded",
        environment=config.environment,
        blob_backend=config.blob_backend,
        metadata_db_path=config.metadata_db_path,
    )
    return config
