"""
Error classification for photogallery.

Every failure the photo service or the store adapters can raise is one of the
classes below. The HTTP layer maps ``GalleryError.status_code`` onto the
response; anything that is not a ``GalleryError`` becomes a 500.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from .logging_config import get_logger, log_error, log_security_event

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Error categories for classification and handling."""

    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DATABASE = "database"
    STORAGE = "storage"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class GalleryError(Exception):
    """Base exception class for photogallery."""

    status_code = 500

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.code = code or f"{category.value}_error"
        self.details = details or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now()

        self._log_error()

    def _log_error(self) -> None:
        """Log the error with appropriate level."""
        error_context = {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            **self.details,
        }

        if self.original_exception:
            error_context["original_exception"] = str(self.original_exception)

        if self.category == ErrorCategory.AUTHENTICATION:
            log_security_event(self.code, **error_context)
        elif self.severity == ErrorSeverity.LOW:
            logger.info("request_rejected", error_message=self.message, **error_context)
        else:
            log_error(self, error_context)

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to the JSON error envelope."""
        return {"error": self.message}


class ValidationError(GalleryError):
    """Malformed or missing input (missing file, bad JSON body, bad path)."""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            code=code or "validation_failed",
            details=details,
            original_exception=original_exception,
        )


class AuthenticationError(GalleryError):
    """Missing or invalid session, or wrong password."""

    status_code = 401

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHENTICATION,
            severity=ErrorSeverity.HIGH,
            code=code or "auth_failed",
            details=details,
            original_exception=original_exception,
        )


class NotFoundError(GalleryError):
    """Unknown photo id or missing original blob."""

    status_code = 404

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.NOT_FOUND,
            severity=ErrorSeverity.LOW,
            code=code or "not_found",
            details=details,
        )


class DatabaseError(GalleryError):
    """Metadata store failures."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.DATABASE,
            severity=ErrorSeverity.HIGH,
            code=code or "database_error",
            details=details,
            original_exception=original_exception,
        )


class StorageError(GalleryError):
    """Blob store failures."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.STORAGE,
            severity=ErrorSeverity.HIGH,
            code=code or "storage_error",
            details=details,
            original_exception=original_exception,
        )


class ConfigurationError(GalleryError):
    """Invalid or missing deployment configuration."""

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            code=code or "configuration_error",
            details=details,
        )
