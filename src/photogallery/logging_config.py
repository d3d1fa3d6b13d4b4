"""
Centralized logging configuration for photogallery.

This module provides structured logging setup using structlog with
consistent formatting, levels, and processors across all components.
"""

import logging
import sys
from typing import Any

import structlog


class ColoredJSONRenderer:
    """Custom JSON renderer with optional color support for development."""

    def __init__(self, colors: bool = False):
        self.colors = colors
        self.json_renderer = structlog.processors.JSONRenderer()

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> str:
        """Render log entry as JSON with optional colors."""
        json_output = self.json_renderer(logger, method_name, event_dict)

        if not self.colors:
            return str(json_output)

        level = event_dict.get("level", "").upper()
        color_codes = {
            "DEBUG": "\033[36m",
            "INFO": "\033[32m",
            "WARNING": "\033[33m",
            "ERROR": "\033[31m",
            "CRITICAL": "\033[35m",
        }

        reset_code = "\033[0m"
        color = color_codes.get(level, "")

        return f"{color}{str(json_output)}{reset_code}"


LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level(level_name: str) -> int:
    """
    Resolve a log level name (``GalleryConfig.log_level``) to a logging constant.

    Unknown names fall back to INFO.
    """
    return LOG_LEVELS.get(level_name.upper(), logging.INFO)


def configure_structured_logging(level_name: str = "INFO", development: bool = False) -> None:
    """
    Configure structured logging for the entire application.

    Called once at startup with values from ``GalleryConfig``.

    Args:
        level_name: Log level name
        development: Render human-readable console output instead of JSON
    """
    log_level = get_log_level(level_name)
    use_colors = development and sys.stderr.isatty()

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=sys.stderr,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if development:
        processors.append(structlog.dev.ConsoleRenderer() if not use_colors else ColoredJSONRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.getLogger().setLevel(log_level)

    logger = structlog.get_logger("photogallery.logging")
    logger.info(
        "logging_configured",
        log_level=logging.getLevelName(log_level),
        environment="development" if development else "production",
        colors_enabled=use_colors,
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger bound to a module name."""
    return structlog.get_logger(name)


def log_performance(operation: str, duration: float, **context: Any) -> None:
    """Log a timing measurement for an operation."""
    logger = get_logger("photogallery.performance")
    logger.info("performance_metric", operation=operation, duration_seconds=duration, **context)


def log_user_action(user_id: str, action: str, **context: Any) -> None:
    """
    Log user actions for audit trail.

    Args:
        user_id: User identifier (always "admin" for this single-tenant service)
        action: Action performed
        **context: Additional context information
    """
    logger = get_logger("photogallery.user_actions")
    logger.info("user_action", user_id=user_id, action=action, **context)


def log_error(error: Exception, context: dict[str, Any] | None = None) -> None:
    """
    Log errors with structured context.

    Args:
        error: Exception that occurred
        context: Additional context information
    """
    logger = get_logger("photogallery.errors")

    error_context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if context:
        error_context.update(context)

    logger.error("error_occurred", **error_context)


def log_security_event(event_type: str, user_id: str | None = None, **context: Any) -> None:
    """
    Log security-related events.

    Args:
        event_type: Type of security event
        user_id: User identifier (if applicable)
        **context: Additional context information
    """
    logger = get_logger("photogallery.security")
    logger.warning("security_event", event_type=event_type, user_id=user_id, **context)
