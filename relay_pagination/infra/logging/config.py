"""Logging configuration setup.

Uses logging.config.dictConfig with all handlers on the root logger, so
package loggers (``relay_pagination.*``) simply propagate. JSON Lines
output is the default; plain text is available for local development.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

if TYPE_CHECKING:
    from relay_pagination.core.settings.logs import LoggingSettings


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from relay_pagination.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    **kwargs: Any,
) -> dict[str, Any]:
    """Configure the root logger with dictConfig.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON Lines instead of plain text.
        console_enabled: Attach a stderr handler.
        include_context: Add ContextInjectingFilter to the console handler.
        capture_warnings: Forward Python warnings to logging system.
        **kwargs: Ignored extra settings.

    Returns:
        The dictConfig dictionary that was applied.

    Example:
        from relay_pagination.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs.keys())))

    if capture_warnings:
        logging.captureWarnings(True)

    formatter_name = "json" if json_logs else "text"
    handlers: dict[str, Any] = {}
    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": formatter_name,
            "filters": ["context"] if include_context else [],
            "stream": "ext://sys.stderr",
        }

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": _build_formatters_config(json_logs),
        "filters": {
            "context": {
                "()": "relay_pagination.infra.logging.context.ContextInjectingFilter",
            },
        },
        "handlers": handlers,
        "root": {
            "level": log_level.upper(),
            "handlers": list(handlers),
        },
    }

    logging.config.dictConfig(logging_config)
    return logging_config


def _build_formatters_config(json_logs: bool) -> dict[str, Any]:
    if json_logs:
        return {
            "json": {
                "()": "relay_pagination.infra.logging.formatters.JSONFormatter",
                "fmt_keys": {
                    "level": "levelname",
                    "logger": "name",
                    "message": "message",
                },
                "static": {"service": "relay-pagination"},
            },
        }
    return {
        "text": {
            "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    }


__all__ = ["configure_logging", "setup_logging"]
