"""Logging infrastructure.

Basic usage:
    import logging

    from relay_pagination.infra.logging import set_log_context, setup_logging

    setup_logging()
    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123")
    logger.info("Paginating users")  # Includes request_id

    # Lazy evaluation for expensive debug output
    from relay_pagination.infra.logging import get_lazy_logger

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Window: {describe_window()}")
"""

from relay_pagination.infra.logging.config import configure_logging, setup_logging
from relay_pagination.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    log_context,
    set_log_context,
)
from relay_pagination.infra.logging.formatters import JSONFormatter
from relay_pagination.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "log_context",
    "set_log_context",
    "setup_logging",
]
