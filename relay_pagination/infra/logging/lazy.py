"""Deferred log messages.

The paginator describes every window and page it produces at DEBUG. Those
messages are passed as callables so nothing is formatted unless DEBUG is on.
"""

from __future__ import annotations

import logging
from typing import Any


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that calls message and argument callables on demand.

    Example:
        logger = get_lazy_logger(__name__)
        logger.debug(lambda: f"window skip={window.skip} take={window.take}")
        logger.info("fetched %s rows", lambda: len(rows))
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        super().log(level, _resolve(msg), *(_resolve(arg) for arg in args), **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Return a LazyLoggerAdapter for logging.getLogger(name).

    Keyword arguments are bound as the adapter's extra context.
    """
    return LazyLoggerAdapter(logging.getLogger(name), context)


__all__ = ["LazyLoggerAdapter", "get_lazy_logger"]
