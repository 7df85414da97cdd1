"""Custom exception classes for pagination."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        titles = {
            400: "Bad Request",
            404: "Not Found",
            409: "Conflict",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
        }
        return titles.get(status_code, "Error")


class PaginationException(AppException):
    """Base class for every failure raised by the paginator and cursor codec."""


class MalformedCursorException(PaginationException):
    """The cursor string was not produced by the cursor encoder.

    Example:
        raise MalformedCursorException(reason="unknown format tag")
    """

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(
            status_code=400,
            detail="Invalid cursor",
            type="malformed-cursor",
            title="Malformed Cursor",
            extra={"reason": reason} if reason else None,
        )
        self.reason = reason


class CursorTypeMismatchException(PaginationException):
    """The cursor was minted for a different entity type.

    Attributes:
        expected_type: Type tag of the result set being paginated.
        actual_type: Type tag embedded in the cursor.
    """

    def __init__(self, expected_type: str, actual_type: str) -> None:
        super().__init__(
            status_code=400,
            detail=f"Invalid cursor, expected type {expected_type}, but got type {actual_type}",
            type="cursor-type-mismatch",
            title="Cursor Type Mismatch",
            extra={"expected_type": expected_type, "actual_type": actual_type},
        )
        self.expected_type = expected_type
        self.actual_type = actual_type


class StaleCursorException(PaginationException):
    """The row at the cursor's position is no longer the entity it referenced.

    Only raised when cursor validation is enabled for the call.
    """

    def __init__(self, cursor_id: str, found_id: str | None = None) -> None:
        super().__init__(
            status_code=409,
            detail="Invalid cursor",
            type="stale-cursor",
            title="Stale Cursor",
            extra={"cursor_id": cursor_id, "found_id": found_id},
        )
        self.cursor_id = cursor_id
        self.found_id = found_id


class UnsupportedOrderFieldException(PaginationException):
    """The requested order field cannot be mapped to a storage field."""

    def __init__(self, field: Any) -> None:
        super().__init__(
            status_code=400,
            detail=f"Unsupported order field: {field!s}",
            type="unsupported-order-field",
            title="Unsupported Order Field",
            extra={"field": None if field is None else str(field)},
        )
        self.field = field


class InvalidPageSizeException(PaginationException):
    """The requested page size is not a positive integer within the allowed maximum."""

    def __init__(self, first: int, max_first: int | None = None) -> None:
        if max_first is not None and first > max_first:
            detail = f"first must not exceed {max_first}, got {first}"
        else:
            detail = f"first must be a positive integer, got {first}"
        super().__init__(
            status_code=400,
            detail=detail,
            type="invalid-page-size",
            title="Invalid Page Size",
            extra={"first": first, "max_first": max_first},
        )
        self.first = first
        self.max_first = max_first


class MissingQuerySourceException(PaginationException):
    """Neither a query source, a statement nor a model was given to paginate."""

    def __init__(self) -> None:
        super().__init__(
            status_code=500,
            detail="A query source, statement or model with a session must be provided to paginate.",
            type="missing-query-source",
            title="Missing Query Source",
        )


__all__ = [
    "AppException",
    "CursorTypeMismatchException",
    "InvalidPageSizeException",
    "MalformedCursorException",
    "MissingQuerySourceException",
    "PaginationException",
    "StaleCursorException",
    "UnsupportedOrderFieldException",
]
