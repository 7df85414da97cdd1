"""Cursor encoding and decoding for pagination.

Cursors are opaque strings that identify an entity, the entity type they
were minted for, and the entity's absolute offset in the ordered result set.

The cursor format is:
1. JSON array ``["C", <type>, <id>, <index>]`` in compact form
2. Base64 URL-safe encoded for use in URLs

Example cursor payload:
    ["C","User","abc-123",4]

Encoded: WyJDIiwiVXNlciIsImFiYy0xMjMiLDRd

Cursors are not signed. They are only opaque to keep clients from building
them by hand.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pydantic import BaseModel, Field

from relay_pagination.core.exceptions import (
    CursorTypeMismatchException,
    MalformedCursorException,
)

CURSOR_TAG = "C"


class Cursor(BaseModel):
    """Decoded cursor data.

    Attributes:
        id: Stable identifier of the entity at this position
        type: Entity type the cursor was minted for
        index: Zero-based offset of the entity in the ordered result set
    """

    id: str = Field(description="Entity identifier")
    type: str = Field(description="Entity type tag")
    index: int = Field(ge=0, description="Absolute offset in the ordered results")

    model_config = {"frozen": True}


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        # Encoding
        cursor = CursorCodec.encode("abc-123", "User", 4)

        # Decoding
        data = CursorCodec.decode(cursor, "User")
        print(data.index)  # 4
    """

    @staticmethod
    def encode(id: Any, type: str, index: int) -> str:
        """Encode an entity position to an opaque string.

        Args:
            id: Entity identifier (stringified)
            type: Entity type tag
            index: Absolute offset of the entity in the ordered results

        Returns:
            URL-safe base64 encoded string

        Raises:
            ValueError: If index is not a non-negative integer, or id or type
                is not encodable as UTF-8 (lone surrogates)
        """
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise ValueError(f"Cursor index must be a non-negative integer, got {index!r}")
        try:
            return CursorCodec._pack([CURSOR_TAG, str(type), str(id), index])
        except UnicodeEncodeError as e:
            raise ValueError(f"Cursor id and type must be valid UTF-8 text: {e}") from e

    @staticmethod
    def decode(cursor: str, expected_type: str) -> Cursor:
        """Decode a cursor string and check it belongs to expected_type.

        Args:
            cursor: URL-safe base64 encoded cursor string
            expected_type: Entity type being paginated

        Returns:
            Cursor with id, type and index

        Raises:
            MalformedCursorException: If the string was not produced by encode()
            CursorTypeMismatchException: If the cursor belongs to another type
        """
        payload = CursorCodec._unpack(cursor)

        if not isinstance(payload, list) or len(payload) != 4:
            raise MalformedCursorException("unexpected field count")

        tag, type_, id_, index = payload
        if tag != CURSOR_TAG:
            raise MalformedCursorException("unknown format tag")
        if not isinstance(type_, str) or not isinstance(id_, str):
            raise MalformedCursorException("type and id must be strings")
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise MalformedCursorException("index must be a non-negative integer")

        # Anything the encoder would not have produced is rejected, which also
        # covers stray padding, whitespace and non-canonical JSON.
        try:
            canonical = CursorCodec._pack(payload)
        except UnicodeEncodeError as e:
            raise MalformedCursorException("non-canonical encoding") from e
        if canonical != cursor:
            raise MalformedCursorException("non-canonical encoding")

        if type_ != expected_type:
            raise CursorTypeMismatchException(expected_type, type_)

        return Cursor(id=id_, type=type_, index=index)

    @staticmethod
    def _pack(payload: list[Any]) -> str:
        json_str = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        return base64.urlsafe_b64encode(json_str.encode()).decode()

    @staticmethod
    def _unpack(cursor: str) -> Any:
        if not isinstance(cursor, str) or not cursor:
            raise MalformedCursorException("empty cursor")
        try:
            json_str = base64.urlsafe_b64decode(cursor.encode("ascii")).decode()
            return json.loads(json_str)
        except (UnicodeError, binascii.Error, ValueError, RecursionError) as e:
            raise MalformedCursorException(str(e)) from e


__all__ = ["CURSOR_TAG", "Cursor", "CursorCodec"]
