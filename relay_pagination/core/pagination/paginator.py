"""Offset-window cursor pagination.

paginate() turns "give me N results after cursor C, ordered by field F" into
one count and one windowed fetch against a QuerySource, then assembles the
Connection.

The window over-fetches so page existence can be answered without a second
round trip:

    no cursor:   take first + 1 from offset 0
                 [row0 .. row(first-1)] [lookahead]

    with cursor: take first + 2 from the cursor's offset
                 [cursor row] [row .. row] [lookahead]

The leading cursor row is only used to check that the cursor still points at
the entity it was minted for. The trailing lookahead row is dropped when it
was actually returned, and its presence is what sets has_next_page.

Example:
    connection = await paginate(
        FindOptions(first=20, after=request_cursor, order_by=Order(field="name")),
        PaginateOptions(
            type="User",
            alias="u",
            order_field_to_key=order_field_map({"name": "name", "joined": "created_at"}),
            model=User,
            session=session,
        ),
    )
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.orm import aliased

from relay_pagination.core.exceptions import (
    InvalidPageSizeException,
    MissingQuerySourceException,
    StaleCursorException,
    UnsupportedOrderFieldException,
)
from relay_pagination.core.pagination.cursor import Cursor, CursorCodec
from relay_pagination.core.pagination.schemas import (
    Connection,
    Edge,
    FindOptions,
    Order,
    PageInfo,
)
from relay_pagination.core.pagination.sources import QuerySource, SelectSource
from relay_pagination.core.settings import get_pagination_settings
from relay_pagination.infra.logging import get_lazy_logger, log_context, set_log_context

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)


@dataclass(slots=True, frozen=True)
class PaginateOptions[T, F]:
    """How to paginate one entity type.

    Exactly one way of reaching the data is needed: a ready QuerySource, a
    SQLAlchemy statement with a session, or a mapped model with a session.
    They are tried in that order.

    Attributes:
        type: Entity type tag embedded in cursors; unique per deployment
        alias: Name used to qualify the order column ("<alias>.<column>")
        order_field_to_key: Maps a public order field to a storage column name
        validate_cursor: Reject stale cursors; None uses the settings default
        max_first: Largest accepted page size; None leaves it uncapped
        default_order: Order used when the find options carry none
        source: Any QuerySource implementation
        statement: Select statement whose FROM is named alias
        model: Mapped class, selected as aliased(model, name=alias)
        session: Async session for statement or model
    """

    type: str
    alias: str
    order_field_to_key: Callable[[F], str]
    validate_cursor: bool | None = None
    max_first: int | None = None
    default_order: Order[F] | None = None
    source: QuerySource[T] | None = None
    statement: Select[tuple[T]] | None = None
    model: type[T] | None = None
    session: AsyncSession | None = None

    def resolve_source(self) -> QuerySource[T]:
        """Return the source to read from.

        Raises:
            MissingQuerySourceException: If no usable source was configured
        """
        if self.source is not None:
            return self.source
        if self.session is not None:
            if self.statement is not None:
                return SelectSource(self.session, self.statement)
            if self.model is not None:
                entity = aliased(self.model, name=self.alias)
                return SelectSource(self.session, select(entity))
        raise MissingQuerySourceException()


@dataclass(slots=True, frozen=True)
class Window:
    """Rows to request from the source for one page.

    Attributes:
        skip: Offset of the first fetched row
        take: Number of rows to fetch (page size plus over-fetch)
        cursor: Decoded cursor, None on the first page
    """

    skip: int
    take: int
    cursor: Cursor | None = None


def compute_window(first: int, after: str | None, entity_type: str) -> Window:
    """Work out the fetch window for a page.

    Raises:
        MalformedCursorException: If after is not a cursor
        CursorTypeMismatchException: If after belongs to another entity type
    """
    if not after:
        return Window(skip=0, take=first + 1)
    cursor = CursorCodec.decode(after, entity_type)
    return Window(skip=cursor.index, take=first + 2, cursor=cursor)


def build_connection[T](
    results: Sequence[T],
    window: Window,
    entity_type: str,
    total_count: int,
) -> Connection[T]:
    """Assemble edges and page info from a fetched window.

    Edges are exactly the rows strictly between the cursor row (when a cursor
    was given) and the lookahead row (when the source returned one). Edge
    cursors carry absolute offsets.
    """
    has_next_page = len(results) == window.take
    start = 1 if window.cursor is not None else 0
    stop = len(results) - 1 if has_next_page else len(results)

    edges: list[Edge[T]] = []
    for i in range(start, stop):
        node = results[i]
        edges.append(
            Edge(
                node=node,
                cursor=CursorCodec.encode(entity_id(node), entity_type, i + window.skip),
            )
        )

    page_info = PageInfo(
        start_cursor=edges[0].cursor if edges else None,
        end_cursor=edges[-1].cursor if edges else None,
        has_next_page=has_next_page,
        has_previous_page=window.skip != 0,
    )
    return Connection(total_count=total_count, edges=edges, page_info=page_info)


async def paginate[T, F](
    find_options: FindOptions[F],
    options: PaginateOptions[T, F],
) -> Connection[T]:
    """Paginate a result source with the caller's find options.

    Args:
        find_options: Page size, optional cursor and order
        options: Entity type, order field mapping and data source

    Returns:
        Connection with total count, edges and page info

    Raises:
        InvalidPageSizeException: If first is not positive, or exceeds
            options.max_first when one is set
        MalformedCursorException: If after is not a cursor
        CursorTypeMismatchException: If after belongs to another entity type
        MissingQuerySourceException: If options has no way to reach the data
        UnsupportedOrderFieldException: If the order field cannot be mapped
        StaleCursorException: If validation is on and the cursor row moved
    """
    with log_context(pagination_type=options.type):
        return await _paginate(find_options, options)


async def _paginate[T, F](
    find_options: FindOptions[F],
    options: PaginateOptions[T, F],
) -> Connection[T]:
    first = find_options.first
    if first <= 0 or (options.max_first is not None and first > options.max_first):
        raise InvalidPageSizeException(first, options.max_first)

    window = compute_window(first, find_options.after, options.type)
    order = find_options.order_by or options.default_order
    if order is None:
        raise UnsupportedOrderFieldException(None)
    key = f"{options.alias}.{resolve_order_key(options.order_field_to_key, order.field)}"
    source = options.resolve_source()
    set_log_context(order_key=key)

    _lazy.debug(
        lambda: f"paginate: {options.type} order={key} {order.direction.value} skip={window.skip} take={window.take}"
    )

    total_count = await source.count()
    results = await source.fetch(window.skip, window.take, key, order.direction)

    settings = get_pagination_settings()
    validate = settings.validate_cursor if options.validate_cursor is None else options.validate_cursor
    if window.cursor is not None and validate:
        found_id = entity_id(results[0]) if results else None
        if found_id != window.cursor.id:
            logger.warning(
                "Stale pagination cursor",
                extra={
                    "entity_type": options.type,
                    "cursor_id": window.cursor.id,
                    "cursor_index": window.cursor.index,
                    "found_id": found_id,
                },
            )
            raise StaleCursorException(window.cursor.id, found_id)

    connection = build_connection(results, window, options.type, total_count)
    _lazy.debug(
        lambda: f"paginate: {options.type} -> {len(connection.edges)}/{total_count} items, "
        f"has_next={connection.page_info.has_next_page}, has_prev={connection.page_info.has_previous_page}"
    )
    return connection


def resolve_order_key[F](order_field_to_key: Callable[[F], str], field: F) -> str:
    """Map a public order field to its storage name.

    Raises:
        UnsupportedOrderFieldException: If the mapping rejects the field
    """
    try:
        key = order_field_to_key(field)
    except (LookupError, ValueError) as e:
        raise UnsupportedOrderFieldException(field) from e
    if not key:
        raise UnsupportedOrderFieldException(field)
    return key


def order_field_map[F](mapping: Mapping[F, str]) -> Callable[[F], str]:
    """Build an order_field_to_key function from a mapping.

    Example:
        order_field_to_key = order_field_map({"name": "name", "joined": "created_at"})
        order_field_to_key("joined")  # "created_at"
        order_field_to_key("age")     # raises UnsupportedOrderFieldException
    """
    fields = dict(mapping)

    def order_field_to_key(field: F) -> str:
        try:
            return fields[field]
        except KeyError:
            raise UnsupportedOrderFieldException(field) from None

    return order_field_to_key


def entity_id(entity: Any) -> str:
    """Return the stable identifier of a row as a string."""
    if isinstance(entity, Mapping):
        return str(entity["id"])
    return str(entity.id)


__all__ = [
    "PaginateOptions",
    "Window",
    "build_connection",
    "compute_window",
    "entity_id",
    "order_field_map",
    "paginate",
    "resolve_order_key",
]
