"""Cursor pagination with the GraphQL Connection pattern.

Forward-only pagination (first/after) over one order field:

    from relay_pagination.core.pagination import (
        FindOptions,
        Order,
        OrderDirection,
        PaginateOptions,
        order_field_map,
        paginate,
    )

    connection = await paginate(
        FindOptions(first=10, after=cursor, order_by=Order(field="name", direction=OrderDirection.ASC)),
        PaginateOptions(
            type="User",
            alias="u",
            order_field_to_key=order_field_map({"name": "name"}),
            model=User,
            session=session,
        ),
    )

    for edge in connection.edges:
        print(edge.node, edge.cursor)

Simple REST Style:
    return connection.to_cursor_page()

Cursors are opaque base64 strings that clients pass back unchanged. Each one
names the entity type, the entity id and its absolute offset in the ordering.
"""

from relay_pagination.core.pagination.cursor import Cursor, CursorCodec
from relay_pagination.core.pagination.paginator import (
    PaginateOptions,
    Window,
    build_connection,
    compute_window,
    order_field_map,
    paginate,
)
from relay_pagination.core.pagination.schemas import (
    Connection,
    CursorPage,
    Edge,
    FindOptions,
    Order,
    OrderDirection,
    PageInfo,
)
from relay_pagination.core.pagination.sources import (
    QuerySource,
    SelectSource,
    SequenceSource,
)

__all__ = [
    # GraphQL-style schemas
    "Connection",
    # Cursor utilities
    "Cursor",
    "CursorCodec",
    # REST-style schemas
    "CursorPage",
    "Edge",
    # Request schemas
    "FindOptions",
    "Order",
    "OrderDirection",
    "PageInfo",
    # Paginator
    "PaginateOptions",
    # Sources
    "QuerySource",
    "SelectSource",
    "SequenceSource",
    "Window",
    "build_connection",
    "compute_window",
    "order_field_map",
    "paginate",
]
