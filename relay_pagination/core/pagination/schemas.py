"""Pagination request and response schemas.

Request side:
    - OrderDirection / Order: the single field and direction to sort by
    - FindOptions: page size, optional cursor and order for one call

Response side (GraphQL Connection pattern):
    - Edge: a node with the cursor addressing its position
    - PageInfo: cursors and page-existence flags
    - Connection: total count, edges and page info

A simple REST-style CursorPage can be derived from any Connection.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")
F = TypeVar("F")


class OrderDirection(str, Enum):
    """Direction to order the results in."""

    ASC = "ASC"
    DESC = "DESC"


class Order(BaseModel, Generic[F]):
    """A pagination order: one field and one direction.

    The field is whatever the caller's order_field_to_key function accepts,
    usually a string or an enum of public field names.
    """

    field: F = Field(description="The field to order by")
    direction: OrderDirection = Field(
        default=OrderDirection.ASC,
        description="The direction to order the results",
    )

    model_config = {"frozen": True}


class FindOptions(BaseModel, Generic[F]):
    """User-defined find options for a pagination call.

    Attributes:
        first: How many results to load
        after: A cursor to find results after
        order_by: The order to return the results in
    """

    first: int = Field(description="How many results to load")
    after: str | None = Field(
        default=None,
        description="A cursor to find results after",
    )
    order_by: Order[F] | None = Field(
        default=None,
        description="The order to return the results in",
    )

    model_config = {"frozen": True}


class PageInfo(BaseModel):
    """Pagination metadata following GraphQL Relay specification.

    Attributes:
        start_cursor: Cursor of the first edge in this page
        end_cursor: Cursor of the last edge in this page
        has_next_page: Whether there are items after the current page
        has_previous_page: Whether there are items before the current page
    """

    start_cursor: str | None = Field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Cursor of the last item",
    )
    has_next_page: bool = Field(
        description="Whether more items exist"
    )
    has_previous_page: bool = Field(
        description="Whether previous items exist"
    )

    model_config = {"frozen": True}


class Edge(BaseModel, Generic[T]):
    """Edge wrapper for paginated items.

    Attributes:
        node: The actual data item
        cursor: Cursor for this specific item
    """

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")

    model_config = {"frozen": True}


class Connection(BaseModel, Generic[T]):
    """GraphQL Connection pattern for cursor pagination.

    Client navigation:
        # First page
        GET /users?first=10

        # Next page (using end_cursor from previous response)
        GET /users?first=10&after=WyJDIiwiVXNlciIsImFiYy0xMjMiLDRd

    Attributes:
        total_count: Number of items in the whole result set
        edges: List of Edge objects containing nodes and cursors
        page_info: Navigation metadata
    """

    total_count: int = Field(ge=0, description="Total number of items")
    edges: list[Edge[T]] = Field(
        default_factory=list,
        description="List of edges (items with cursors)",
    )
    page_info: PageInfo = Field(
        description="Pagination metadata",
    )

    model_config = {"frozen": True}

    @property
    def nodes(self) -> list[T]:
        """Get just the nodes without edge wrappers."""
        return [edge.node for edge in self.edges]

    def to_cursor_page(self) -> CursorPage[T]:
        """Convert to simple REST-style pagination.

        Returns:
            CursorPage with items and cursors
        """
        return CursorPage(
            items=self.nodes,
            next_cursor=self.page_info.end_cursor if self.page_info.has_next_page else None,
            prev_cursor=self.page_info.start_cursor if self.page_info.has_previous_page else None,
            has_more=self.page_info.has_next_page,
            total_count=self.total_count,
        )


class CursorPage(BaseModel, Generic[T]):
    """Simple REST-style cursor pagination response.

    Usage:
        @router.get("/users", response_model=CursorPage[UserResponse])
        async def list_users(find: FindOptions = Depends(get_find_options)):
            connection = await paginate(find, options)
            return connection.to_cursor_page()

    Attributes:
        items: List of data items
        next_cursor: Cursor for the next page (None if no more)
        prev_cursor: Cursor of the first item when earlier items exist
        has_more: Whether more items exist after this page
        total_count: Total count
    """

    items: list[T] = Field(
        default_factory=list,
        description="List of items",
    )
    next_cursor: str | None = Field(
        default=None,
        description="Cursor to fetch next page",
    )
    prev_cursor: str | None = Field(
        default=None,
        description="Cursor of the first item when earlier items exist",
    )
    has_more: bool = Field(
        default=False,
        description="Whether more items exist",
    )
    total_count: int | None = Field(
        default=None,
        description="Total count",
    )


__all__ = [
    "Connection",
    "CursorPage",
    "Edge",
    "FindOptions",
    "Order",
    "OrderDirection",
    "PageInfo",
]
