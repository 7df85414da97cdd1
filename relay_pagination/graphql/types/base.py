"""Base GraphQL types for pagination.

Strawberry mirrors of the core pagination schemas, plus the SDL fragment
for composing the same definitions into a schema written by hand.
"""

from __future__ import annotations

import strawberry

from relay_pagination.core.pagination.schemas import (
    Order,
    PageInfo,
)
from relay_pagination.core.pagination.schemas import (
    OrderDirection as CoreOrderDirection,
)

PAGINATION_TYPE_DEFS = """
enum OrderDirection {
  ASC
  DESC
}

type PageInfo {
  startCursor: String
  endCursor: String
  hasNextPage: Boolean
  hasPreviousPage: Boolean
}
"""

OrderDirection = strawberry.enum(
    CoreOrderDirection,
    name="OrderDirection",
    description="The direction to order results in",
)


@strawberry.type(name="PageInfo", description="Pagination metadata following GraphQL Relay specification")
class PageInfoType:
    """GraphQL Relay PageInfo for cursor-based pagination.

    Mirrors relay_pagination.core.pagination.schemas.PageInfo.
    """

    start_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the last item",
    )
    has_next_page: bool | None = strawberry.field(
        default=None,
        description="Whether more items exist",
    )
    has_previous_page: bool | None = strawberry.field(
        default=None,
        description="Whether previous items exist",
    )

    @classmethod
    def from_page_info(cls, page_info: PageInfo) -> PageInfoType:
        """Build from the core PageInfo returned by paginate()."""
        return cls(
            start_cursor=page_info.start_cursor,
            end_cursor=page_info.end_cursor,
            has_next_page=page_info.has_next_page,
            has_previous_page=page_info.has_previous_page,
        )


@strawberry.input(name="OrderInput", description="Field and direction to order results by")
class OrderInput:
    field: str = strawberry.field(description="The field to order by")
    direction: OrderDirection = strawberry.field(  # type: ignore[valid-type]
        default=CoreOrderDirection.ASC,
        description="The direction to order the results",
    )

    def to_order(self) -> Order[str]:
        """Convert to the core Order accepted by FindOptions."""
        return Order(field=self.field, direction=self.direction)


__all__ = ["PAGINATION_TYPE_DEFS", "OrderDirection", "OrderInput", "PageInfoType"]
