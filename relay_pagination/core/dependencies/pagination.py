"""Reusable pagination dependencies for FastAPI routes.

Usage:
    from relay_pagination.core.dependencies.pagination import FindOptionsParams

    @router.get("/users", response_model=CursorPage[UserResponse])
    async def list_users(find: FindOptionsParams) -> CursorPage[UserResponse]:
        connection = await paginate(find, user_pagination_options(session))
        return connection.to_cursor_page()
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query

from relay_pagination.core.exceptions import InvalidPageSizeException
from relay_pagination.core.pagination.schemas import FindOptions, Order, OrderDirection
from relay_pagination.core.settings import get_pagination_settings


def get_find_options(
    first: Annotated[
        int | None,
        Query(description="Number of items to return after the cursor"),
    ] = None,
    after: Annotated[
        str | None,
        Query(description="Cursor to start after (exclusive)"),
    ] = None,
    order_by: Annotated[
        str | None,
        Query(description="Field to order the results by"),
    ] = None,
    direction: Annotated[
        OrderDirection,
        Query(description="Order direction"),
    ] = OrderDirection.ASC,
) -> FindOptions[str]:
    """Build find options from query parameters.

    The page size defaults to the configured default_first and must lie
    within 1..max_first.

    Raises:
        InvalidPageSizeException: If first is out of range
    """
    settings = get_pagination_settings()
    if first is None:
        first = settings.default_first
    if first <= 0 or first > settings.max_first:
        raise InvalidPageSizeException(first, settings.max_first)
    return FindOptions(
        first=first,
        after=after or None,
        order_by=Order(field=order_by, direction=direction) if order_by else None,
    )


FindOptionsParams = Annotated[FindOptions[str], Depends(get_find_options)]
