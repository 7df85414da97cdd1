"""GraphQL type definitions.

This package contains Strawberry types for:
- OrderDirection enum and OrderInput
- PageInfo and the SDL fragment that declares it
- Edge/Connection factories for any node type
"""

from __future__ import annotations

from relay_pagination.graphql.types.base import (
    PAGINATION_TYPE_DEFS,
    OrderDirection,
    OrderInput,
    PageInfoType,
)
from relay_pagination.graphql.types.pagination import (
    create_connection,
    create_edge,
    to_graphql_connection,
)

__all__ = [
    "PAGINATION_TYPE_DEFS",
    "OrderDirection",
    "OrderInput",
    "PageInfoType",
    "create_connection",
    "create_edge",
    "to_graphql_connection",
]
