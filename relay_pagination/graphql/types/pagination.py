"""Connection type factories for GraphQL.

Builds Relay-style Edge and Connection types for any Strawberry node type
so each entity does not hand-write its own pagination types.

Example:
    from relay_pagination.graphql.types.pagination import create_connection

    UserEdge, UserConnection = create_connection(UserType, "User")

    @strawberry.field
    async def users(self, first: int = 50, after: str | None = None) -> UserConnection:
        connection = await paginate(FindOptions(first=first, after=after), options)
        return to_graphql_connection(
            connection,
            UserConnection,
            UserEdge,
            node_fn=UserType.from_model,
        )
"""

from collections.abc import Callable
from typing import Any

import strawberry

from relay_pagination.core.pagination.schemas import Connection
from relay_pagination.graphql.types.base import PageInfoType

__all__ = [
    "create_connection",
    "create_edge",
    "to_graphql_connection",
]


def create_edge(node_type: type, type_name_prefix: str) -> type:
    """Create a Relay-compliant Edge type for node_type.

    Args:
        node_type: Strawberry type used for the edge's node
        type_name_prefix: Prefix for the type name (e.g., "User" -> "UserEdge")

    Returns:
        A Strawberry Edge type class
    """

    @strawberry.type(
        name=f"{type_name_prefix}Edge",
        description=f"Edge containing a {type_name_prefix} node and cursor",
    )
    class Edge:
        node: node_type = strawberry.field(  # type: ignore[valid-type]
            description="The node containing the actual data"
        )
        cursor: str = strawberry.field(
            description="Opaque cursor for this edge used in pagination"
        )

    return Edge


def create_connection(
    node_type: type,
    type_name_prefix: str,
) -> tuple[type, type]:
    """Create Edge and Connection types for node_type.

    Args:
        node_type: Strawberry type used for the nodes
        type_name_prefix: Prefix for the type names (e.g., "User" -> "UserConnection")

    Returns:
        (EdgeType, ConnectionType)

    Produces:
        type UserEdge { node: UserType!  cursor: String! }
        type UserConnection { totalCount: Int!  edges: [UserEdge!]!  pageInfo: PageInfo! }
    """
    edge_type = create_edge(node_type, type_name_prefix)

    @strawberry.type(
        name=f"{type_name_prefix}Connection",
        description=f"Relay connection for {type_name_prefix} with cursor-based pagination",
    )
    class ConnectionType:
        total_count: int = strawberry.field(
            description="Total number of items across all pages"
        )
        edges: list[edge_type] = strawberry.field(  # type: ignore[valid-type]
            description="List of edges containing nodes and their cursors"
        )
        page_info: PageInfoType = strawberry.field(
            description="Pagination information including hasNextPage, hasPreviousPage, etc."
        )

    return edge_type, ConnectionType


def to_graphql_connection(
    connection: Connection[Any],
    connection_type: type,
    edge_type: type,
    node_fn: Callable[[Any], Any] | None = None,
) -> Any:
    """Convert a core Connection into instances of the generated GraphQL types.

    Args:
        connection: Result of paginate()
        connection_type: Connection type from create_connection()
        edge_type: Edge type from create_connection()
        node_fn: Converts each node (e.g., ORM model) to the GraphQL node type

    Returns:
        connection_type instance
    """
    convert = node_fn or (lambda node: node)
    return connection_type(
        total_count=connection.total_count,
        edges=[
            edge_type(node=convert(edge.node), cursor=edge.cursor)
            for edge in connection.edges
        ],
        page_info=PageInfoType.from_page_info(connection.page_info),
    )
