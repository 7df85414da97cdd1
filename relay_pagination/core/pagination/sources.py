"""Result sources the paginator reads from.

A source answers two questions for one pagination call:
    - count(): how many rows match, ignoring ordering and windowing
    - fetch(skip, take, order_key, direction): the ordered window of rows

Two implementations are provided:
    - SelectSource wraps a SQLAlchemy async session and a Select statement
    - SequenceSource wraps an in-memory sequence (tests, cached lists)

Example:
    from sqlalchemy import select

    source = SelectSource(session, select(User).where(User.is_active == True))
    total = await source.count()
    rows = await source.fetch(0, 11, "users.created_at", OrderDirection.DESC)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlalchemy import Join, func, select

from relay_pagination.core.exceptions import UnsupportedOrderFieldException
from relay_pagination.core.pagination.schemas import OrderDirection

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, FromClause, Select
    from sqlalchemy.ext.asyncio import AsyncSession


@runtime_checkable
class QuerySource[T](Protocol):
    """Ordered, countable, windowable result set."""

    async def count(self) -> int:
        """Count all rows in scope."""
        ...

    async def fetch(
        self,
        skip: int,
        take: int,
        order_key: str,
        direction: OrderDirection,
    ) -> Sequence[T]:
        """Fetch up to take rows after skipping skip, ordered by order_key."""
        ...


class SelectSource[T]:
    """Query source backed by a SQLAlchemy select statement.

    The statement may carry any WHERE clauses; those define the scope of both
    the count and the window. Any ORDER BY already on the statement is
    dropped so the page order is exactly the requested one.

    The order key (``"<alias>.<column>"``) is resolved against the FROM
    objects of the statement: a table or alias named ``<alias>`` that has a
    column ``<column>``. The column is rendered by the dialect, so reserved
    or mixed-case aliases are quoted.
    """

    __slots__ = ("session", "statement")

    def __init__(self, session: AsyncSession, statement: Select[tuple[T]]) -> None:
        self.session = session
        self.statement = statement.order_by(None)

    async def count(self) -> int:
        count_stmt = select(func.count()).select_from(self.statement.subquery())
        return (await self.session.execute(count_stmt)).scalar_one()

    async def fetch(
        self,
        skip: int,
        take: int,
        order_key: str,
        direction: OrderDirection,
    ) -> Sequence[T]:
        column = self.order_column(order_key)
        ordering = column.desc() if direction == OrderDirection.DESC else column.asc()
        stmt = self.statement.order_by(ordering).offset(skip).limit(take)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    def order_column(self, order_key: str) -> ColumnElement[Any]:
        """Find the column named by order_key among the statement's FROMs.

        Raises:
            UnsupportedOrderFieldException: If no FROM named alias has the column
        """
        alias, _, name = order_key.rpartition(".")
        for from_ in _named_froms(self.statement):
            if from_.name == alias and name in from_.c:
                return from_.c[name]
        raise UnsupportedOrderFieldException(order_key)


class SequenceSource[T]:
    """Query source backed by an in-memory sequence.

    Rows are sorted by the attribute (or mapping key) named by the last
    segment of the order key, so ``"u.name"`` sorts by ``name``. Rows whose
    value is None sort before every other row in ascending order.

    Example:
        source = SequenceSource([User(id="1", name="b"), User(id="2", name="a")])
        rows = await source.fetch(0, 10, "u.name", OrderDirection.ASC)
    """

    __slots__ = ("items",)

    def __init__(self, items: Sequence[T]) -> None:
        self.items = list(items)

    async def count(self) -> int:
        return len(self.items)

    async def fetch(
        self,
        skip: int,
        take: int,
        order_key: str,
        direction: OrderDirection,
    ) -> Sequence[T]:
        field = order_key.rsplit(".", 1)[-1]
        ordered = sorted(
            self.items,
            key=lambda item: _sort_key(_field_value(item, field)),
            reverse=direction == OrderDirection.DESC,
        )
        return ordered[skip : skip + take]


def _named_froms(statement: Select[Any]) -> Iterator[FromClause]:
    # Column-implied FROMs keep their ORM annotations; the compiled FROM list
    # adds explicit select_from() and join targets.
    yield from _expand(statement.columns_clause_froms)
    yield from _expand(statement.get_final_froms())


def _expand(froms: Iterable[FromClause]) -> Iterator[FromClause]:
    for from_ in froms:
        if isinstance(from_, Join):
            yield from _expand((from_.left, from_.right))
        elif from_.named_with_column:
            yield from_


def _field_value(item: Any, field: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(field)
    return getattr(item, field, None)


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is not None, value)


__all__ = ["QuerySource", "SelectSource", "SequenceSource"]
