"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolate cached settings between tests
    - Data Fixtures: in-memory rows for SequenceSource
    - Database Fixtures: SQLAlchemy engine, session and a small mapped model
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import Integer, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from relay_pagination.core.settings import clear_all_caches

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

# Keep tests independent from any local .env
os.environ.setdefault("PAGINATION_VALIDATE_CURSOR", "false")
os.environ.setdefault("LOG_JSON_LOGS", "true")


class Base(DeclarativeBase):
    pass


class Widget(Base):
    __tablename__ = "widgets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    rank: Mapped[int] = mapped_column(Integer)
    category: Mapped[str] = mapped_column(String(20), default="tool")


@dataclass(frozen=True)
class Row:
    """Plain row with a stable id, for in-memory sources."""

    id: str
    name: str
    rank: int


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Clear cached settings before and after every test."""
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def make_rows():
    """Factory for rows r0..r(n-1) with ranks 0..n-1.

    Example:
        def test_page(make_rows):
            rows = make_rows(5)
            assert rows[0].id == "r0"
    """

    def _make(count: int) -> list[Row]:
        return [Row(id=f"r{i}", name=f"row-{i}", rank=i) for i in range(count)]

    return _make


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def widget_model() -> type[Widget]:
    """Mapped model used by the SQLAlchemy source tests."""
    return Widget


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create async database session with tables created and dropped around the test."""
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def widgets(db_session: AsyncSession) -> list[Widget]:
    """Ten widgets w0..w9 with rank 0..9, names in reverse alphabetical order."""
    rows = [
        Widget(
            id=f"w{i}",
            name=f"widget-{chr(ord('j') - i)}",
            rank=i,
            category="tool" if i % 2 == 0 else "part",
        )
        for i in range(10)
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return rows
