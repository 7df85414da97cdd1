"""Unit tests for the paginator windowing and connection assembly."""
from __future__ import annotations

import logging

import pytest

from relay_pagination.core.exceptions import (
    CursorTypeMismatchException,
    InvalidPageSizeException,
    MalformedCursorException,
    MissingQuerySourceException,
    StaleCursorException,
    UnsupportedOrderFieldException,
)
from relay_pagination.core.pagination import (
    CursorCodec,
    FindOptions,
    Order,
    OrderDirection,
    PaginateOptions,
    SequenceSource,
    Window,
    build_connection,
    compute_window,
    order_field_map,
    paginate,
)
from relay_pagination.infra.logging import get_log_context, log_context

RANK = Order(field="rank")


class RecordingSource:
    """SequenceSource wrapper that records every call."""

    def __init__(self, items):
        self.inner = SequenceSource(items)
        self.count_calls = 0
        self.fetch_calls = []

    async def count(self) -> int:
        self.count_calls += 1
        return await self.inner.count()

    async def fetch(self, skip, take, order_key, direction):
        self.fetch_calls.append((skip, take, order_key, direction))
        return await self.inner.fetch(skip, take, order_key, direction)


def _options(source, **kwargs) -> PaginateOptions:
    return PaginateOptions(
        type="Row",
        alias="row",
        order_field_to_key=order_field_map({"rank": "rank", "name": "name"}),
        source=source,
        **kwargs,
    )


def _indices(connection) -> list[int]:
    return [CursorCodec.decode(edge.cursor, "Row").index for edge in connection.edges]


def _ids(connection) -> list[str]:
    return [edge.node.id for edge in connection.edges]


# ──────────────────────────────────────────────────────────────
# Windowing
# ──────────────────────────────────────────────────────────────


@pytest.mark.unit
class TestComputeWindow:
    """Tests for compute_window."""

    def test_without_cursor_takes_one_lookahead(self):
        assert compute_window(5, None, "Row") == Window(skip=0, take=6)

    def test_empty_cursor_is_first_page(self):
        assert compute_window(5, "", "Row") == Window(skip=0, take=6)

    def test_with_cursor_takes_cursor_row_and_lookahead(self):
        window = compute_window(5, CursorCodec.encode("r3", "Row", 3), "Row")

        assert window.skip == 3
        assert window.take == 7
        assert window.cursor.id == "r3"


@pytest.mark.unit
class TestBuildConnection:
    """Tests for build_connection."""

    def test_drops_cursor_row_and_lookahead(self, make_rows):
        rows = make_rows(10)
        window = Window(skip=2, take=4, cursor=CursorCodec.decode(CursorCodec.encode("r2", "Row", 2), "Row"))

        connection = build_connection(rows[2:6], window, "Row", 10)

        assert _ids(connection) == ["r3", "r4"]
        assert _indices(connection) == [3, 4]
        assert connection.page_info.has_next_page is True

    def test_keeps_all_rows_when_window_not_filled(self, make_rows):
        rows = make_rows(3)

        connection = build_connection(rows, Window(skip=0, take=4), "Row", 3)

        assert _ids(connection) == ["r0", "r1", "r2"]
        assert connection.page_info.has_next_page is False

    def test_cursor_only_window(self, make_rows):
        """A window holding only the cursor row yields no edges."""
        rows = make_rows(3)
        cursor = CursorCodec.decode(CursorCodec.encode("r2", "Row", 2), "Row")

        connection = build_connection(rows[2:], Window(skip=2, take=4, cursor=cursor), "Row", 3)

        assert connection.edges == []
        assert connection.page_info.start_cursor is None
        assert connection.page_info.end_cursor is None
        assert connection.page_info.has_previous_page is True


# ──────────────────────────────────────────────────────────────
# paginate()
# ──────────────────────────────────────────────────────────────


@pytest.mark.unit
class TestPaginate:
    """Tests for paginate over in-memory sources."""

    async def test_first_page(self, make_rows):
        source = RecordingSource(make_rows(5))

        connection = await paginate(FindOptions(first=2, order_by=RANK), _options(source))

        assert source.fetch_calls == [(0, 3, "row.rank", OrderDirection.ASC)]
        assert source.count_calls == 1
        assert _ids(connection) == ["r0", "r1"]
        assert _indices(connection) == [0, 1]
        assert connection.total_count == 5
        assert connection.page_info.has_next_page is True
        assert connection.page_info.has_previous_page is False
        assert connection.page_info.start_cursor == connection.edges[0].cursor
        assert connection.page_info.end_cursor == connection.edges[-1].cursor

    async def test_single_page_holds_everything(self, make_rows):
        source = RecordingSource(make_rows(5))

        connection = await paginate(FindOptions(first=10, order_by=RANK), _options(source))

        assert source.fetch_calls == [(0, 11, "row.rank", OrderDirection.ASC)]
        assert len(connection.edges) == 5
        assert connection.page_info.has_next_page is False
        assert connection.page_info.has_previous_page is False

    async def test_exact_fit_has_no_next_page(self, make_rows):
        connection = await paginate(FindOptions(first=5, order_by=RANK), _options(SequenceSource(make_rows(5))))

        assert len(connection.edges) == 5
        assert connection.page_info.has_next_page is False

    async def test_middle_page(self, make_rows):
        source = RecordingSource(make_rows(10))
        after = CursorCodec.encode("r2", "Row", 2)

        connection = await paginate(FindOptions(first=2, after=after, order_by=RANK), _options(source))

        assert source.fetch_calls == [(2, 4, "row.rank", OrderDirection.ASC)]
        assert _ids(connection) == ["r3", "r4"]
        assert _indices(connection) == [3, 4]
        assert connection.total_count == 10
        assert connection.page_info.has_next_page is True
        assert connection.page_info.has_previous_page is True

    async def test_last_page_after_cursor(self, make_rows):
        after = CursorCodec.encode("r7", "Row", 7)

        connection = await paginate(
            FindOptions(first=5, after=after, order_by=RANK),
            _options(SequenceSource(make_rows(10))),
        )

        assert _ids(connection) == ["r8", "r9"]
        assert _indices(connection) == [8, 9]
        assert connection.page_info.has_next_page is False
        assert connection.page_info.has_previous_page is True

    async def test_page_ending_one_before_last_row(self, make_rows):
        after = CursorCodec.encode("r6", "Row", 6)

        connection = await paginate(
            FindOptions(first=2, after=after, order_by=RANK),
            _options(SequenceSource(make_rows(10))),
        )

        assert _ids(connection) == ["r7", "r8"]
        assert connection.page_info.has_next_page is True

    async def test_page_ending_on_last_row(self, make_rows):
        after = CursorCodec.encode("r7", "Row", 7)

        connection = await paginate(
            FindOptions(first=2, after=after, order_by=RANK),
            _options(SequenceSource(make_rows(10))),
        )

        assert _ids(connection) == ["r8", "r9"]
        assert connection.page_info.has_next_page is False

    async def test_descending_order(self, make_rows):
        source = RecordingSource(make_rows(5))

        connection = await paginate(
            FindOptions(first=2, order_by=Order(field="rank", direction=OrderDirection.DESC)),
            _options(source),
        )

        assert source.fetch_calls[0][3] is OrderDirection.DESC
        assert _ids(connection) == ["r4", "r3"]
        assert _indices(connection) == [0, 1]

    async def test_walks_every_row_once(self, make_rows):
        """Following end_cursor visits each row exactly once, in order."""
        rows = make_rows(11)
        options = _options(SequenceSource(rows), validate_cursor=True)
        seen: list[str] = []
        after = None

        for _ in range(20):
            connection = await paginate(FindOptions(first=3, after=after, order_by=RANK), options)
            seen.extend(_ids(connection))
            if not connection.page_info.has_next_page:
                break
            after = connection.page_info.end_cursor

        assert seen == [row.id for row in rows]

    async def test_empty_source(self):
        connection = await paginate(FindOptions(first=3, order_by=RANK), _options(SequenceSource([])))

        assert connection.total_count == 0
        assert connection.edges == []
        assert connection.page_info.has_next_page is False
        assert connection.page_info.has_previous_page is False
        assert connection.page_info.start_cursor is None
        assert connection.page_info.end_cursor is None

    async def test_mapping_rows(self):
        rows = [{"id": 1, "rank": 2}, {"id": 2, "rank": 1}]

        connection = await paginate(FindOptions(first=5, order_by=RANK), _options(SequenceSource(rows)))

        assert [edge.node["id"] for edge in connection.edges] == [2, 1]
        assert CursorCodec.decode(connection.edges[0].cursor, "Row").id == "2"

    async def test_default_order(self, make_rows):
        source = RecordingSource(make_rows(3))

        await paginate(
            FindOptions(first=2),
            _options(source, default_order=Order(field="name", direction=OrderDirection.DESC)),
        )

        assert source.fetch_calls == [(0, 3, "row.name", OrderDirection.DESC)]

    async def test_find_options_order_wins_over_default(self, make_rows):
        source = RecordingSource(make_rows(3))

        await paginate(FindOptions(first=2, order_by=RANK), _options(source, default_order=Order(field="name")))

        assert source.fetch_calls[0][2] == "row.rank"


@pytest.mark.unit
class TestPaginateErrors:
    """Tests for paginate failure modes."""

    @pytest.mark.parametrize("first", [0, -1])
    async def test_non_positive_first(self, first, make_rows):
        source = RecordingSource(make_rows(3))

        with pytest.raises(InvalidPageSizeException):
            await paginate(FindOptions(first=first, order_by=RANK), _options(source))

        assert source.count_calls == 0

    async def test_large_first_is_not_capped_by_default(self, make_rows):
        connection = await paginate(FindOptions(first=120, order_by=RANK), _options(SequenceSource(make_rows(3))))

        assert _ids(connection) == ["r0", "r1", "r2"]
        assert connection.page_info.has_next_page is False

    async def test_first_above_options_maximum(self, make_rows):
        source = RecordingSource(make_rows(3))

        with pytest.raises(InvalidPageSizeException) as exc_info:
            await paginate(FindOptions(first=6, order_by=RANK), _options(source, max_first=5))

        assert exc_info.value.max_first == 5
        assert source.count_calls == 0

    async def test_first_at_options_maximum(self, make_rows):
        connection = await paginate(
            FindOptions(first=5, order_by=RANK),
            _options(SequenceSource(make_rows(3)), max_first=5),
        )

        assert len(connection.edges) == 3

    async def test_malformed_cursor(self, make_rows):
        with pytest.raises(MalformedCursorException):
            await paginate(
                FindOptions(first=2, after="garbage", order_by=RANK),
                _options(SequenceSource(make_rows(3))),
            )

    async def test_cursor_for_other_type(self, make_rows):
        after = CursorCodec.encode("r1", "User", 1)

        with pytest.raises(CursorTypeMismatchException):
            await paginate(FindOptions(first=2, after=after, order_by=RANK), _options(SequenceSource(make_rows(3))))

    async def test_missing_source(self):
        options = PaginateOptions(type="Row", alias="row", order_field_to_key=str)

        with pytest.raises(MissingQuerySourceException):
            await paginate(FindOptions(first=2, order_by=RANK), options)

    async def test_statement_without_session_is_missing_source(self, widget_model):
        from sqlalchemy import select

        options = PaginateOptions(type="Row", alias="row", order_field_to_key=str, statement=select(widget_model))

        with pytest.raises(MissingQuerySourceException):
            await paginate(FindOptions(first=2, order_by=RANK), options)

    async def test_unknown_order_field(self, make_rows):
        source = RecordingSource(make_rows(3))

        with pytest.raises(UnsupportedOrderFieldException) as exc_info:
            await paginate(FindOptions(first=2, order_by=Order(field="colour")), _options(source))

        assert exc_info.value.field == "colour"
        assert source.count_calls == 0

    @pytest.mark.parametrize(
        "mapper",
        [
            lambda field: {"rank": "rank"}[field],
            lambda field: int(field),
            lambda field: "",
        ],
    )
    async def test_mapping_rejections_become_unsupported_field(self, mapper, make_rows):
        options = PaginateOptions(
            type="Row",
            alias="row",
            order_field_to_key=mapper,
            source=SequenceSource(make_rows(3)),
        )

        with pytest.raises(UnsupportedOrderFieldException):
            await paginate(FindOptions(first=2, order_by=Order(field="colour")), options)

    async def test_no_order_at_all(self, make_rows):
        with pytest.raises(UnsupportedOrderFieldException):
            await paginate(FindOptions(first=2), _options(SequenceSource(make_rows(3))))


@pytest.mark.unit
class TestCursorValidation:
    """Tests for stale cursor detection."""

    async def test_stale_cursor_rejected(self, make_rows):
        after = CursorCodec.encode("gone", "Row", 2)

        with pytest.raises(StaleCursorException) as exc_info:
            await paginate(
                FindOptions(first=2, after=after, order_by=RANK),
                _options(SequenceSource(make_rows(10)), validate_cursor=True),
            )

        assert exc_info.value.cursor_id == "gone"
        assert exc_info.value.found_id == "r2"
        assert exc_info.value.status_code == 409

    async def test_stale_cursor_ignored_without_validation(self, make_rows):
        after = CursorCodec.encode("gone", "Row", 2)

        connection = await paginate(
            FindOptions(first=2, after=after, order_by=RANK),
            _options(SequenceSource(make_rows(10)), validate_cursor=False),
        )

        assert _ids(connection) == ["r3", "r4"]

    async def test_cursor_past_end_rejected(self, make_rows):
        after = CursorCodec.encode("r42", "Row", 42)

        with pytest.raises(StaleCursorException) as exc_info:
            await paginate(
                FindOptions(first=2, after=after, order_by=RANK),
                _options(SequenceSource(make_rows(5)), validate_cursor=True),
            )

        assert exc_info.value.found_id is None

    async def test_cursor_past_end_without_validation(self, make_rows):
        after = CursorCodec.encode("r42", "Row", 42)

        connection = await paginate(
            FindOptions(first=2, after=after, order_by=RANK),
            _options(SequenceSource(make_rows(5))),
        )

        assert connection.edges == []
        assert connection.total_count == 5
        assert connection.page_info.has_next_page is False
        assert connection.page_info.has_previous_page is True

    async def test_valid_cursor_passes_validation(self, make_rows):
        after = CursorCodec.encode("r2", "Row", 2)

        connection = await paginate(
            FindOptions(first=2, after=after, order_by=RANK),
            _options(SequenceSource(make_rows(10)), validate_cursor=True),
        )

        assert _ids(connection) == ["r3", "r4"]

    async def test_validation_default_from_settings(self, make_rows, monkeypatch):
        monkeypatch.setenv("PAGINATION_VALIDATE_CURSOR", "true")
        after = CursorCodec.encode("gone", "Row", 2)

        with pytest.raises(StaleCursorException):
            await paginate(
                FindOptions(first=2, after=after, order_by=RANK),
                _options(SequenceSource(make_rows(10))),
            )

    async def test_explicit_option_overrides_settings(self, make_rows, monkeypatch):
        monkeypatch.setenv("PAGINATION_VALIDATE_CURSOR", "true")
        after = CursorCodec.encode("gone", "Row", 2)

        connection = await paginate(
            FindOptions(first=2, after=after, order_by=RANK),
            _options(SequenceSource(make_rows(10)), validate_cursor=False),
        )

        assert len(connection.edges) == 2

    async def test_stale_cursor_logged(self, make_rows, caplog):
        after = CursorCodec.encode("gone", "Row", 2)

        with caplog.at_level(logging.WARNING, logger="relay_pagination.core.pagination.paginator"):
            with pytest.raises(StaleCursorException):
                await paginate(
                    FindOptions(first=2, after=after, order_by=RANK),
                    _options(SequenceSource(make_rows(10)), validate_cursor=True),
                )

        record = next(r for r in caplog.records if r.getMessage() == "Stale pagination cursor")
        assert record.cursor_id == "gone"
        assert record.entity_type == "Row"


class ContextCapturingSource(SequenceSource):
    """SequenceSource that remembers the log context seen by fetch()."""

    seen: dict | None = None

    async def fetch(self, skip, take, order_key, direction):
        ContextCapturingSource.seen = get_log_context()
        return await super().fetch(skip, take, order_key, direction)


@pytest.mark.unit
class TestPaginateLogContext:
    """paginate() tags log records emitted while it runs."""

    async def test_context_bound_during_fetch(self, make_rows):
        with log_context(request_id="req-1"):
            await paginate(FindOptions(first=2, order_by=RANK), _options(ContextCapturingSource(make_rows(3))))

            assert get_log_context() == {"request_id": "req-1"}

        assert ContextCapturingSource.seen == {
            "request_id": "req-1",
            "pagination_type": "Row",
            "order_key": "row.rank",
        }
        assert get_log_context() == {}

    async def test_context_restored_after_failure(self, make_rows):
        with pytest.raises(UnsupportedOrderFieldException):
            await paginate(FindOptions(first=2, order_by=Order(field="colour")), _options(SequenceSource(make_rows(3))))

        assert get_log_context() == {}
