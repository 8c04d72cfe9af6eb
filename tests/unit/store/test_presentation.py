"""Unit tests for byte-size formatting and table projection."""

from __future__ import annotations

import json

import pytest

from store.presentation import build_table, format_bytes
from store.record import Record


@pytest.mark.parametrize(
    ("byte_count", "expected"),
    [
        (0, "0"),
        (1, "1B"),
        (1024, "1KB"),
        (1536, "1.5KB"),
        (1_073_741_824, "1GB"),
        (3 * (1 << 40), "3TB"),
    ],
)
def test_format_bytes(byte_count: int, expected: str) -> None:
    """Sizes should use one decimal with trailing .0 trimmed."""
    assert format_bytes(byte_count) == expected


def _data_record(key: str, data: dict[str, object]) -> Record:
    return Record(key=key, content=json.dumps({"Version": "v2", "Indexes": {}, "Data": data}))


def test_build_table_uses_first_record_headers() -> None:
    """Headers should come from the first record's sorted data keys."""
    records = [
        _data_record("a", {"x": 1, "y": 2}),
        _data_record("b", {"x": 3}),
        _data_record("c", {"y": 4, "x": 5}),
    ]

    table = build_table(records)

    assert table.headers == ("x", "y")


def test_build_table_renders_missing_keys_empty() -> None:
    """Later records should be projected onto the first record's headers."""
    records = [
        _data_record("a", {"x": 1, "y": 2}),
        _data_record("b", {"x": 3}),
        _data_record("c", {"y": 4, "x": 5}),
    ]

    table = build_table(records)

    assert table.rows[1] == ("3", "")


def test_build_table_truncates_long_values() -> None:
    """Cell values longer than 40 characters should be truncated."""
    table = build_table([_data_record("a", {"note": "n" * 60})])

    assert table.rows[0] == ("n" * 40,)


def test_build_table_handles_empty_input() -> None:
    """No records should give an empty table."""
    table = build_table([])

    assert (table.headers, table.rows) == ((), ())


def test_build_table_skips_deeply_nested_content() -> None:
    """Content too deep to parse should render as an empty row."""
    records = [_data_record("a", {"x": 1}), Record(key="b", content="[" * 200000)]

    table = build_table(records)

    assert table.rows == (("1",), ("",))
