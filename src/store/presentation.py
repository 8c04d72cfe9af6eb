"""Display helpers for blocks and records.

This module formats byte sizes and projects hydrated record data into
rows for table-style output. It performs no rendering of its own.
"""

from __future__ import annotations

import json
from typing import Sequence

from core.constants import ENVELOPE_DATA_FIELD, TABLE_CELL_MAX_WIDTH
from core.logging_config import get_logger
from core.types import Table
from store.record import Record

_LOGGER = get_logger(__name__)

_SIZE_UNITS = (
    (1 << 40, "TB"),
    (1 << 30, "GB"),
    (1 << 20, "MB"),
    (1 << 10, "KB"),
    (1, "B"),
)


def format_bytes(byte_count: int) -> str:
    """Format a byte count for humans.

    One decimal place is kept and a trailing ``.0`` is trimmed, so
    1536 renders as ``1.5KB`` and 1024 as ``1KB``.

    Args:
        byte_count: Size in bytes.

    Returns:
        Human readable size string, ``"0"`` for zero.
    """
    if byte_count <= 0:
        return "0"
    for unit_size, unit in _SIZE_UNITS:
        if byte_count >= unit_size:
            value = f"{byte_count / unit_size:.1f}".removesuffix(".0")
            return f"{value}{unit}"
    return "0"


def build_table(records: Sequence[Record]) -> Table:
    """Project hydrated records' ``Data`` fields into a table.

    The first record's sorted data keys define the headers. Later records
    are projected onto those headers; missing keys render empty.

    Args:
        records: Hydrated records in display order.

    Returns:
        Table of display strings.
    """
    headers: tuple[str, ...] = ()
    rows: list[tuple[str, ...]] = []
    for index, record in enumerate(records):
        data = _record_data(record)
        if index == 0:
            headers = tuple(sorted(data))
        rows.append(tuple(_display_value(data, header) for header in headers))
    return Table(headers=headers, rows=tuple(rows))


def _record_data(record: Record) -> dict[str, object]:
    try:
        payload = json.loads(record.content)
    except json.JSONDecodeError as error:
        _LOGGER.warning("table_record_unparseable", record_key=record.key, error=error.msg)
        return {}
    except RecursionError:
        _LOGGER.warning(
            "table_record_unparseable", record_key=record.key, error="nested too deeply"
        )
        return {}
    data = payload.get(ENVELOPE_DATA_FIELD) if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        _LOGGER.warning("table_record_missing_data", record_key=record.key)
        return {}
    return data


def _display_value(data: dict[str, object], header: str) -> str:
    if header not in data:
        return ""
    value = data[header]
    if value is None:
        text = ""
    elif isinstance(value, str):
        text = value
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (dict, list)):
        text = json.dumps(value, separators=(",", ":"))
    else:
        text = str(value)
    return text[:TABLE_CELL_MAX_WIDTH]
