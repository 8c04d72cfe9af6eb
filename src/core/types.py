"""Shared typed models.

This module defines immutable data models passed between the store,
presentation helpers, and CLI layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BlockReadResult:
    """Outcome of decoding one block file.

    Attributes:
        block_file: Path of the block file that was read.
        records: Hydrated records as ``(key, formatted_json)`` pairs in key order.
        bad_record_keys: Keys whose content could not be parsed.
        byte_size: Size of the block file in bytes.
    """

    block_file: str
    records: tuple[tuple[str, str], ...]
    bad_record_keys: tuple[str, ...]
    byte_size: int


@dataclass(frozen=True)
class Table:
    """Tabular projection of hydrated record data.

    Attributes:
        headers: Column names taken from the first record.
        rows: One row of display strings per record.
    """

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
