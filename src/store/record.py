"""Record type and pluggable record ordering.

This module keeps ordering outside the record itself: callers pick a
sort key, defaulting to lexicographic record key order.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Callable, Iterable

from core.constants import ENVELOPE_DATA_FIELD, ENVELOPE_INDEXES_FIELD

RecordSortKey = Callable[["Record"], object]
_MISSING = object()


@dataclass(frozen=True)
class Record:
    """One stored document.

    Attributes:
        key: Unique key within the owning block.
        content: Raw stored text, or formatted JSON once hydrated.
    """

    key: str
    content: str


def by_key(record: Record) -> str:
    """Default sort key: the record key."""
    return record.key


def collection_sort_key(field_name: str) -> RecordSortKey:
    """Build a sort key that groups records by an envelope field.

    The field is looked up in the envelope ``Indexes`` first and then in
    ``Data``. Records are ordered by that value, then by record key.
    Unparseable records and records without the field sort first, then
    numeric values in numeric order, then every other value by its text.

    Args:
        field_name: Index or data field to group by.

    Returns:
        Sort key callable usable with ``sort_records``.
    """

    def _sort_key(record: Record) -> tuple[int, float, str, str]:
        rank, number, text = _group_value(_envelope_field(record.content, field_name))
        return (rank, number, text, record.key)

    return _sort_key


def sort_records(
    records: Iterable[Record], sort_key: RecordSortKey = by_key
) -> list[Record]:
    """Return records ordered by sort_key.

    Args:
        records: Records to order.
        sort_key: Ordering key; ties keep their input order.

    Returns:
        New ordered list.
    """
    return sorted(records, key=sort_key)  # type: ignore[arg-type]


def _group_value(value: object) -> tuple[int, float, str]:
    if value is _MISSING:
        return (0, 0.0, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == value:
        return (1, float(value), "")
    return (2, 0.0, str(value))


def _envelope_field(content: str, field_name: str) -> object:
    try:
        payload = json.loads(content)
    except (json.JSONDecodeError, RecursionError):
        return _MISSING
    if not isinstance(payload, dict):
        return _MISSING
    for section_name in (ENVELOPE_INDEXES_FIELD, ENVELOPE_DATA_FIELD):
        section = payload.get(section_name)
        if isinstance(section, dict) and field_name in section:
            return section[field_name]
    return _MISSING
