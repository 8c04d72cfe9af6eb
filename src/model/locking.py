"""Lock resource naming.

Lock acquisition is external. This module only derives the names a
caller must hold and defines the collaborator that holds them.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from core.constants import LOCK_DATE_FORMAT, LOCK_NAME_PREFIX
from model.contract import Model


class LockProvider(Protocol):
    """External mutual-exclusion collaborator."""

    def acquire(self, names: Sequence[str]) -> None:
        """Block until every named resource is held."""
        ...

    def release(self, names: Sequence[str]) -> None:
        """Release previously acquired resources."""
        ...


def format_lock_name(day: date, resource_id: str) -> str:
    """Return ``lock_<YYYY-MM-DD>_<resource_id>``.

    Args:
        day: Date the resource is booked or mutated for.
        resource_id: Identifier of the contended resource.

    Returns:
        Deterministic lock resource name.
    """
    return f"{LOCK_NAME_PREFIX}{day.strftime(LOCK_DATE_FORMAT)}_{resource_id}"


def required_lock_names(model: Model) -> list[str]:
    """Return a model's lock names in acquisition order.

    Names are de-duplicated and sorted so every caller acquires shared
    resources in the same order.

    Args:
        model: Model about to be written.

    Returns:
        Sorted lock names; empty when the model is not lockable.
    """
    if not model.is_lockable():
        return []
    return sorted(set(model.get_lock_file_names()))
