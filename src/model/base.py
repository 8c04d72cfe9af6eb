"""Default model behaviour with creation and update timestamps."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from core.errors import ModelError
from model.schema import Schema


@dataclass
class TimeStampedModel:
    """Base for dataclass domain models.

    Subclasses bind a ``Schema`` in ``__post_init__`` and override the
    capability methods they need. Validation only checks state; stamping
    happens in ``before_insert``.

    Attributes:
        created_at: Set on first insert, then preserved.
        updated_at: Refreshed on every insert.
    """

    created_at: datetime | None = None
    updated_at: datetime | None = None

    def get_schema(self) -> Schema:
        schema = getattr(self, "_schema", None)
        if schema is None:
            raise ModelError(
                f"{type(self).__name__} has no schema. Bind one in __post_init__."
            )
        return schema

    def validate(self) -> None:
        return None

    def is_lockable(self) -> bool:
        return False

    def get_lock_file_names(self) -> list[str]:
        return []

    def should_encrypt(self) -> bool:
        return False

    def stamp_timestamps(self) -> None:
        """Set ``created_at`` if unset and refresh ``updated_at``."""
        stamp_time = datetime.now(timezone.utc)
        if self.created_at is None:
            self.created_at = stamp_time
        self.updated_at = stamp_time

    def before_insert(self) -> None:
        self.stamp_timestamps()
