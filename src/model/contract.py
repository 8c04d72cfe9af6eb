"""Capability contract for persistable domain objects."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from model.schema import Schema


@runtime_checkable
class Model(Protocol):
    """Operations a domain object supplies to be stored."""

    def get_schema(self) -> "Schema":
        """Return the indexing and placement metadata for this instance."""
        ...

    def validate(self) -> None:
        """Check business rules.

        Raises:
            ModelValidationError: If the instance must not be stored.
        """
        ...

    def is_lockable(self) -> bool:
        """Return whether writes require named locks."""
        ...

    def get_lock_file_names(self) -> list[str]:
        """Return lock resource names derived from instance state."""
        ...

    def should_encrypt(self) -> bool:
        """Return whether stored content must be encrypted."""
        ...

    def before_insert(self) -> None:
        """Run just before indexes are captured and the record is written."""
        ...
