"""Schema metadata attached to domain objects.

A schema names where an instance is stored (dataset, block, record key)
and which of its fields are indexed. Values are read from the bound
instance on every access, so they always reflect its current state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from core.errors import ModelError


@dataclass
class Schema:
    """Placement and index declaration for one model instance.

    Attributes:
        dataset: Dataset the instance is stored in.
        block_field: Attribute or property naming the block.
        record_field: Attribute or property naming the record key.
        index_fields: Attributes captured as indexes on insert.
    """

    dataset: str
    block_field: str
    record_field: str
    index_fields: tuple[str, ...] = ()
    _owner: Any = field(default=None, repr=False, compare=False)

    def bind(self, owner: Any) -> "Schema":
        """Attach the schema to the instance it describes."""
        self._owner = owner
        return self

    @property
    def block_name(self) -> str:
        return self._required_text(self.block_field)

    @property
    def record_key(self) -> str:
        return self._required_text(self.record_field)

    @property
    def indexes(self) -> dict[str, object]:
        """Return index name -> current value for the bound instance."""
        owner = self._require_owner()
        values: dict[str, object] = {}
        for name in self.index_fields:
            try:
                values[name] = storable_value(getattr(owner, name))
            except AttributeError as error:
                raise ModelError(
                    f"Schema index field '{name}' does not exist on "
                    f"{type(owner).__name__} for dataset '{self.dataset}'. "
                    "Fix index_fields in the schema declaration."
                ) from error
        return values

    def _required_text(self, attribute: str) -> str:
        value = getattr(self._require_owner(), attribute)
        text = str(storable_value(value) or "")
        if not text:
            raise ModelError(
                f"Schema field '{attribute}' is empty for dataset '{self.dataset}'. "
                "Set it before inserting the model."
            )
        return text

    def _require_owner(self) -> Any:
        if self._owner is None:
            raise ModelError(
                f"Schema for dataset '{self.dataset}' is not bound to a model. "
                "Call bind() when constructing the model."
            )
        return self._owner


def storable_value(value: object) -> object:
    """Convert dates to ISO strings; other values pass through."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
