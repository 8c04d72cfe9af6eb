"""Versioned storage envelope around domain models.

The envelope delegates every contract operation to the wrapped model.
It adds a format version and, on ``before_insert``, a fresh snapshot of
the model's indexes taken after the model's own hook has run.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import date, datetime
import json
from typing import Any

from core.constants import (
    ENVELOPE_DATA_FIELD,
    ENVELOPE_INDEXES_FIELD,
    ENVELOPE_VERSION_FIELD,
    RECORD_VERSION,
)
from core.errors import ModelError
from model.contract import Model
from model.schema import Schema


@dataclass
class ModelEnvelope:
    """Storage wrapper for one domain model.

    Attributes:
        version: Storage format version.
        data: Wrapped domain model.
        indexes: Index snapshot captured by ``before_insert``.
    """

    version: str
    data: Model
    indexes: dict[str, object] = field(default_factory=dict)

    def get_schema(self) -> Schema:
        return self.data.get_schema()

    def validate(self) -> None:
        self.data.validate()

    def is_lockable(self) -> bool:
        return self.data.is_lockable()

    def get_lock_file_names(self) -> list[str]:
        return self.data.get_lock_file_names()

    def should_encrypt(self) -> bool:
        return self.data.should_encrypt()

    def before_insert(self) -> None:
        """Run the model hook, then recapture indexes from its schema."""
        self.data.before_insert()
        self.indexes = dict(self.get_schema().indexes)

    def to_payload(self) -> dict[str, object]:
        return {
            ENVELOPE_VERSION_FIELD: self.version,
            ENVELOPE_INDEXES_FIELD: dict(self.indexes),
            ENVELOPE_DATA_FIELD: model_data(self.data),
        }

    def to_json(self) -> str:
        """Serialize the envelope payload.

        Raises:
            ModelError: If the model holds values JSON cannot represent.
        """
        try:
            return json.dumps(self.to_payload(), default=_json_default, ensure_ascii=False)
        except (TypeError, ValueError) as error:
            raise ModelError(f"Cannot serialize {type(self.data).__name__}: {error}.") from error


def wrap(model: Model) -> ModelEnvelope:
    """Wrap a model with the current storage format version."""
    return ModelEnvelope(version=RECORD_VERSION, data=model)


def model_data(model: Any) -> dict[str, object]:
    """Return the public fields of a domain model.

    Dataclass models contribute their declared fields; other objects
    contribute instance attributes. Names starting with an underscore
    are never stored.

    Args:
        model: Domain model instance.

    Returns:
        Field name -> value mapping.
    """
    if is_dataclass(model) and not isinstance(model, type):
        values = asdict(model)
    else:
        values = dict(vars(model))
    return {name: value for name, value in values.items() if not name.startswith("_")}


def _json_default(value: object) -> object:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
