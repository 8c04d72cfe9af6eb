"""Block files and their in-memory record index.

A block is one JSON file mapping record keys to stored strings. The
key -> Record mapping is authoritative for writes. The hydrated
``records`` list is a lazily loaded, read-oriented projection of what the
file held when it was first read.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from core.constants import RECORD_INDENT
from core.errors import BadBlockError, BadRecordError, RecordNotFoundError
from core.logging_config import get_logger
from core.types import BlockReadResult, Table
from store.presentation import build_table, format_bytes
from store.record import Record, collection_sort_key, sort_records

if TYPE_CHECKING:
    from store.dataset import Dataset

_LOGGER = get_logger(__name__)


class Block:
    """One block file of a dataset.

    Attributes:
        dataset: Owning dataset, used for paths, I/O and decryption.
        name: Block identifier, also the file stem.
        file_size: Byte size of the physical file when last read or written.
        records: Hydrated records, populated by ``load_records``.
        bad_records: Keys that failed to decode during hydration.
    """

    def __init__(self, dataset: "Dataset", name: str) -> None:
        self.dataset = dataset
        self.name = name
        self.file_size = 0
        self.records: list[Record] = []
        self.bad_records: list[str] = []
        self._recs: dict[str, Record] = {}
        self._loaded = False

    @classmethod
    def from_json(cls, dataset: "Dataset", name: str, data: bytes | str) -> "Block":
        """Materialize a block index from serialized file contents.

        Args:
            dataset: Owning dataset.
            name: Block identifier.
            data: Serialized key -> string mapping.

        Returns:
            Block whose index holds every stored entry.

        Raises:
            BadBlockError: If data is not a JSON object of strings.
        """
        block = cls(dataset, name)
        raw = _decode_block_mapping(data, str(dataset.block_path(name)))
        for key, value in raw.items():
            if not isinstance(value, str):
                raise BadBlockError(
                    f"Record '{key}' is not a string value", str(dataset.block_path(name))
                )
            block.add(key, value)
        block.file_size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
        return block

    def to_json(self) -> str:
        """Serialize the index as a flat key -> raw content object."""
        raw = {key: record.content for key, record in self._recs.items()}
        return json.dumps(raw, indent=2, sort_keys=True, ensure_ascii=False) + "\n"

    def add(self, key: str, value: str) -> None:
        """Insert or overwrite a record in the index."""
        self._recs[key] = Record(key=key, content=value)

    def get(self, key: str) -> Record:
        """Return the indexed record for key.

        Raises:
            RecordNotFoundError: If key is absent.
        """
        if key not in self._recs:
            raise RecordNotFoundError(key)
        return self._recs[key]

    def delete(self, key: str) -> None:
        """Remove the indexed record for key.

        Raises:
            RecordNotFoundError: If key is absent.
        """
        if key not in self._recs:
            raise RecordNotFoundError(key)
        del self._recs[key]

    def keys(self) -> list[str]:
        return sorted(self._recs)

    def size(self) -> int:
        """Return the number of records in the live index."""
        return len(self._recs)

    def record_count(self) -> int:
        """Hydrate from disk if needed and return the hydrated count."""
        self.load_records()
        return len(self.records)

    def load_records(self) -> None:
        """Hydrate ``records`` from the block file, once per instance."""
        if self._loaded:
            return
        self.records = self.dataset.read_records(self)
        self._loaded = True

    def read_block(self) -> BlockReadResult:
        """Read and decode the block file.

        Entries are visited in lexicographic key order. Each is decrypted
        when the dataset has a key, parsed as JSON, and re-indented. An
        entry that fails to parse is skipped and its key reported; the
        remaining entries are still decoded.

        Returns:
            Decoded records, bad record keys and file size.

        Raises:
            BadBlockError: If the file is not a JSON object.
            StoreError: If the file exists but cannot be read.
        """
        block_file = self.dataset.block_path(self.name)
        backing_store = self.dataset.backing_store
        if not backing_store.exists(block_file):
            _LOGGER.debug("block_missing", block_file=str(block_file))
            return BlockReadResult(str(block_file), (), (), 0)
        data = backing_store.read_bytes(block_file)
        raw = _decode_block_mapping(data, str(block_file))
        records: list[tuple[str, str]] = []
        bad_keys: list[str] = []
        for key in sorted(raw):
            try:
                records.append((key, self._format_entry(key, raw[key])))
            except BadRecordError as error:
                _LOGGER.warning(
                    "bad_record_detected",
                    block_file=str(block_file),
                    record_key=error.record_key,
                    error=str(error),
                )
                bad_keys.append(error.record_key)
        _LOGGER.info(
            "block_read",
            block_file=str(block_file),
            record_count=len(records),
            bad_record_count=len(bad_keys),
        )
        return BlockReadResult(str(block_file), tuple(records), tuple(bad_keys), len(data))

    def grouped_records(self, field_name: str) -> list[Record]:
        """Return indexed records grouped by an envelope field, then by key."""
        decrypted = [
            Record(key=record.key, content=self.dataset.decrypt(record.content))
            for record in self._recs.values()
        ]
        return sort_records(decrypted, collection_sort_key(field_name))

    def table(self) -> Table:
        """Return a tabular projection of the hydrated records."""
        self.load_records()
        return build_table(self.records)

    def human_size(self) -> str:
        return format_bytes(self.file_size)

    def _format_entry(self, key: str, value: object) -> str:
        if not isinstance(value, str):
            raise BadRecordError(f"expected string value, got {type(value).__name__}", key)
        text = self.dataset.decrypt(value)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as error:
            raise BadRecordError(error.msg, key) from error
        except RecursionError as error:
            raise BadRecordError("JSON nested too deeply", key) from error
        if not isinstance(parsed, dict):
            raise BadRecordError(f"expected JSON object, got {type(parsed).__name__}", key)
        return json.dumps(parsed, indent=RECORD_INDENT, ensure_ascii=False)


def _decode_block_mapping(data: bytes | str, block_file: str) -> dict[str, object]:
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise BadBlockError(str(error), block_file) from error
    except RecursionError as error:
        raise BadBlockError("JSON nested too deeply", block_file) from error
    if not isinstance(payload, dict):
        raise BadBlockError("expected JSON object at top level", block_file)
    return payload
