"""Database facade over datasets, blocks and model envelopes.

This module exposes the insert, get and delete workflows that turn
domain models into stored records and back, and names the locks a
caller's lock provider must hold around a write.
"""

from __future__ import annotations

import json

from core.config import DBConfig
from core.errors import BadRecordError
from core.logging_config import configure_logging, get_logger
from model.contract import Model
from model.envelope import wrap
from model.locking import LockProvider, required_lock_names
from store.backing_store import BackingStore, FileSystemBackingStore
from store.dataset import Dataset
from store.record import Record

_LOGGER = get_logger(__name__)


class Database:
    """Primary entry point for storing and reading models."""

    def __init__(
        self,
        config: DBConfig | None = None,
        backing_store: BackingStore | None = None,
        lock_provider: LockProvider | None = None,
    ) -> None:
        """Create a database handle.

        Args:
            config: Optional runtime configuration; read from env when omitted.
            backing_store: Optional byte store; local filesystem by default.
            lock_provider: Optional external lock collaborator used by ``insert``.
        """
        self._config = config or DBConfig.from_env()
        self._backing_store: BackingStore = backing_store or FileSystemBackingStore()
        self._lock_provider = lock_provider
        self._datasets: dict[str, Dataset] = {}
        configure_logging(self._config.log_level)

    @property
    def config(self) -> DBConfig:
        return self._config

    def dataset(self, dataset_name: str) -> Dataset:
        """Return the dataset handle for a name, creating it on first use."""
        if dataset_name not in self._datasets:
            self._datasets[dataset_name] = Dataset(
                path=self._config.db_path,
                name=dataset_name,
                crypto_key=self._config.encryption_key,
                backing_store=self._backing_store,
            )
        return self._datasets[dataset_name]

    def dataset_names(self) -> list[str]:
        return self._backing_store.list_names(self._config.db_path)

    def lock_names(self, model: Model) -> list[str]:
        """Return the lock names a write of model requires, in acquisition order."""
        return required_lock_names(model)

    def insert(self, model: Model) -> Record:
        """Validate, stamp, serialize and store a model.

        Args:
            model: Domain model to persist.

        Returns:
            The stored record as written to the block index.

        Raises:
            ModelError: If validation, the lifecycle hook, or serialization fails.
            BadBlockError: If the target block file is corrupt.
            CryptoError: If the model requires encryption and no key is set.
            StoreError: If the block cannot be written.
        """
        envelope = wrap(model)
        envelope.validate()
        envelope.before_insert()
        schema = envelope.get_schema()
        dataset = self.dataset(schema.dataset)
        record_key = schema.record_key
        block_name = schema.block_name
        content = envelope.to_json()
        if envelope.should_encrypt():
            content = dataset.encrypt(content)
        lock_names = self.lock_names(envelope)
        if self._lock_provider is not None and lock_names:
            self._lock_provider.acquire(lock_names)
        try:
            block = dataset.open_block(block_name)
            block.add(record_key, content)
            dataset.write_block(block)
        finally:
            if self._lock_provider is not None and lock_names:
                self._lock_provider.release(lock_names)
        _LOGGER.info(
            "record_inserted",
            dataset=dataset.name,
            block=block_name,
            record_key=record_key,
            encrypted=envelope.should_encrypt(),
            lock_names=lock_names,
        )
        return block.get(record_key)

    def get(self, dataset_name: str, block_name: str, record_key: str) -> dict[str, object]:
        """Load one record's envelope payload.

        Args:
            dataset_name: Dataset identifier.
            block_name: Block identifier.
            record_key: Record key within the block.

        Returns:
            Parsed envelope with ``Version``, ``Indexes`` and ``Data``.

        Raises:
            RecordNotFoundError: If the key is absent.
            BadRecordError: If the stored content is not valid JSON.
            BadBlockError: If the block file is corrupt.
        """
        dataset = self.dataset(dataset_name)
        record = dataset.open_block(block_name).get(record_key)
        try:
            payload = json.loads(dataset.decrypt(record.content))
        except json.JSONDecodeError as error:
            raise BadRecordError(error.msg, record_key) from error
        except RecursionError as error:
            raise BadRecordError("JSON nested too deeply", record_key) from error
        if not isinstance(payload, dict):
            raise BadRecordError("expected JSON object", record_key)
        return payload

    def delete(self, dataset_name: str, block_name: str, record_key: str) -> None:
        """Remove a record and flush its block.

        Raises:
            RecordNotFoundError: If the key is absent.
            BadBlockError: If the block file is corrupt.
        """
        dataset = self.dataset(dataset_name)
        block = dataset.open_block(block_name)
        block.delete(record_key)
        dataset.write_block(block)
        _LOGGER.info(
            "record_deleted", dataset=dataset_name, block=block_name, record_key=record_key
        )
