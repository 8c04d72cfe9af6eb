"""blockdb exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class BlockDBError(Exception):
    """Base exception for all blockdb failures."""


class ConfigError(BlockDBError):
    """Raised for invalid runtime configuration."""


class StoreError(BlockDBError):
    """Raised for block file and dataset storage failures."""


class RecordNotFoundError(StoreError, KeyError):
    """Raised when a record key is absent from a block index."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Record key '{key}' does not exist in block.")
        self.key = key

    def __str__(self) -> str:
        return str(self.args[0])


class BadBlockError(StoreError):
    """Raised when a block file's top-level JSON structure cannot be decoded."""

    def __init__(self, message: str, block_file: str) -> None:
        super().__init__(f"{message} - {block_file}")
        self.block_file = block_file


class BadRecordError(StoreError):
    """Raised when a single record's content cannot be parsed as JSON."""

    def __init__(self, message: str, record_key: str) -> None:
        super().__init__(f"{message} - {record_key}")
        self.record_key = record_key


class CryptoError(BlockDBError):
    """Raised for unusable encryption key material."""


class ModelError(BlockDBError):
    """Raised for domain model lifecycle failures."""


class ModelValidationError(ModelError):
    """Raised when a domain model rejects its own state."""
