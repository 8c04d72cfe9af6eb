"""Core constants used across blockdb modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DB_PATH = Path(".blockdb")
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
RECORD_VERSION = "v2"
BLOCK_FILE_EXTENSION = ".json"
RECORD_INDENT = "\t"
ENCRYPTED_VALUE_PREFIX = "enc:v1:"
AES_NONCE_SIZE = 12
LOCK_NAME_PREFIX = "lock_"
LOCK_DATE_FORMAT = "%Y-%m-%d"
TABLE_CELL_MAX_WIDTH = 40
ENVELOPE_VERSION_FIELD = "Version"
ENVELOPE_INDEXES_FIELD = "Indexes"
ENVELOPE_DATA_FIELD = "Data"
