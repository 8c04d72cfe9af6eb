"""Public SDK surface for blockdb.

This module provides a stable import path for library users.
It re-exports the database facade, storage types and model helpers.
"""

from __future__ import annotations

from core.config import DBConfig
from model.base import TimeStampedModel
from model.contract import Model
from model.envelope import ModelEnvelope, wrap
from model.locking import LockProvider, format_lock_name
from model.schema import Schema
from store.block import Block
from store.database import Database
from store.dataset import Dataset
from store.presentation import build_table, format_bytes
from store.record import Record, collection_sort_key, sort_records

__all__ = [
    "Block",
    "DBConfig",
    "Database",
    "Dataset",
    "LockProvider",
    "Model",
    "ModelEnvelope",
    "Record",
    "Schema",
    "TimeStampedModel",
    "build_table",
    "collection_sort_key",
    "format_bytes",
    "format_lock_name",
    "sort_records",
    "wrap",
]
