"""Backing store collaborator for block file bytes.

This module defines the byte-level interface the block engine reads and
writes through, plus the default local filesystem implementation.
Commit and synchronization semantics belong to whatever wraps it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from core.errors import StoreError


class BackingStore(Protocol):
    """Byte source and sink for block files."""

    def read_bytes(self, path: Path) -> bytes:
        """Return file bytes at path."""
        ...

    def write_bytes(self, path: Path, data: bytes) -> None:
        """Replace file contents at path."""
        ...

    def exists(self, path: Path) -> bool:
        """Return whether a file exists at path."""
        ...

    def size(self, path: Path) -> int:
        """Return file size in bytes, 0 when missing."""
        ...

    def list_names(self, directory: Path, suffix: str = "") -> list[str]:
        """Return sorted entry names under directory.

        With a suffix, only files ending in it are listed and the suffix is
        stripped. Without one, only subdirectories are listed.
        """
        ...


class FileSystemBackingStore:
    """Local filesystem backing store."""

    def read_bytes(self, path: Path) -> bytes:
        """Read a file.

        Args:
            path: File path.

        Returns:
            Raw file bytes.

        Raises:
            StoreError: If the file cannot be read.
        """
        try:
            return path.read_bytes()
        except OSError as error:
            raise StoreError(
                f"Failed to read block file {path}: {error}. Check the path and permissions."
            ) from error

    def write_bytes(self, path: Path, data: bytes) -> None:
        """Write a file, creating parent directories.

        Args:
            path: File path.
            data: Serialized bytes.

        Raises:
            StoreError: If the file cannot be written.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as error:
            raise StoreError(
                f"Failed to write block file {path}: {error}. Check disk space and permissions."
            ) from error

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def size(self, path: Path) -> int:
        if not path.is_file():
            return 0
        return path.stat().st_size

    def list_names(self, directory: Path, suffix: str = "") -> list[str]:
        if not directory.is_dir():
            return []
        if not suffix:
            return sorted(entry.name for entry in directory.iterdir() if entry.is_dir())
        return sorted(
            entry.name[: -len(suffix)]
            for entry in directory.iterdir()
            if entry.is_file() and entry.name.endswith(suffix)
        )
