"""Datasets: named groups of block files sharing a root and key.

A dataset resolves block paths, hands its key to blocks for decryption,
and records the diagnostics of the most recent block read.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import BLOCK_FILE_EXTENSION
from core.errors import BadBlockError
from core.logging_config import get_logger
from store import crypto
from store.backing_store import BackingStore, FileSystemBackingStore
from store.block import Block
from store.record import Record

_LOGGER = get_logger(__name__)


class Dataset:
    """Logical namespace of blocks on disk.

    Attributes:
        path: Database root directory.
        name: Dataset name; blocks live at ``<path>/<name>/<block>.json``.
        crypto_key: Optional key used to decrypt and encrypt records.
        backing_store: Byte-level collaborator for block files.
        bad_blocks: Block file paths that failed to decode on the last read.
        bad_records: Record keys that failed to decode on the last read.
    """

    def __init__(
        self,
        path: Path,
        name: str,
        crypto_key: str | None = None,
        backing_store: BackingStore | None = None,
    ) -> None:
        self.path = path
        self.name = name
        self.crypto_key = crypto_key
        self.backing_store: BackingStore = backing_store or FileSystemBackingStore()
        self.bad_blocks: list[str] = []
        self.bad_records: list[str] = []

    @property
    def directory(self) -> Path:
        return self.path / self.name

    def block_path(self, block_name: str) -> Path:
        """Return the file path of a block."""
        return self.directory / f"{block_name}{BLOCK_FILE_EXTENSION}"

    def block_names(self) -> list[str]:
        """Return names of block files on disk, sorted."""
        return self.backing_store.list_names(self.directory, BLOCK_FILE_EXTENSION)

    def blocks(self) -> list[Block]:
        """Return read handles for every block on disk."""
        return [self.block(block_name) for block_name in self.block_names()]

    def new_block(self, block_name: str) -> Block:
        return Block(self, block_name)

    def block(self, block_name: str) -> Block:
        """Return a read handle for a block.

        The handle knows its file size; records hydrate lazily and the
        write index stays empty. Use ``open_block`` before mutating.

        Args:
            block_name: Block identifier.

        Returns:
            Block bound to this dataset.
        """
        block = Block(self, block_name)
        block.file_size = self.backing_store.size(self.block_path(block_name))
        return block

    def open_block(self, block_name: str) -> Block:
        """Load a block's full index for mutation.

        Args:
            block_name: Block identifier.

        Returns:
            Block whose index mirrors the file, or an empty block if the
            file does not exist yet.

        Raises:
            BadBlockError: If the existing file is corrupt. Writing over it
                would discard data, so the error propagates.
        """
        block_file = self.block_path(block_name)
        if not self.backing_store.exists(block_file):
            return self.new_block(block_name)
        return Block.from_json(self, block_name, self.backing_store.read_bytes(block_file))

    def write_block(self, block: Block) -> None:
        """Flush a block's index to its file.

        Args:
            block: Block to persist.

        Raises:
            StoreError: If the backing store rejects the write.
        """
        block_file = self.block_path(block.name)
        payload = block.to_json().encode("utf-8")
        self.backing_store.write_bytes(block_file, payload)
        block.file_size = len(payload)
        _LOGGER.info(
            "block_written",
            block_file=str(block_file),
            record_count=block.size(),
            byte_size=block.file_size,
        )

    def read_records(self, block: Block) -> list[Record]:
        """Read a block and quarantine what fails to decode.

        ``bad_blocks`` and ``bad_records`` are reset first, so after the
        call they describe this read only.

        Args:
            block: Block to read.

        Returns:
            Hydrated records; empty when the whole block is bad.

        Raises:
            StoreError: If the block file exists but cannot be read.
        """
        self.bad_blocks = []
        self.bad_records = []
        try:
            result = block.read_block()
        except BadBlockError as error:
            _LOGGER.warning("bad_block_detected", block_file=error.block_file, error=str(error))
            self.bad_blocks.append(error.block_file)
            block.bad_records = []
            return []
        block.bad_records = list(result.bad_record_keys)
        block.file_size = result.byte_size
        self.bad_records.extend(result.bad_record_keys)
        return [Record(key=key, content=content) for key, content in result.records]

    def decrypt(self, text: str) -> str:
        """Decrypt stored text, passing it through when not decryptable."""
        if not self.crypto_key:
            return text
        return crypto.decrypt(self.crypto_key, text) or text

    def encrypt(self, text: str) -> str:
        """Encrypt record content with the dataset key.

        Raises:
            CryptoError: If the dataset has no key.
        """
        return crypto.encrypt(self.crypto_key or "", text)
