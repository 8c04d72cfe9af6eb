"""Unit tests for the database facade."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Sequence

import pytest

from core.config import DBConfig
from core.errors import (
    BadRecordError,
    CryptoError,
    ModelValidationError,
    RecordNotFoundError,
    StoreError,
)
from store.backing_store import FileSystemBackingStore
from store.database import Database
from tests.sample_models import BookingModel, GuestNoteModel, sample_booking


class _RecordingLockProvider:
    """Lock provider that records acquire and release calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def acquire(self, names: Sequence[str]) -> None:
        self.calls.append(("acquire", tuple(names)))

    def release(self, names: Sequence[str]) -> None:
        self.calls.append(("release", tuple(names)))


class _FailingBackingStore(FileSystemBackingStore):
    """Filesystem store whose writes always fail."""

    def write_bytes(self, path: Path, data: bytes) -> None:
        raise StoreError(f"write refused for {path}")


def _config(tmp_path: Path, encryption_key: str | None = None) -> DBConfig:
    return replace(
        DBConfig.from_env(), db_path=tmp_path, encryption_key=encryption_key, log_level="info"
    )


def test_insert_writes_block_file(tmp_path) -> None:
    """Inserting a model should create its block file."""
    database = Database(_config(tmp_path))

    database.insert(sample_booking())

    assert (tmp_path / "Booking" / "202610.json").exists()


def test_insert_then_get_returns_envelope(tmp_path) -> None:
    """Stored records should be returned as envelope payloads."""
    database = Database(_config(tmp_path))
    database.insert(sample_booking())

    payload = database.get("Booking", "202610", "b-001")

    assert payload["Version"] == "v2" and payload["Data"]["guest_name"] == "Ada"


def test_insert_captures_stamped_indexes(tmp_path) -> None:
    """Stored indexes should include the timestamp set during insert."""
    database = Database(_config(tmp_path))
    booking = sample_booking()
    database.insert(booking)

    payload = database.get("Booking", "202610", "b-001")

    assert payload["Indexes"]["created_at"] == booking.created_at.isoformat()


def test_insert_encrypts_when_model_requests(tmp_path) -> None:
    """Encrypted models should be stored as ciphertext and read back as JSON."""
    database = Database(_config(tmp_path, encryption_key="secret"))

    record = database.insert(GuestNoteModel(note_id="n-1", text="allergic to feathers"))

    assert record.content.startswith("enc:v1:")
    assert database.get("GuestNote", "notes", "n-1")["Data"]["text"] == "allergic to feathers"


def test_insert_encrypted_model_without_key_raises(tmp_path) -> None:
    """Encrypted models should not be stored in plaintext by accident."""
    database = Database(_config(tmp_path))

    with pytest.raises(CryptoError):
        database.insert(GuestNoteModel(note_id="n-1", text="secret"))


def test_insert_aborts_on_validation_failure(tmp_path) -> None:
    """Invalid models should raise before anything is written."""
    database = Database(_config(tmp_path))

    with pytest.raises(ModelValidationError):
        database.insert(BookingModel(booking_id="b-001"))

    assert not (tmp_path / "Booking").exists()


def test_insert_holds_locks_around_write(tmp_path) -> None:
    """Lockable models should acquire and release their lock names."""
    lock_provider = _RecordingLockProvider()
    database = Database(_config(tmp_path), lock_provider=lock_provider)

    database.insert(sample_booking())

    assert lock_provider.calls == [
        ("acquire", ("lock_2026-10-17_r1",)),
        ("release", ("lock_2026-10-17_r1",)),
    ]


def test_insert_releases_locks_when_write_fails(tmp_path) -> None:
    """Locks should be released even if the backing store fails."""
    lock_provider = _RecordingLockProvider()
    database = Database(
        _config(tmp_path),
        backing_store=_FailingBackingStore(),
        lock_provider=lock_provider,
    )

    with pytest.raises(StoreError):
        database.insert(sample_booking())

    assert [call[0] for call in lock_provider.calls] == ["acquire", "release"]


def test_insert_skips_locks_for_non_lockable_models(tmp_path) -> None:
    """Models that are not lockable should not touch the lock provider."""
    lock_provider = _RecordingLockProvider()
    database = Database(_config(tmp_path, encryption_key="secret"), lock_provider=lock_provider)

    database.insert(GuestNoteModel(note_id="n-1", text="hello"))

    assert lock_provider.calls == []


def test_second_insert_preserves_other_records(tmp_path) -> None:
    """Inserting into an existing block should keep its other records."""
    database = Database(_config(tmp_path))
    database.insert(sample_booking("b-001"))
    database.insert(sample_booking("b-002", "r2"))

    block = database.dataset("Booking").open_block("202610")

    assert block.keys() == ["b-001", "b-002"]


def test_delete_removes_record(tmp_path) -> None:
    """Deleted records should no longer be retrievable."""
    database = Database(_config(tmp_path))
    database.insert(sample_booking())

    database.delete("Booking", "202610", "b-001")

    with pytest.raises(RecordNotFoundError):
        database.get("Booking", "202610", "b-001")


def test_delete_missing_record_raises(tmp_path) -> None:
    """Deleting an absent key should raise RecordNotFoundError."""
    database = Database(_config(tmp_path))

    with pytest.raises(RecordNotFoundError):
        database.delete("Booking", "202610", "missing")


def test_lock_names_are_sorted_and_unique(tmp_path) -> None:
    """Lock names should come back in a stable acquisition order."""
    database = Database(_config(tmp_path))

    class _MultiRoomBooking(BookingModel):
        def get_lock_file_names(self) -> list[str]:
            return ["lock_2026-10-18_r2", "lock_2026-10-17_r1", "lock_2026-10-18_r2"]

    names = database.lock_names(_MultiRoomBooking(booking_id="b-9", room_id="r1"))

    assert names == ["lock_2026-10-17_r1", "lock_2026-10-18_r2"]


def test_dataset_names_lists_written_datasets(tmp_path) -> None:
    """dataset_names should list dataset directories under the root."""
    database = Database(_config(tmp_path, encryption_key="secret"))
    database.insert(sample_booking())
    database.insert(GuestNoteModel(note_id="n-1", text="hello"))

    assert database.dataset_names() == ["Booking", "GuestNote"]


def test_get_deeply_nested_record_raises_bad_record(tmp_path) -> None:
    """Stored content too deep to parse should raise BadRecordError."""
    database = Database(_config(tmp_path))
    block = database.dataset("Booking").new_block("202610")
    block.add("b-001", "[" * 200000)
    database.dataset("Booking").write_block(block)

    with pytest.raises(BadRecordError):
        database.get("Booking", "202610", "b-001")
