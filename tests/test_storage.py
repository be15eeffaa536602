from __future__ import annotations

import json
from pathlib import Path

import pytest

from pycarbook.exceptions import CarbookStorageError, StorageUnavailableError
from pycarbook.storage import FileStorage, MemoryStorage, UnavailableStorage


def test_memory_storage_round_trip() -> None:
    storage = MemoryStorage()

    assert storage.available
    assert storage.get_item("bookings") is None
    storage.set_item("bookings", "[]")
    assert storage.get_item("bookings") == "[]"


def test_memory_storage_copies_initial_items() -> None:
    initial = {"bookings": "[]"}
    storage = MemoryStorage(initial)
    storage.set_item("bookings", '[{"bookingId":"A"}]')

    assert initial == {"bookings": "[]"}


def test_unavailable_storage_raises_on_access() -> None:
    storage = UnavailableStorage()

    assert not storage.available
    with pytest.raises(StorageUnavailableError) as exc_info:
        storage.get_item("bookings")
    assert exc_info.value.key == "bookings"
    with pytest.raises(StorageUnavailableError):
        storage.set_item("bookings", "[]")


def test_file_storage_missing_file_is_empty(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "nested" / "storage.json")

    assert storage.available
    assert storage.get_item("bookings") is None


def test_file_storage_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    FileStorage(path).set_item("bookings", '[{"bookingId":"A"}]')
    FileStorage(path).set_item("purchaseOrders", "[]")

    reopened = FileStorage(path)
    assert reopened.get_item("bookings") == '[{"bookingId":"A"}]'
    assert reopened.get_item("purchaseOrders") == "[]"
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "bookings": '[{"bookingId":"A"}]',
        "purchaseOrders": "[]",
    }


def test_file_storage_leaves_no_temp_files(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    storage = FileStorage(path)
    storage.set_item("bookings", "[]")
    storage.set_item("bookings", '[{"bookingId":"A"}]')

    assert sorted(p.name for p in tmp_path.iterdir()) == ["storage.json"]


def test_file_storage_rejects_corrupted_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{oops", encoding="utf-8")

    with pytest.raises(CarbookStorageError):
        FileStorage(path).get_item("bookings")


def test_file_storage_rejects_non_object_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(CarbookStorageError):
        FileStorage(path).get_item("bookings")


def test_file_storage_blank_file_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("  \n", encoding="utf-8")

    assert FileStorage(path).get_item("bookings") is None


def test_file_storage_rejects_undecodable_bytes(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_bytes(b'{"purchaseOrders": "[\xff]"}')

    with pytest.raises(CarbookStorageError):
        FileStorage(path).get_item("purchaseOrders")


def test_file_storage_read_os_error_is_wrapped(tmp_path: Path) -> None:
    # A directory where the file should be.
    with pytest.raises(CarbookStorageError):
        FileStorage(tmp_path).get_item("bookings")


def test_file_storage_temp_file_failure_is_wrapped(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _no_temp_files(*_args: object, **_kwargs: object) -> tuple[int, str]:
        raise PermissionError("read-only file system")

    monkeypatch.setattr("pycarbook.storage.tempfile.mkstemp", _no_temp_files)
    path = tmp_path / "storage.json"

    with pytest.raises(CarbookStorageError):
        FileStorage(path).set_item("bookings", "[]")
    assert not path.exists()


def test_file_storage_unusable_parent_is_wrapped(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    storage = FileStorage(blocker / "storage.json")

    with pytest.raises(CarbookStorageError):
        storage._write_all({"bookings": "[]"})  # noqa: SLF001
