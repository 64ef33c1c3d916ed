"""Unit tests for storage pool lifecycle and key operations."""

from __future__ import annotations

import struct
import threading

import pytest

from core.config import StorageConfig
from core.constants import MAX_VALUE_DEPTH
from core.errors import (
    StorageDeserializeError,
    StorageInvalidNameError,
    StorageIsClosedError,
    StorageIsOpenError,
    StorageMissingKeyError,
    StorageSerializeError,
)
from core.value_types import (
    ArrayValue,
    BooleanValue,
    HandleKind,
    HandleValue,
    NumberValue,
    Side,
    SideValue,
    StringValue,
    VoidValue,
)
from store.storage_codec import ValueTag
from store.storage_pool import StoragePool


def test_open_twice_fails_and_keeps_entries(tmp_path) -> None:
    """A second open should fail without touching the resident storage."""
    pool = StoragePool(tmp_path)
    pool.open("s")
    pool.set("s", "k", NumberValue(1))

    with pytest.raises(StorageIsOpenError):
        pool.open("s")

    assert pool.get("s", "k") == NumberValue(1)


@pytest.mark.parametrize(
    "operation",
    [
        lambda pool: pool.close("s"),
        lambda pool: pool.read("s"),
        lambda pool: pool.write("s"),
        lambda pool: pool.get("s", "k"),
        lambda pool: pool.set("s", "k", VoidValue()),
        lambda pool: pool.erase("s", "k"),
        lambda pool: pool.exists("s", "k"),
        lambda pool: pool.keys("s"),
    ],
)
def test_operations_on_closed_storage_fail(tmp_path, operation) -> None:
    """Every storage-bound operation should reject a closed name."""
    pool = StoragePool(tmp_path)

    with pytest.raises(StorageIsClosedError):
        operation(pool)

    assert pool.list_storages() == frozenset()


def test_write_close_open_read_round_trips(tmp_path) -> None:
    """A written value should be readable after reopening the storage."""
    pool = StoragePool(tmp_path)
    pool.open("s")
    pool.set("s", "k", NumberValue(5))
    pool.write("s")
    pool.close("s")
    pool.open("s")
    pool.read("s")

    assert pool.get("s", "k") == NumberValue(5)


def test_round_trip_preserves_every_variant(tmp_path) -> None:
    """All value variants should survive write and read unchanged."""
    entries = {
        "array": ArrayValue((NumberValue(1.5), ArrayValue((StringValue("x"),)))),
        "bool": BooleanValue(True),
        "side": SideValue(Side.AMBIENT_LIFE),
        "handle": HandleValue(HandleKind.SCRIPT_HANDLE, "<spawn>"),
        "void": VoidValue(),
    }
    pool = StoragePool(tmp_path)
    pool.open("s")
    for key, value in entries.items():
        pool.set("s", key, value)
    pool.write("s")
    pool.close("s")
    pool.open("s")
    pool.read("s")

    assert {key: pool.get("s", key) for key in pool.keys("s")} == entries


def test_close_discards_unsaved_changes(tmp_path) -> None:
    """Closing without writing should lose in-memory edits."""
    pool = StoragePool(tmp_path)
    pool.open("s")
    pool.set("s", "k", BooleanValue(True))
    pool.close("s")
    pool.open("s")

    assert not pool.exists("s", "k")


def test_read_replaces_in_memory_entries(tmp_path) -> None:
    """Reading should drop edits made since the last write."""
    pool = StoragePool(tmp_path)
    pool.open("s")
    pool.set("s", "kept", StringValue("on disk"))
    pool.write("s")
    pool.set("s", "lost", StringValue("memory only"))
    pool.read("s")

    assert pool.keys("s") == frozenset({"kept"})


def test_erase_missing_key_is_idempotent(tmp_path) -> None:
    """Erasing an absent key should succeed and leave it absent."""
    pool = StoragePool(tmp_path)
    pool.open("s")
    before = pool.exists("s", "missing")
    pool.erase("s", "missing")

    assert before is False and pool.exists("s", "missing") is False


def test_erase_removes_present_key(tmp_path) -> None:
    """Erasing a present key should remove it."""
    pool = StoragePool(tmp_path)
    pool.open("s")
    pool.set("s", "k", VoidValue())
    pool.erase("s", "k")

    assert not pool.exists("s", "k")


def test_get_missing_key_names_the_key(tmp_path) -> None:
    """Getting an absent key should raise with that key attached."""
    pool = StoragePool(tmp_path)
    pool.open("s")

    with pytest.raises(StorageMissingKeyError) as error_info:
        pool.get("s", "absent")

    assert error_info.value.key == "absent"


def test_set_overwrites_without_touching_file(tmp_path) -> None:
    """Setting should replace the value and never create the backing file."""
    pool = StoragePool(tmp_path)
    pool.open("s")
    pool.set("s", "k", NumberValue(1))
    pool.set("s", "k", NumberValue(2))

    assert pool.get("s", "k") == NumberValue(2) and not (tmp_path / "s").exists()


def test_list_tracks_open_storages(tmp_path) -> None:
    """Listing should reflect opens and closes."""
    pool = StoragePool(tmp_path)
    pool.open("a")
    pool.open("b")
    both = pool.list_storages()
    pool.close("a")

    assert both == frozenset({"a", "b"}) and pool.list_storages() == frozenset({"b"})


def test_read_missing_file_raises_deserialize(tmp_path) -> None:
    """Reading without a backing file should fail and keep the storage open."""
    pool = StoragePool(tmp_path)
    pool.open("s")

    with pytest.raises(StorageDeserializeError):
        pool.read("s")

    assert pool.list_storages() == frozenset({"s"})


def test_read_corrupt_file_raises_deserialize(tmp_path) -> None:
    """Reading a malformed file should fail and keep current entries."""
    (tmp_path / "s").write_bytes(b"not a storage file")
    pool = StoragePool(tmp_path)
    pool.open("s")
    pool.set("s", "k", BooleanValue(False))

    with pytest.raises(StorageDeserializeError):
        pool.read("s")

    assert pool.get("s", "k") == BooleanValue(False)


def test_write_into_missing_directory_raises_serialize(tmp_path) -> None:
    """Writing under a missing root should surface as a serialize failure."""
    pool = StoragePool(tmp_path / "missing")
    pool.open("s")

    with pytest.raises(StorageSerializeError):
        pool.write("s")

    assert pool.exists("s", "anything") is False


def test_write_unencodable_text_keeps_previous_file(tmp_path) -> None:
    """An encoding failure should leave the last written file intact."""
    pool = StoragePool(tmp_path)
    pool.open("s")
    pool.write("s")
    previous = (tmp_path / "s").read_bytes()
    pool.set("s", "k", StringValue("\udc80"))

    with pytest.raises(StorageSerializeError):
        pool.write("s")

    assert (tmp_path / "s").read_bytes() == previous


@pytest.mark.parametrize("name", ["", ".", "..", "../escape", "a/b", "a\\b", "nul\x00"])
def test_open_rejects_names_outside_root(tmp_path, name: str) -> None:
    """Names that are not a single path component should be refused."""
    pool = StoragePool(tmp_path)

    with pytest.raises(StorageInvalidNameError):
        pool.open(name)

    assert pool.list_storages() == frozenset()


def test_storage_path_joins_root_and_name(tmp_path) -> None:
    """Backing files should live directly under the pool root."""
    pool = StoragePool(tmp_path)

    assert pool.storage_path("spam") == tmp_path / "spam"


def test_from_config_uses_storage_root(tmp_path) -> None:
    """Pools built from config should persist under the configured root."""
    pool = StoragePool.from_config(StorageConfig(storage_root=tmp_path, log_level="WARNING"))

    assert pool.root == tmp_path


def test_concurrent_open_has_single_winner(tmp_path) -> None:
    """Racing opens for one name should yield exactly one success."""
    pool = StoragePool(tmp_path)
    thread_count = 16
    barrier = threading.Barrier(thread_count)
    outcomes: list[str] = []
    outcomes_lock = threading.Lock()

    def open_storage() -> None:
        barrier.wait()
        try:
            pool.open("s")
            outcome = "opened"
        except StorageIsOpenError:
            outcome = "rejected"
        with outcomes_lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=open_storage) for _ in range(thread_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert outcomes.count("opened") == 1 and outcomes.count("rejected") == thread_count - 1


def test_read_overly_nested_file_raises_deserialize(tmp_path) -> None:
    """Reading a file nested past the depth limit should fail cleanly."""
    levels = MAX_VALUE_DEPTH + 2
    nested = (bytes([ValueTag.ARRAY]) + struct.pack("<I", 1)) * (levels - 1)
    nested += bytes([ValueTag.ARRAY]) + struct.pack("<I", 0)
    payload = b"ASTG\x01" + struct.pack("<I", 1) + struct.pack("<I", 1) + b"k" + nested
    (tmp_path / "s").write_bytes(payload)
    pool = StoragePool(tmp_path)
    pool.open("s")

    with pytest.raises(StorageDeserializeError, match="nesting exceeds"):
        pool.read("s")

    assert pool.keys("s") == frozenset()
