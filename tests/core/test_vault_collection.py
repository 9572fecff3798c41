"""Tests for the vault registry and document uniqueness rules."""

import json
import threading
import time

import pytest

from core.errors import (
    DOCUMENT_NOT_FOUND_MSG,
    VAULT_NOT_FOUND_MSG,
    DocumentNotFoundError,
    DuplicateDocumentError,
    DuplicateVaultError,
    ErrorKind,
    VaultNotFoundError,
)
from core.schemas import StructuredDocument
from core.storage.base import Provider, Store, StorageError
from core.storage.memstore import MemStore, MemStoreProvider
from core.vault_collection import VaultCollection


class BrokenStore(Store):
    """Store whose reads fail with a backend error."""

    def __init__(self) -> None:
        self.puts = 0

    def get(self, key: str) -> bytes:
        raise StorageError("connection reset")

    def put(self, key: str, value: bytes) -> None:
        self.puts += 1


class SlowStore(MemStore):
    """MemStore whose reads take long enough for threads to interleave."""

    def __init__(self) -> None:
        super().__init__()
        self.puts = 0

    def get(self, key: str) -> bytes:
        time.sleep(0.05)
        return super().get(key)

    def put(self, key: str, value: bytes) -> None:
        self.puts += 1
        super().put(key, value)


class SingleStoreProvider(Provider):
    def __init__(self, store: Store) -> None:
        self.store = store
        self.opened: list[str] = []

    def open_store(self, name: str) -> Store:
        self.opened.append(name)
        return self.store


class FailingProvider(Provider):
    def open_store(self, name: str) -> Store:
        raise StorageError(f"cannot open {name}")


# ━━━ create_vault ━━━


def test_create_vault_registers_id(collection):
    collection.create_vault("v1")
    assert collection.vault_ids() == ["v1"]


def test_create_vault_twice_is_conflict(collection):
    collection.create_vault("v1")
    with pytest.raises(DuplicateVaultError) as excinfo:
        collection.create_vault("v1")
    assert excinfo.value.kind is ErrorKind.CONFLICT
    assert str(excinfo.value) == "vault already exists"
    assert collection.vault_ids() == ["v1"]


def test_create_vault_provider_failure_leaves_registry_unchanged():
    collection = VaultCollection(FailingProvider())
    with pytest.raises(StorageError) as excinfo:
        collection.create_vault("v1")
    assert excinfo.value.kind is ErrorKind.UNCLASSIFIED
    assert collection.vault_ids() == []


def test_concurrent_create_vault_opens_store_once():
    provider = SingleStoreProvider(MemStore())
    collection = VaultCollection(provider)
    errors = []

    def create():
        try:
            collection.create_vault("shared")
        except DuplicateVaultError as exc:
            errors.append(exc)

    threads = [threading.Thread(target=create) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert provider.opened == ["shared"]
    assert len(errors) == 7


class GatedOpenProvider(MemStoreProvider):
    """Provider whose open of ``slow`` blocks until the test releases it."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def open_store(self, name: str) -> Store:
        if name == "slow":
            self.entered.set()
            self.release.wait(timeout=5)
        return super().open_store(name)


def test_slow_vault_open_does_not_block_other_vaults():
    provider = GatedOpenProvider()
    collection = VaultCollection(provider)
    collection.create_vault("fast")
    collection.create_document("fast", StructuredDocument(id="d1"))

    opener = threading.Thread(target=collection.create_vault, args=("slow",))
    opener.start()
    assert provider.entered.wait(timeout=5)

    results = []
    reader = threading.Thread(
        target=lambda: results.append(collection.read_document("fast", "d1"))
    )
    reader.start()
    reader.join(timeout=1)
    blocked = reader.is_alive()

    with pytest.raises(DuplicateVaultError):
        collection.create_vault("slow")

    provider.release.set()
    opener.join(timeout=5)
    reader.join(timeout=5)

    assert not blocked
    assert json.loads(results[0])["id"] == "d1"
    assert collection.vault_ids() == ["fast", "slow"]


# ━━━ create_document / read_document ━━━


def test_unknown_vault_is_not_found(collection):
    with pytest.raises(VaultNotFoundError) as excinfo:
        collection.create_document("missing", StructuredDocument(id="d1"))
    assert str(excinfo.value) == VAULT_NOT_FOUND_MSG

    with pytest.raises(VaultNotFoundError):
        collection.read_document("missing", "d1")


def test_document_round_trip(collection):
    collection.create_vault("v1")
    doc = StructuredDocument(id="d1", content={"k": "v", "n": [1, 2]})
    collection.create_document("v1", doc)

    raw = collection.read_document("v1", "d1")
    assert StructuredDocument.model_validate_json(raw) == doc
    assert json.loads(raw) == {"id": "d1", "meta": None, "content": {"k": "v", "n": [1, 2]}}


def test_duplicate_document_keeps_first_value(collection):
    collection.create_vault("v1")
    collection.create_document("v1", StructuredDocument(id="d1", content={"v": 1}))

    with pytest.raises(DuplicateDocumentError) as excinfo:
        collection.create_document("v1", StructuredDocument(id="d1", content={"v": 2}))
    assert str(excinfo.value) == "a document with the given id already exists"

    assert json.loads(collection.read_document("v1", "d1"))["content"] == {"v": 1}


def test_same_document_id_in_different_vaults(collection):
    collection.create_vault("v1")
    collection.create_vault("v2")
    collection.create_document("v1", StructuredDocument(id="d1", content={"vault": 1}))
    collection.create_document("v2", StructuredDocument(id="d1", content={"vault": 2}))

    assert json.loads(collection.read_document("v1", "d1"))["content"] == {"vault": 1}
    assert json.loads(collection.read_document("v2", "d1"))["content"] == {"vault": 2}


def test_missing_document_is_distinct_from_missing_vault(collection):
    collection.create_vault("v1")
    with pytest.raises(DocumentNotFoundError) as excinfo:
        collection.read_document("v1", "nope")
    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert str(excinfo.value) == DOCUMENT_NOT_FOUND_MSG
    assert not isinstance(excinfo.value, VaultNotFoundError)


def test_read_returns_stored_bytes_unchanged(provider, collection):
    collection.create_vault("v1")
    raw = b'{"id": "d1",  "content": {"x": 1}}'
    provider.open_store("v1").put("d1", raw)
    assert collection.read_document("v1", "d1") == raw


def test_provider_read_failure_passes_through_unclassified():
    store = BrokenStore()
    collection = VaultCollection(SingleStoreProvider(store))
    collection.create_vault("v1")

    with pytest.raises(StorageError, match="connection reset"):
        collection.create_document("v1", StructuredDocument(id="d1"))
    assert store.puts == 0

    with pytest.raises(StorageError, match="connection reset") as excinfo:
        collection.read_document("v1", "d1")
    assert not isinstance(excinfo.value, DocumentNotFoundError)


def test_concurrent_create_document_writes_once():
    store = SlowStore()
    collection = VaultCollection(SingleStoreProvider(store))
    collection.create_vault("v1")
    outcomes = []

    def create(n):
        try:
            collection.create_document("v1", StructuredDocument(id="d1", content={"n": n}))
            outcomes.append("created")
        except DuplicateDocumentError:
            outcomes.append("duplicate")

    threads = [threading.Thread(target=create, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["created", "duplicate", "duplicate", "duplicate"]
    assert store.puts == 1


def test_registry_does_not_survive_a_new_collection(provider):
    first = VaultCollection(provider)
    first.create_vault("v1")
    first.create_document("v1", StructuredDocument(id="d1"))

    restarted = VaultCollection(provider)
    with pytest.raises(VaultNotFoundError):
        restarted.read_document("v1", "d1")

    restarted.create_vault("v1")
    assert json.loads(restarted.read_document("v1", "d1"))["id"] == "d1"


def test_close_empties_registry():
    provider = SingleStoreProvider(MemStore())
    collection = VaultCollection(provider)
    collection.create_vault("v1")

    collection.close()

    assert collection.vault_ids() == []
    with pytest.raises(VaultNotFoundError):
        collection.read_document("v1", "d1")
