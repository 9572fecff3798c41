"""
core/storage/memstore.py
Backend em memória. Os dados se perdem quando o processo termina.
"""

from __future__ import annotations

import threading

from core.storage.base import Provider, Store, ValueNotFoundError


class MemStore(Store):
    """
    Store baseado em dict.

    Uso:
        store = MemStore()
        store.put("doc-1", b"{}")
        assert store.get("doc-1") == b"{}"
    """

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes:
        with self._lock:
            try:
                return self._data[key]
            except KeyError:
                raise ValueNotFoundError() from None

    def put(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)


class MemStoreProvider(Provider):
    """Reabrir um nome já aberto devolve o mesmo store."""

    def __init__(self) -> None:
        self._stores: dict[str, MemStore] = {}
        self._lock = threading.Lock()

    def open_store(self, name: str) -> MemStore:
        with self._lock:
            store = self._stores.get(name)
            if store is None:
                store = MemStore()
                self._stores[name] = store
            return store

    def close(self) -> None:
        with self._lock:
            self._stores.clear()
