"""
core/storage/
Provedores de armazenamento chave-valor do EDV.

Módulos:
- base.py     : Contrato Provider / Store e erros de armazenamento.
- memstore.py : Backend em memória ("mem").
- sqlite.py   : Backend em arquivo SQLite ("sqlite").
- couchdb.py  : Backend CouchDB via HTTP ("couchdb").
"""

from __future__ import annotations

from core.constants import (
    DATABASE_TYPE_COUCHDB,
    DATABASE_TYPE_MEM,
    DATABASE_TYPE_SQLITE,
)
from core.errors import ConfigError

from .base import Provider, Store, StorageError, ValueNotFoundError
from .couchdb import CouchDBProvider
from .memstore import MemStoreProvider
from .sqlite import SQLiteProvider

INVALID_DATABASE_TYPE_MSG = (
    "database type not set to a valid type. run start --help to see the available options"
)
MISSING_DATABASE_URL_MSG = "database URL not set"


def create_provider(database_type: str, database_url: str | None = None) -> Provider:
    """
    Instancia o provedor indicado por *database_type* (sem diferenciar
    maiúsculas).

    Raises:
        ConfigError: Tipo desconhecido ou URL ausente para backend durável.
        StorageError: Falha do backend ao inicializar.
    """
    kind = (database_type or "").strip().lower()

    if kind == DATABASE_TYPE_MEM:
        return MemStoreProvider()

    if kind in (DATABASE_TYPE_SQLITE, DATABASE_TYPE_COUCHDB):
        if not database_url or not database_url.strip():
            raise ConfigError(MISSING_DATABASE_URL_MSG)
        if kind == DATABASE_TYPE_SQLITE:
            return SQLiteProvider(database_url)
        return CouchDBProvider(database_url)

    raise ConfigError(INVALID_DATABASE_TYPE_MSG)


__all__ = [
    "CouchDBProvider",
    "MemStoreProvider",
    "Provider",
    "SQLiteProvider",
    "StorageError",
    "Store",
    "ValueNotFoundError",
    "create_provider",
]
