"""
core/storage/sqlite.py
Backend durável em arquivo SQLite.

Tabela gerenciada:
    edv_stores     — nomes de stores abertos
    edv_documents  — pares (store, key) → value
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from core.storage.base import Provider, Store, StorageError, ValueNotFoundError
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)

_URL_PREFIX = "sqlite:///"


def parse_database_url(database_url: str) -> Path:
    """Aceita caminho simples ou a forma ``sqlite:///caminho.db``."""
    raw = database_url.strip()
    if raw.startswith(_URL_PREFIX):
        raw = raw[len(_URL_PREFIX):]
    if not raw or raw == ":memory:":
        raise StorageError(
            f"invalid SQLite database URL '{database_url}': a file path is required"
        )
    return Path(raw).expanduser()


class SQLiteStore(Store):
    def __init__(self, provider: SQLiteProvider, name: str) -> None:
        self._provider = provider
        self.name = name

    def get(self, key: str) -> bytes:
        try:
            with self._provider._connect() as conn:
                row = conn.execute(
                    """
                    SELECT value FROM edv_documents
                    WHERE store = ? AND key = ?
                    LIMIT 1
                    """,
                    (self.name, key),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"failed to read key from store '{self.name}': {exc}") from exc

        if row is None:
            raise ValueNotFoundError()
        return bytes(row["value"])

    def put(self, key: str, value: bytes) -> None:
        try:
            with self._provider._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO edv_documents (store, key, value)
                    VALUES (?, ?, ?)
                    ON CONFLICT(store, key) DO UPDATE SET
                        value      = excluded.value,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (self.name, key, sqlite3.Binary(value)),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"failed to write key to store '{self.name}': {exc}") from exc


class SQLiteProvider(Provider):
    """
    Provedor SQLite: todos os stores compartilham um arquivo.

    Cada operação abre a própria conexão, então o provedor pode ser usado
    por várias threads do servidor Flask.
    """

    def __init__(self, database_url: str) -> None:
        self._db_path = parse_database_url(database_url)
        self.ensure_tables()
        logger.debug("Backend SQLite inicializado em %s", self._db_path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def ensure_tables(self) -> None:
        """Cria as tabelas caso não existam."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connect() as conn:
                conn.executescript(
                    """
                    CREATE TABLE IF NOT EXISTS edv_stores (
                        name        TEXT PRIMARY KEY,
                        created_at  TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                    );

                    CREATE TABLE IF NOT EXISTS edv_documents (
                        store       TEXT NOT NULL,
                        key         TEXT NOT NULL,
                        value       BLOB NOT NULL,
                        created_at  TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                        updated_at  TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                        PRIMARY KEY (store, key)
                    );
                    """
                )
                conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(
                f"failed to initialize SQLite database at {self._db_path}: {exc}"
            ) from exc

    def open_store(self, name: str) -> SQLiteStore:
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT OR IGNORE INTO edv_stores (name) VALUES (?)",
                    (name,),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"failed to open store '{name}': {exc}") from exc
        return SQLiteStore(self, name)
