"""
core/storage/base.py
Contrato dos provedores de armazenamento chave-valor do EDV.

Um provedor abre "stores" nomeados; cada store mapeia chave (str) para
valor (bytes). A serialização é responsabilidade de quem chama.

Implementações:
    MemStoreProvider  — dict em memória (testes / desenvolvimento)
    SQLiteProvider    — arquivo SQLite local
    CouchDBProvider   — servidor CouchDB via HTTP
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from core.errors import EDVError, ErrorKind


class StorageError(EDVError):
    """Falha do backend de armazenamento não classificada pelo núcleo."""

    kind = ErrorKind.UNCLASSIFIED


class ValueNotFoundError(StorageError):
    """A chave solicitada não existe no store."""

    def __init__(self, message: str = "store does not have a value associated with this key") -> None:
        super().__init__(message)


class Store(ABC):
    """Mapeamento durável chave → bytes dentro de um único namespace."""

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Retorna o valor da chave. Levanta ValueNotFoundError se ausente."""

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        """Grava o valor, sobrescrevendo se já existir."""


class Provider(ABC):
    """Abre stores nomeados de um backend."""

    @abstractmethod
    def open_store(self, name: str) -> Store:
        """Abre (criando se necessário) o store *name*."""

    def close(self) -> None:
        """Libera recursos do backend. Padrão: nada a fazer."""
