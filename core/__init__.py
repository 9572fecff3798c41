"""
core/
Núcleo do EDV.

Contém:
- errors.py           : Hierarquia de exceções com ErrorKind.
- schemas.py          : Modelos Pydantic do contrato JSON.
- vault_collection.py : Registro de vaults abertos e regras de unicidade.
- storage/            : Provedores de armazenamento chave-valor.
"""

from .errors import (
    DocumentNotFoundError,
    DuplicateDocumentError,
    DuplicateVaultError,
    EDVError,
    ErrorKind,
    VaultNotFoundError,
)
from .schemas import DataVaultConfiguration, StructuredDocument
from .vault_collection import VaultCollection

__all__ = [
    "DataVaultConfiguration",
    "DocumentNotFoundError",
    "DuplicateDocumentError",
    "DuplicateVaultError",
    "EDVError",
    "ErrorKind",
    "StructuredDocument",
    "VaultCollection",
    "VaultNotFoundError",
]
