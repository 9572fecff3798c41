"""
core/errors.py
Hierarquia de exceções do EDV.

Todo erro de domínio herda de EDVError e carrega um ``kind`` fixo
(ErrorKind). A camada HTTP mapeia o kind para o status de resposta;
o núcleo nunca trata esses erros localmente.

Uso:
    try:
        collection.read_document(vault_id, doc_id)
    except EDVError as exc:
        status = STATUS_BY_KIND[exc.kind]
"""

from __future__ import annotations

from enum import Enum

# ── Mensagens literais (contrato com clientes) ───────────────────────────────
VAULT_NOT_FOUND_MSG = "specified vault does not exist"
DOCUMENT_NOT_FOUND_MSG = "specified document does not exist"
DUPLICATE_VAULT_MSG = "vault already exists"
DUPLICATE_DOCUMENT_MSG = "a document with the given id already exists"
BLANK_REFERENCE_ID_MSG = "referenceId can't be blank"
BLANK_DOCUMENT_ID_MSG = "document id can't be blank"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"
    UNCLASSIFIED = "unclassified"


class EDVError(Exception):
    """Exceção base para erros do EDV."""

    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# ── Entrada inválida ──────────────────────────────────────────────────────────


class ValidationError(EDVError):
    """Payload malformado ou campo obrigatório em branco."""

    kind = ErrorKind.VALIDATION


class ConfigError(ValidationError):
    """Parâmetro de inicialização ausente ou inválido."""


# ── Não encontrado ────────────────────────────────────────────────────────────


class VaultNotFoundError(EDVError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self) -> None:
        super().__init__(VAULT_NOT_FOUND_MSG)


class DocumentNotFoundError(EDVError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self) -> None:
        super().__init__(DOCUMENT_NOT_FOUND_MSG)


# ── Conflito ──────────────────────────────────────────────────────────────────


class DuplicateVaultError(EDVError):
    kind = ErrorKind.CONFLICT

    def __init__(self) -> None:
        super().__init__(DUPLICATE_VAULT_MSG)


class DuplicateDocumentError(EDVError):
    kind = ErrorKind.CONFLICT

    def __init__(self) -> None:
        super().__init__(DUPLICATE_DOCUMENT_MSG)


# ── Interno ───────────────────────────────────────────────────────────────────


class PathUnescapeError(EDVError):
    """Variável de caminho com escape percentual inválido (bug de roteamento)."""

    kind = ErrorKind.INTERNAL

    def __init__(self, path_var: str, reason: str) -> None:
        self.path_var = path_var
        super().__init__(f"unable to escape {path_var} path variable: {reason}")


class DocumentSerializationError(EDVError):
    """Falha ao serializar o documento antes da gravação."""

