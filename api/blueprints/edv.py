"""
api/blueprints/edv.py
Blueprint da API REST de Encrypted Data Vaults.

Endpoints:
    POST /data-vaults                                   — cria vault
    POST /encrypted-data-vaults/<vaultID>/docs          — cria documento
    GET  /encrypted-data-vaults/<vaultID>/docs/<docID>  — lê documento

Respostas de erro são texto puro. As variáveis de caminho chegam ainda
codificadas (ver EncodedPathMiddleware) e são decodificadas aqui.
"""

from __future__ import annotations

from typing import TypeVar

from flask import Blueprint, Response, current_app, request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from api.http_utils import escape_path_segment, unescape_path_var
from core.constants import (
    CREATE_VAULT_ENDPOINT,
    DOC_ID_PATH_VARIABLE,
    VAULT_ID_PATH_VARIABLE,
    VAULTS_PATH_PREFIX,
)
from core.errors import (
    BLANK_DOCUMENT_ID_MSG,
    BLANK_REFERENCE_ID_MSG,
    EDVError,
    ErrorKind,
    PathUnescapeError,
)
from core.schemas import DataVaultConfiguration, StructuredDocument
from core.vault_collection import VaultCollection
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)

edv_bp = Blueprint("edv", __name__)

EXTENSION_KEY = "edv.vault_collection"

ModelT = TypeVar("ModelT", bound=BaseModel)

# ── Mapeamento ErrorKind → status por endpoint ───────

CREATE_VAULT_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
    ErrorKind.UNCLASSIFIED: 400,
}

CREATE_DOCUMENT_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 400,
    ErrorKind.CONFLICT: 400,
    ErrorKind.INTERNAL: 500,
    ErrorKind.UNCLASSIFIED: 400,
}

READ_DOCUMENT_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 400,
    ErrorKind.INTERNAL: 500,
    ErrorKind.UNCLASSIFIED: 400,
}


# ── Helpers ──────────────────────────────────────────


def _collection() -> VaultCollection:
    return current_app.extensions[EXTENSION_KEY]


def _text(message: str, status: int) -> Response:
    return Response(message, status=status, mimetype="text/plain")


def _location(*segments: str) -> str:
    path = "/".join(escape_path_segment(s) for s in segments)
    return f"{request.host}{VAULTS_PATH_PREFIX}/{path}"


def _unescape_error(exc: PathUnescapeError) -> Response:
    logger.error("Falha ao decodificar variável de caminho: %s", exc)
    return _text(str(exc), 500)


def _decode_body(model: type[ModelT]) -> ModelT:
    """Decodifica o corpo JSON. ``null`` vira o modelo com valores padrão."""
    raw = request.get_data()
    if raw.strip() == b"null":
        return model()
    return model.model_validate_json(raw)


# ── Rotas ────────────────────────────────────────────


@edv_bp.post(CREATE_VAULT_ENDPOINT)
def create_data_vault():
    """Cria um vault a partir de um DataVaultConfiguration."""
    try:
        config = _decode_body(DataVaultConfiguration)
    except PydanticValidationError as exc:
        logger.warning("Configuração de vault inválida: %s", exc.errors(include_url=False))
        return _text(str(exc), 400)

    if not config.reference_id.strip():
        logger.warning("Criação de vault recusada: referenceId em branco.")
        return _text(BLANK_REFERENCE_ID_MSG, 400)

    try:
        _collection().create_vault(config.reference_id)
    except EDVError as exc:
        status = CREATE_VAULT_STATUS[exc.kind]
        logger.warning(
            "Falha ao criar vault '%s' (%d): %s",
            config.reference_id, status, exc,
        )
        return _text(f"Data vault creation failed: {exc}", status)

    logger.info("Vault '%s' criado.", config.reference_id)
    response = _text("", 201)
    response.headers["Location"] = _location(config.reference_id)
    return response


@edv_bp.post(f"{VAULTS_PATH_PREFIX}/<vault_id>/docs")
def create_document(vault_id: str):
    """Grava um StructuredDocument novo no vault."""
    try:
        document = _decode_body(StructuredDocument)
    except PydanticValidationError as exc:
        logger.warning("Documento inválido: %s", exc.errors(include_url=False))
        return _text(str(exc), 400)

    try:
        vault_id = unescape_path_var(VAULT_ID_PATH_VARIABLE, vault_id)
    except PathUnescapeError as exc:
        return _unescape_error(exc)

    if not document.id.strip():
        logger.warning("Documento recusado no vault '%s': id em branco.", vault_id)
        return _text(BLANK_DOCUMENT_ID_MSG, 400)

    try:
        _collection().create_document(vault_id, document)
    except EDVError as exc:
        status = CREATE_DOCUMENT_STATUS[exc.kind]
        logger.warning(
            "Falha ao criar documento '%s' no vault '%s' (%d): %s",
            document.id, vault_id, status, exc,
        )
        return _text(str(exc), status)

    logger.info("Documento '%s' criado no vault '%s'.", document.id, vault_id)
    response = _text("", 201)
    response.headers["Location"] = _location(vault_id, "docs", document.id)
    return response


@edv_bp.get(f"{VAULTS_PATH_PREFIX}/<vault_id>/docs/<doc_id>")
def read_document(vault_id: str, doc_id: str):
    """Retorna os bytes gravados do documento, sem alteração."""
    try:
        vault_id = unescape_path_var(VAULT_ID_PATH_VARIABLE, vault_id)
        doc_id = unescape_path_var(DOC_ID_PATH_VARIABLE, doc_id)
    except PathUnescapeError as exc:
        return _unescape_error(exc)

    try:
        document_json = _collection().read_document(vault_id, doc_id)
    except EDVError as exc:
        status = READ_DOCUMENT_STATUS[exc.kind]
        logger.warning(
            "Falha ao ler documento '%s' do vault '%s' (%d): %s",
            doc_id, vault_id, status, exc,
        )
        return _text(str(exc), status)

    return Response(document_json, status=200, mimetype="application/json")
