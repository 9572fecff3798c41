"""
core/constants.py
Constantes de domínio do EDV.

Single source of truth para rotas, variáveis de caminho e tipos de
backend suportados.
"""

from __future__ import annotations

# ── Variáveis de caminho ─────────────────────────────────────
VAULT_ID_PATH_VARIABLE: str = "vaultID"
DOC_ID_PATH_VARIABLE: str = "docID"

# ── Rotas ────────────────────────────────────────────────────
CREATE_VAULT_ENDPOINT: str = "/data-vaults"
VAULTS_PATH_PREFIX: str = "/encrypted-data-vaults"

# ── Backends de armazenamento ────────────────────────────────
DATABASE_TYPE_MEM: str = "mem"
DATABASE_TYPE_SQLITE: str = "sqlite"
DATABASE_TYPE_COUCHDB: str = "couchdb"

SUPPORTED_DATABASE_TYPES: tuple[str, ...] = (
    DATABASE_TYPE_MEM,
    DATABASE_TYPE_SQLITE,
    DATABASE_TYPE_COUCHDB,
)

# ── Escape de segmento de caminho ────────────────────────────
# Caracteres reservados mantidos sem escape dentro de um segmento.
PATH_SEGMENT_SAFE_CHARS: str = "$&+:=@"
