"""
core/schemas.py
───────────────
Modelos Pydantic do contrato de dados da API EDV.

Design Decisions
────────────────
1. Aliases camelCase:
   O contrato JSON usa ``referenceId``; internamente o campo é
   ``reference_id``. ``populate_by_name=True`` aceita as duas formas na
   construção em código, mas a serialização usa sempre o alias.

2. Conteúdo opaco:
   ``meta`` e ``content`` de StructuredDocument são dicionários livres. O
   servidor não interpreta nada além de ``id``; o cliente é quem cifra o
   conteúdo antes do envio.

3. Campos desconhecidos:
   São ignorados (comportamento padrão do Pydantic), para manter
   compatibilidade com clientes que enviam campos extras.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class IDTypePair(BaseModel):
    """Referência a uma chave (KEK / HMAC) do cliente."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    type: str = ""


class DataVaultConfiguration(BaseModel):
    """Corpo da requisição de criação de vault."""

    model_config = ConfigDict(populate_by_name=True)

    sequence: int = 0
    controller: str = ""
    invoker: str = ""
    delegator: str = ""
    reference_id: str = Field(default="", alias="referenceId")
    kek: Optional[IDTypePair] = None
    hmac: Optional[IDTypePair] = None


class StructuredDocument(BaseModel):
    """Documento armazenado dentro de um vault."""

    id: str = ""
    meta: Optional[dict[str, Any]] = None
    content: Optional[dict[str, Any]] = None

    def to_json_bytes(self) -> bytes:
        """Serializa para os bytes gravados no store."""
        return self.model_dump_json(by_alias=True).encode("utf-8")
