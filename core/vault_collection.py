"""
core/vault_collection.py
────────────────────────
Registro de vaults abertos e regras de unicidade do EDV.

Responsabilidades:
    - Mapear reference ID → store aberto no provedor de armazenamento.
    - Impedir vaults e documentos duplicados.
    - Traduzir o "não encontrado" do provedor para erros de domínio
      (VaultNotFoundError / DocumentNotFoundError).

Design Decisions
────────────────
1. Registro protegido por lock:
   O Flask atende requisições em várias threads e todas compartilham o
   mesmo registro. Consulta e inserção acontecem sob ``self._lock``. A
   abertura do store (uma ida ao CouchDB, por exemplo) acontece fora do
   lock: o ID fica reservado em ``self._opening`` enquanto isso, então
   dois ``create_vault`` simultâneos com o mesmo ID não abrem o store
   duas vezes e leituras em outros vaults não esperam.

2. Check-then-write serializado por vault:
   ``create_document`` lê o ID antes de gravar. Cada entrada do registro
   tem o próprio lock, mantido entre a leitura e a escrita, então duas
   criações concorrentes do mesmo documento no mesmo processo resultam em
   exatamente uma gravação e um DuplicateDocumentError. Escritores em
   outros processos que compartilhem um backend durável não são
   serializados.

3. Registro volátil:
   O registro não é persistido. Após reiniciar o processo, um vault
   criado anteriormente só volta a ficar acessível quando
   ``create_vault`` for chamado de novo com o mesmo ID (os documentos
   gravados continuam no backend).

4. Sem logging e sem recuperação local:
   Erros sobem para a camada HTTP, que decide status e registra o log.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from core.errors import (
    DocumentNotFoundError,
    DocumentSerializationError,
    DuplicateDocumentError,
    DuplicateVaultError,
    VaultNotFoundError,
)
from core.schemas import StructuredDocument
from core.storage.base import Provider, Store, ValueNotFoundError


@dataclass
class _OpenVault:
    store: Store
    lock: threading.Lock = field(default_factory=threading.Lock)


class VaultCollection:
    """
    Coleção de vaults abertos sobre um provedor de armazenamento.

    Uso típico::

        collection = VaultCollection(MemStoreProvider())
        collection.create_vault("v1")
        collection.create_document("v1", StructuredDocument(id="d1"))
        raw = collection.read_document("v1", "d1")
    """

    def __init__(self, provider: Provider) -> None:
        self._provider = provider
        self._open_stores: dict[str, _OpenVault] = {}
        self._opening: set[str] = set()
        self._lock = threading.Lock()

    # ── API Pública ───────────────────────────────────────────────────────────

    def create_vault(self, reference_id: str) -> None:
        """
        Abre o store do vault e o registra.

        Raises:
            DuplicateVaultError: Já existe vault registrado com este ID.
            StorageError: Falha do provedor ao abrir o store.
        """
        with self._lock:
            if reference_id in self._open_stores or reference_id in self._opening:
                raise DuplicateVaultError()
            self._opening.add(reference_id)

        try:
            store = self._provider.open_store(reference_id)
        except Exception:
            with self._lock:
                self._opening.discard(reference_id)
            raise

        with self._lock:
            self._opening.discard(reference_id)
            self._open_stores[reference_id] = _OpenVault(store=store)

    def create_document(self, vault_id: str, document: StructuredDocument) -> None:
        """
        Grava um documento novo. Nunca sobrescreve um existente.

        Raises:
            VaultNotFoundError: Vault não registrado.
            DuplicateDocumentError: Já existe documento com este ID no vault.
            DocumentSerializationError: Documento não serializável.
            StorageError: Qualquer outra falha do provedor.
        """
        vault = self._lookup(vault_id)

        with vault.lock:
            try:
                vault.store.get(document.id)
            except ValueNotFoundError:
                pass
            else:
                raise DuplicateDocumentError()

            try:
                document_json = document.to_json_bytes()
            except (TypeError, ValueError) as exc:
                raise DocumentSerializationError(
                    f"failed to serialize document: {exc}"
                ) from exc

            vault.store.put(document.id, document_json)

    def read_document(self, vault_id: str, doc_id: str) -> bytes:
        """
        Retorna os bytes gravados para *doc_id*, sem alteração.

        Raises:
            VaultNotFoundError: Vault não registrado.
            DocumentNotFoundError: Documento inexistente no vault.
            StorageError: Qualquer outra falha do provedor.
        """
        vault = self._lookup(vault_id)

        try:
            return vault.store.get(doc_id)
        except ValueNotFoundError:
            raise DocumentNotFoundError() from None

    def vault_ids(self) -> list[str]:
        """IDs dos vaults registrados neste processo, em ordem."""
        with self._lock:
            return sorted(self._open_stores)

    def close(self) -> None:
        """Esvazia o registro e fecha o provedor."""
        with self._lock:
            self._open_stores.clear()
        self._provider.close()

    # ── Internals ─────────────────────────────────────────────────────────────

    def _lookup(self, vault_id: str) -> _OpenVault:
        with self._lock:
            vault = self._open_stores.get(vault_id)
        if vault is None:
            raise VaultNotFoundError()
        return vault
