"""
core/storage/couchdb.py
Backend durável em CouchDB (API HTTP).

Cada vault vira um banco CouchDB; cada documento EDV vira um documento
CouchDB cujo campo ``payload`` guarda os bytes em base64.
"""

from __future__ import annotations

import base64
from typing import Any
from urllib.parse import quote, urlsplit, urlunsplit

import httpx

from core.storage.base import Provider, Store, StorageError, ValueNotFoundError
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)

_TIMEOUT = httpx.Timeout(connect=5.0, read=15.0, write=10.0, pool=5.0)


def _split_credentials(database_url: str) -> tuple[str, tuple[str, str] | None]:
    """Separa ``user:pass@`` da URL. Sem esquema, assume http://."""
    raw = database_url.strip()
    if "://" not in raw:
        raw = "http://" + raw

    parts = urlsplit(raw)
    auth = None
    if parts.username is not None:
        auth = (parts.username, parts.password or "")

    netloc = parts.hostname or ""
    if parts.port is not None:
        netloc = f"{netloc}:{parts.port}"
    base_url = urlunsplit((parts.scheme, netloc, parts.path.rstrip("/"), "", ""))
    return base_url, auth


class CouchDBStore(Store):
    def __init__(self, provider: CouchDBProvider, name: str) -> None:
        self._provider = provider
        self.name = name

    def _doc_path(self, key: str) -> str:
        return f"/{quote(self.name, safe='')}/{quote(key, safe='')}"

    def _fetch(self, key: str) -> dict[str, Any]:
        response = self._provider._request("GET", self._doc_path(key))
        if response.status_code == 404:
            raise ValueNotFoundError()
        self._provider._raise_for_status(response, f"read key from store '{self.name}'")
        try:
            return response.json()
        except ValueError as exc:
            raise StorageError(
                f"CouchDB returned an invalid document for store '{self.name}': {exc}"
            ) from exc

    def get(self, key: str) -> bytes:
        doc = self._fetch(key)
        try:
            return base64.b64decode(doc["payload"])
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(
                f"document in store '{self.name}' has no valid payload: {exc}"
            ) from exc

    def put(self, key: str, value: bytes) -> None:
        body: dict[str, Any] = {"payload": base64.b64encode(value).decode("ascii")}
        try:
            body["_rev"] = self._fetch(key)["_rev"]
        except ValueNotFoundError:
            pass

        response = self._provider._request("PUT", self._doc_path(key), json=body)
        self._provider._raise_for_status(response, f"write key to store '{self.name}'")


class CouchDBProvider(Provider):
    """
    Provedor CouchDB.

    Args:
        database_url: URL do servidor; aceita ``user:pass@host:5984``.
        transport:    transporte httpx alternativo (testes).
    """

    def __init__(
        self,
        database_url: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not database_url or not database_url.strip():
            raise StorageError("hostURL for new CouchDB provider can't be blank")

        base_url, auth = _split_credentials(database_url)
        self._client = httpx.Client(
            base_url=base_url,
            auth=auth,
            timeout=_TIMEOUT,
            transport=transport,
        )
        logger.debug("Backend CouchDB configurado em %s", base_url)

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise StorageError(f"CouchDB request {method} {path} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.status_code >= 400:
            raise StorageError(
                f"failed to {action}: CouchDB returned "
                f"{response.status_code}: {response.text}"
            )

    def open_store(self, name: str) -> CouchDBStore:
        response = self._request("PUT", f"/{quote(name, safe='')}")
        # 412: o banco já existe
        if response.status_code != 412:
            self._raise_for_status(response, f"create database '{name}'")
        return CouchDBStore(self, name)

    def close(self) -> None:
        self._client.close()
