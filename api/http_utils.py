"""
api/http_utils.py
Utilitários HTTP exclusivos da camada web Flask.

- escape_path_segment / unescape_path_var: escape percentual de
  segmentos de caminho (IDs de vault e documento).
- EncodedPathMiddleware: roteia pelo caminho ainda codificado, para que
  um ``%2F`` dentro de um ID não seja confundido com separador.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable
from urllib.parse import quote, unquote, urlsplit

from core.constants import PATH_SEGMENT_SAFE_CHARS
from core.errors import PathUnescapeError

_INVALID_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def escape_path_segment(value: str) -> str:
    """Escapa *value* para uso como um único segmento de caminho."""
    return quote(value, safe=PATH_SEGMENT_SAFE_CHARS)


def unescape_path_var(path_var: str, value: str) -> str:
    """
    Decodifica uma variável de caminho recebida ainda codificada.

    Raises:
        PathUnescapeError: Escape malformado (ex: ``%zz``) ou bytes que não
            formam UTF-8 válido.
    """
    match = _INVALID_ESCAPE.search(value)
    if match:
        bad = value[match.start():match.start() + 3]
        raise PathUnescapeError(path_var, f'invalid URL escape "{bad}"')
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as exc:
        raise PathUnescapeError(path_var, str(exc)) from exc


def _encoded_path_info(environ: dict[str, Any]) -> str:
    raw_uri = environ.get("RAW_URI") or environ.get("REQUEST_URI")
    if raw_uri:
        path = urlsplit(raw_uri).path if "://" in raw_uri else raw_uri.split("?", 1)[0]
        script_name = quote(environ.get("SCRIPT_NAME", ""))
        if script_name and path.startswith(script_name):
            path = path[len(script_name):]
        return path or "/"

    # Servidor sem URI bruta: recodifica o PATH_INFO já decodificado
    path_info = environ.get("PATH_INFO", "")
    return quote(path_info.encode("latin-1"), safe="/" + PATH_SEGMENT_SAFE_CHARS)


class EncodedPathMiddleware:
    """
    Substitui ``PATH_INFO`` pela forma percentual original da requisição.

    Uso:
        app.wsgi_app = EncodedPathMiddleware(app.wsgi_app)
    """

    def __init__(self, app: Callable[..., Iterable[bytes]]) -> None:
        self.app = app

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        environ["PATH_INFO"] = _encoded_path_info(environ)
        return self.app(environ, start_response)
