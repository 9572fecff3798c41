"""
main.py
────────
Ponto de entrada do servidor EDV REST.

Uso:
    python main.py start --host-url localhost:8080 --database-type mem
    python main.py start -u 0.0.0.0:8080 -t sqlite -l data/edv.db
    python main.py start -u 0.0.0.0:8080 -t couchdb -l admin:secret@couchdb:5984

Cada flag pode ser substituída pela variável de ambiente correspondente;
a flag tem precedência:

    --host-url      / -u   EDV_HOST_URL       (obrigatório, HostName:Port)
    --database-type / -t   EDV_DATABASE_TYPE  (obrigatório: mem, sqlite, couchdb)
    --database-url  / -l   EDV_DATABASE_URL   (obrigatório para sqlite e couchdb)
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from typing import Callable, Optional

from flask import Flask

from api import create_app
from api.blueprints.edv import EXTENSION_KEY
from api.config import ProductionConfig
from core.errors import ConfigError, EDVError
from core.storage import create_provider
from core.vault_collection import VaultCollection
from internalloggin.logger import setup_logger

logger = setup_logger(__name__)

HOST_URL_FLAG = "host-url"
HOST_URL_ENV = "EDV_HOST_URL"
DATABASE_TYPE_FLAG = "database-type"
DATABASE_TYPE_ENV = "EDV_DATABASE_TYPE"
DATABASE_URL_FLAG = "database-url"
DATABASE_URL_ENV = "EDV_DATABASE_URL"

MISSING_HOST_URL_MSG = "host URL not provided"

ServeFn = Callable[[Flask, str, int], None]


@dataclass
class EDVParameters:
    host_url: str
    database_type: str
    database_url: str


def _flask_serve(app: Flask, host: str, port: int) -> None:
    app.run(host=host, port=port, threaded=True)


# ── Resolução de parâmetros ────────────────────────────────────────────────────


def get_user_set_var(
    args: argparse.Namespace,
    flag_name: str,
    env_key: str,
    optional: bool = False,
) -> str:
    """
    Retorna o valor da flag se informada; senão, o da variável de ambiente.

    Raises:
        ConfigError: Nenhum dos dois definido e o parâmetro é obrigatório.
    """
    value: Optional[str] = getattr(args, flag_name.replace("-", "_"), None)
    if value is not None:
        return value

    value = os.environ.get(env_key)
    if value is not None or optional:
        return value or ""

    raise ConfigError(
        f"Neither --{flag_name} (command line flag) nor {env_key} "
        "(environment variable) have been set."
    )


def parse_host_url(host_url: str) -> tuple[str, int]:
    """Separa ``HostName:Port``."""
    host, sep, port = host_url.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ConfigError(f"invalid host URL '{host_url}': expected format HostName:Port")
    return host, int(port)


def resolve_parameters(args: argparse.Namespace) -> EDVParameters:
    return EDVParameters(
        host_url=get_user_set_var(args, HOST_URL_FLAG, HOST_URL_ENV),
        database_type=get_user_set_var(args, DATABASE_TYPE_FLAG, DATABASE_TYPE_ENV),
        database_url=get_user_set_var(args, DATABASE_URL_FLAG, DATABASE_URL_ENV, optional=True),
    )


# ── Inicialização ──────────────────────────────────────────────────────────────


def start_edv(parameters: EDVParameters, serve: ServeFn = _flask_serve) -> None:
    """
    Constrói o provedor e a aplicação Flask e inicia o servidor.

    Raises:
        ConfigError: Host ausente/inválido, tipo de banco inválido ou URL
            ausente para backend durável.
        StorageError: Falha do backend ao inicializar.
    """
    if not parameters.host_url:
        raise ConfigError(MISSING_HOST_URL_MSG)

    host, port = parse_host_url(parameters.host_url)
    provider = create_provider(parameters.database_type, parameters.database_url)
    app = create_app(config_class=ProductionConfig, provider=provider)

    logger.info(
        "Iniciando servidor EDV REST em %s (backend: %s).",
        parameters.host_url, parameters.database_type.lower(),
    )
    collection: VaultCollection = app.extensions[EXTENSION_KEY]
    try:
        serve(app, host, port)
    finally:
        logger.info(
            "Servidor encerrado; fechando %d vault(s) aberto(s).",
            len(collection.vault_ids()),
        )
        collection.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edv-rest",
        description="Servidor REST de Encrypted Data Vaults.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Comandos disponíveis")

    # ── start ─────────────────────────────────────────────────────────────
    start_parser = subparsers.add_parser("start", help="Inicia o servidor EDV.")
    start_parser.add_argument(
        "-u", f"--{HOST_URL_FLAG}", default=None,
        help="URL em que o EDV escuta. Formato: HostName:Port.",
    )
    start_parser.add_argument(
        "-t", f"--{DATABASE_TYPE_FLAG}", default=None,
        help="Tipo de banco usado internamente. Opções: mem, sqlite, couchdb.",
    )
    start_parser.add_argument(
        "-l", f"--{DATABASE_URL_FLAG}", default=None,
        help=(
            "URL do banco. Dispensável com mem. Para sqlite, caminho do arquivo; "
            "para CouchDB, inclua user:password@ se necessário."
        ),
    )
    return parser


def main(argv: Optional[list[str]] = None, serve: ServeFn = _flask_serve) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "start":
        parser.print_help()
        return 1

    try:
        start_edv(resolve_parameters(args), serve=serve)
    except EDVError as exc:
        logger.critical("Falha ao iniciar o EDV: %s", exc)
        print(f"ERRO: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
