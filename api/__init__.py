"""
api/__init__.py
App Factory do EDV (Flask).

Uso:
    from api import create_app
    app = create_app()
"""

from __future__ import annotations

from flask import Flask

from api.blueprints.edv import EXTENSION_KEY, edv_bp
from api.config import DevelopmentConfig
from api.http_utils import EncodedPathMiddleware
from core.storage import Provider, create_provider
from core.vault_collection import VaultCollection


def create_app(
    config_class=DevelopmentConfig,
    provider: Provider | None = None,
) -> Flask:
    """
    Cria e configura a instância Flask.

    Se *provider* não for informado, ele é construído a partir de
    ``EDV_DATABASE_TYPE`` / ``EDV_DATABASE_URL`` da configuração.
    """
    app = Flask(__name__)

    app.config.from_object(config_class)

    if provider is None:
        provider = create_provider(
            app.config["EDV_DATABASE_TYPE"],
            app.config.get("EDV_DATABASE_URL"),
        )
    app.extensions[EXTENSION_KEY] = VaultCollection(provider)

    # ── Roteamento sobre o caminho ainda codificado ───
    app.wsgi_app = EncodedPathMiddleware(app.wsgi_app)

    # ── Blueprints ────────────────────────────────────
    app.register_blueprint(edv_bp)

    return app
