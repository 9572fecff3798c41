"""
api/config.py
Classes de configuração Flask por ambiente.

A classe ativa é selecionada ao chamar create_app(config_class=...).
"""

import os


class BaseConfig:
    # ── Banco de Dados ────────────────────────────────────────────────────────
    EDV_DATABASE_TYPE: str = os.getenv("EDV_DATABASE_TYPE", "mem")
    EDV_DATABASE_URL: str = os.getenv("EDV_DATABASE_URL", "")


class DevelopmentConfig(BaseConfig):
    DEBUG: bool = True
    TESTING: bool = False


class ProductionConfig(BaseConfig):
    DEBUG: bool = False
    TESTING: bool = False


class TestingConfig(BaseConfig):
    TESTING: bool = True
    EDV_DATABASE_TYPE: str = "mem"
    EDV_DATABASE_URL: str = ""
