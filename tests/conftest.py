"""Shared test fixtures for the EDV server."""

import pytest

from api import create_app
from api.config import TestingConfig
from core.storage.memstore import MemStoreProvider
from core.vault_collection import VaultCollection


@pytest.fixture
def provider():
    """Fresh in-memory storage provider."""
    return MemStoreProvider()


@pytest.fixture
def collection(provider):
    """Vault collection over the in-memory provider."""
    return VaultCollection(provider)


@pytest.fixture
def app(provider):
    """Flask app wired to the in-memory provider."""
    return create_app(config_class=TestingConfig, provider=provider)


@pytest.fixture
def client(app):
    return app.test_client()
