"""Pytest configuration helpers for test collection.

Ensure the project root is on sys.path so tests can import the package
without requiring PYTHONPATH to be set externally, and provide an app
wired to the in-memory engine and a fake outbound HTTP session.
"""
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def engine():
    from keeper_lib.storage import MemoryEngine
    return MemoryEngine()


@pytest.fixture
def fetch_session():
    from tests.helpers import FakeSession
    return FakeSession()


@pytest.fixture
def app(tmp_path, engine, fetch_session):
    from keeper_lib.main import create_app, Config
    cfg = Config(
        storage_backend='memory',
        config_path=tmp_path / 'server_config.yml',
        configure_logging=False,
    )
    return create_app(cfg, engine=engine, fetch_session=fetch_session)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    return TestClient(app)
