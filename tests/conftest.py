"""Shared fixtures."""

from pathlib import Path

import pytest

from auto_index.config import reset_config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate every test from AUTO_INDEX_* variables and the global config."""
    for name in ("AUTO_INDEX_PREFIX", "AUTO_INDEX_VERBOSE", "AUTO_INDEX_DEBUG", "AUTO_INDEX_SCANNERS"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fixtures_root() -> Path:
    return Path(__file__).parent / "fixtures"
