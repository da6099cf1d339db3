"""Root conftest - shared test configuration and fixtures.

Invariants:
    - No test reads a real wallet, a real pid file, or a real database
    - get_settings() cache cleared around every test so env overrides apply
"""

import os

import pytest

from validator.config import get_settings
from validator.core.reporting import RecordingReporter

from tests.helpers import VALID_CONFIG

# Ensure tests never touch the operator's files
os.environ.setdefault("VALIDATOR_DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("VALIDATOR_PID_FILE", "test-validator.pid")
os.environ.setdefault("VALIDATOR_LOG_LEVEL", "WARNING")


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def write_config(tmp_path):
    """Write a TOML config into tmp_path and return its path."""
    def _write(content: str = VALID_CONFIG, name: str = "validator.toml"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'validator.db'}"
