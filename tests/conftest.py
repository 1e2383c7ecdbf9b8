"""
Pytest configuration and shared fixtures for imtree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Isolates tests from IMTREE_* environment variables and config files
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_common = importlib.import_module("fixtures.common")

SAMPLE_VALUES = _common.SAMPLE_VALUES
make_tree = _common.make_tree
make_filled_tree = _common.make_filled_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

_ENV_VARS = [
    "IMTREE_DEPTH",
    "IMTREE_ALGORITHM",
    "IMTREE_DECLARED_ROOT",
    "IMTREE_LOG_LEVEL",
    "IMTREE_LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove IMTREE_* variables so tests see only what they set."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run in an empty directory with no config files to discover."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def sample_values():
    """The eight sample leaf values."""
    return list(SAMPLE_VALUES)


@pytest.fixture
def full_tree():
    """Depth-3 tree with all eight sample values appended."""
    return make_filled_tree()


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
