"""
Pytest configuration and shared fixtures for txmerkle tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Isolates tests from TXMERKLE_* environment and the process default config
4. Configures pytest markers
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

TRANSACTIONS = _common.TRANSACTIONS
make_transactions = _common.make_transactions
identity_hash = _common.identity_hash

from txmerkle.config.runtime import set_default_config
from txmerkle.merkle.tree_builder import TreeBuilder


_ENV_VARS = (
    "TXMERKLE_HASH_ALGORITHM",
    "TXMERKLE_ODD_LEVEL_POLICY",
    "TXMERKLE_LOG_LEVEL",
    "TXMERKLE_LOG_FILE",
)


# =============================================================================
# Isolation
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Clear TXMERKLE_* variables and reset the default config around each test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def transactions():
    """The four reference transactions."""
    return list(TRANSACTIONS)


@pytest.fixture
def keccak_tree(transactions):
    """HashArray over the reference transactions, keccak256 + duplicate policy."""
    return TreeBuilder("keccak256", "duplicate").build(transactions)


@pytest.fixture
def identity_builder():
    """TreeBuilder with the identity stub hash and duplicate policy."""
    return TreeBuilder(identity_hash, "duplicate")


@pytest.fixture
def drop_builder():
    """TreeBuilder with the identity stub hash and drop policy."""
    return TreeBuilder(identity_hash, "drop")
