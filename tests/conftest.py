"""
Pytest configuration and shared fixtures for airdrop engine tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_allocations = _common.make_allocations
make_distribution = _common.make_distribution
make_ledger = _common.make_ledger


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def allocations():
    """Provide three raw allocation entries (100, 200, 300)."""
    return make_allocations()


@pytest.fixture
def distribution():
    """Provide a three-entry Distribution."""
    return make_distribution()


@pytest.fixture
def ledger(distribution):
    """Provide an owner-bound InMemoryLedger with the distribution's root published."""
    return make_ledger(distribution)


@pytest.fixture
def dump_path(tmp_path, distribution):
    """Provide a distribution dump written to a temporary file."""
    from core.distribution import save_distribution
    return save_distribution(distribution, tmp_path / "distribution.json")


@pytest.fixture(autouse=True)
def _clean_airdrop_env(monkeypatch, tmp_path):
    """Keep developer env vars and config files out of tests."""
    for name in (
        "AIRDROP_RPC_URL",
        "RPC_URL",
        "AIRDROP_CONTRACT_ADDRESS",
        "AIRDROP_SENDER",
        "AIRDROP_CHAIN_ID",
        "AIRDROP_DISTRIBUTION_PATH",
        "AIRDROP_LOG_LEVEL",
        "AIRDROP_HTTP_PROXY",
        "AIRDROP_UNIT",
        "AIRDROP_CHECK_ROOT",
        "AIRDROP_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        check = result.get_check(check_id)
        assert check is not None, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert check.ok, f"Check '{check_id}' failed: {check.message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        check = result.get_check(check_id)
        assert check is not None, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not check.ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
