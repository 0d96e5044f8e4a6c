"""Pytest configuration and shared fixtures.

This module provides:
- Pytest markers for test categorization
- A fake chain wired into an ExchangeGateway
- A tracker driven by a controllable settlement source
"""

import pytest

from amm_swap.chain.gateway import ExchangeGateway
from amm_swap.tracking.tracker import PendingExchangeTracker
from tests.fixtures.chain_fixtures import (
    ACCOUNT,
    NOW,
    ControlledSettlement,
    FakeChain,
    FakeWeb3,
    fast_config,
)


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "pure: Deterministic arithmetic tests with no I/O")
    config.addinivalue_line("markers", "chain: Tests that go through the (fake) chain gateway")
    config.addinivalue_line("markers", "edge_case: Edge case tests with extreme or malformed inputs")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on module name."""
    for item in items:
        if any(name in item.nodeid for name in ("test_units", "test_quoter", "test_catalog")):
            item.add_marker(pytest.mark.pure)
        if any(name in item.nodeid for name in ("test_gateway", "test_service")):
            item.add_marker(pytest.mark.chain)
        if "edge_case" in item.nodeid or "edge_case" in item.name:
            item.add_marker(pytest.mark.edge_case)


# ============================================================================
# Chain Fixtures
# ============================================================================


@pytest.fixture
def chain() -> FakeChain:
    """Empty ledger state; tests seed reserves, balances and receipts."""
    return FakeChain()


@pytest.fixture
def gateway(chain: FakeChain) -> ExchangeGateway:
    """Gateway for ACCOUNT over the fake chain, with the clock frozen at NOW."""
    return ExchangeGateway(FakeWeb3(chain), ACCOUNT, fast_config(), clock=lambda: NOW)


@pytest.fixture
def settlement() -> ControlledSettlement:
    return ControlledSettlement()


@pytest.fixture
def tracker(settlement: ControlledSettlement) -> PendingExchangeTracker:
    return PendingExchangeTracker(settlement)
