"""Test fixtures for gateway, tracker and service tests."""

from tests.fixtures.chain_fixtures import (
    ACCOUNT,
    DAI,
    DAI_USDC,
    DAI_WETH,
    NOW,
    OTHER_ACCOUNT,
    ROUTER,
    STANDARD_POOLS,
    UETH,
    USDC,
    USDC_WETH,
    WETH,
    ControlledSettlement,
    FakeChain,
    FakeWeb3,
    fast_config,
    tx_hex,
)

__all__ = [
    "ACCOUNT",
    "DAI",
    "DAI_USDC",
    "DAI_WETH",
    "NOW",
    "OTHER_ACCOUNT",
    "ROUTER",
    "STANDARD_POOLS",
    "UETH",
    "USDC",
    "USDC_WETH",
    "WETH",
    "ControlledSettlement",
    "FakeChain",
    "FakeWeb3",
    "fast_config",
    "tx_hex",
]
