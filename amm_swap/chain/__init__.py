"""Chain access.

This module provides:
- ExchangeGateway: reads reserves/balances/allowances and submits approvals and swaps
- GatewayConfig: router, native asset, gas and RPC settings
"""

from amm_swap.chain.config import GatewayConfig
from amm_swap.chain.gateway import ExchangeGateway

__all__ = [
    "ExchangeGateway",
    "GatewayConfig",
]
