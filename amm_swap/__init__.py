"""Quote and execute exchanges against constant product AMM pools."""

from amm_swap.core.assets import Asset, ExchangeRequest, Pool, RequestKind
from amm_swap.core.quoter import direction, minimum_acceptable_output, quote_output
from amm_swap.core.units import to_base_units, to_display
from amm_swap.tracking.tracker import PendingExchangeTracker

__all__ = [
    "Asset",
    "ExchangeRequest",
    "Pool",
    "RequestKind",
    "PendingExchangeTracker",
    "direction",
    "minimum_acceptable_output",
    "quote_output",
    "to_base_units",
    "to_display",
]
