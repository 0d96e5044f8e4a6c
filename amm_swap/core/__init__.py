"""Pure quoting components."""

from amm_swap.core.assets import Asset, ExchangeRequest, Pool, RequestKind
from amm_swap.core.quoter import (
    SwapQuote,
    build_quote,
    direction,
    minimum_acceptable_output,
    quote_output,
)
from amm_swap.core.units import to_base_units, to_display

__all__ = [
    "Asset",
    "ExchangeRequest",
    "Pool",
    "RequestKind",
    "SwapQuote",
    "build_quote",
    "direction",
    "minimum_acceptable_output",
    "quote_output",
    "to_base_units",
    "to_display",
]
