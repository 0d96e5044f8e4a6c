"""Transaction settlement tracking."""

from amm_swap.tracking.tracker import PendingExchangeTracker

__all__ = ["PendingExchangeTracker"]
