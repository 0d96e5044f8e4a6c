"""Approve-or-swap flow tying the quoter, gateway and tracker together."""

import asyncio
import logging
import time
from typing import Callable, Optional

from amm_swap.chain.gateway import ExchangeGateway
from amm_swap.core.assets import Asset, ExchangeRequest, Pool, RequestKind
from amm_swap.core.quoter import DEFAULT_TOLERANCE_BPS, SwapQuote, build_quote
from amm_swap.core.units import to_base_units
from amm_swap.tracking.tracker import PendingExchangeTracker

logger = logging.getLogger(__name__)


class SwapService:
    """Caller-side policy on top of the gateway.

    Decides whether the next action for a quote is a spend authorization
    or the exchange itself, submits it and hands the transaction to the
    tracker. Balance and quote refresh loops belong to the caller; every
    method here is a single round of reads.
    """

    def __init__(
        self,
        gateway: ExchangeGateway,
        tracker: Optional[PendingExchangeTracker] = None,
        tolerance_bps: int = DEFAULT_TOLERANCE_BPS,
        clock: Callable[[], float] = time.time,
    ):
        self.gateway = gateway
        self.tracker = tracker or PendingExchangeTracker(gateway)
        self.tolerance_bps = tolerance_bps
        self._clock = clock

    async def quote(self, pool: Pool, input_asset: Asset, display_amount: str) -> SwapQuote:
        """Price display_amount of input_asset through pool at live reserves."""
        reserves = await self.gateway.get_reserves(pool.id)
        input_amount = to_base_units(display_amount, input_asset.precision)
        return build_quote(pool, input_asset.id, reserves, input_amount, self.tolerance_bps)

    async def needs_authorization(self, asset: Asset, account: Optional[str] = None) -> bool:
        """Whether the router must be approved before asset can be sold.

        Any nonzero allowance counts as approved, since approvals are
        always for the maximum amount.
        """
        if self.gateway.is_native_asset(asset.id):
            return False
        allowance = await self.gateway.get_allowance(asset.id, account or self.gateway.account)
        return allowance == 0

    async def insufficient_balance(
        self, asset: Asset, display_amount: str, account: Optional[str] = None
    ) -> bool:
        balance = await self.gateway.get_balance(asset.id, account or self.gateway.account)
        return to_base_units(display_amount, asset.precision) > balance

    async def swap_or_approve(self, quote: SwapQuote) -> "asyncio.Task[int]":
        """Submit the next transaction for quote and start tracking it.

        Returns:
            The tracker task for the submitted transaction

        Raises:
            ValueError: The quote has nothing to receive
        """
        if quote.input_amount == 0 or quote.output_amount == 0:
            raise ValueError("quote has a zero input or output amount")

        asset = quote.input_asset
        if await self.needs_authorization(asset):
            tx_id = await self.gateway.submit_spend_authorization(asset)
            kind = RequestKind.SPEND_AUTHORIZATION
        else:
            deadline = int(self._clock()) + self.gateway.config.deadline_seconds
            tx_id = await self.gateway.submit_exchange(
                quote.input_amount,
                quote.minimum_output,
                (quote.input_asset, quote.output_asset),
                deadline,
            )
            kind = RequestKind.EXCHANGE

        request = ExchangeRequest(id=tx_id, kind=kind, subject_asset=asset.id)
        logger.info("submitted %s for %s: %s", kind.value, asset.symbol, tx_id)
        return self.tracker.begin(request)
