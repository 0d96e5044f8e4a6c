"""Tests for the approve-or-swap flow."""

import asyncio

import pytest
from web3.exceptions import ContractLogicError

from amm_swap.chain.abi import MAX_UINT256
from amm_swap.core.assets import RequestKind
from amm_swap.core.quoter import minimum_acceptable_output, quote_output
from amm_swap.errors import DeadlineInPast, InvalidPairing, RouterRejected
from amm_swap.service import SwapService
from amm_swap.tracking.tracker import PendingExchangeTracker

from tests.fixtures import (
    ACCOUNT,
    DAI,
    DAI_USDC,
    DAI_WETH,
    NOW,
    ROUTER,
    USDC,
    WETH,
    tx_hex,
)


@pytest.fixture
def service(gateway) -> SwapService:
    return SwapService(gateway, clock=lambda: NOW)


@pytest.fixture
def seeded(chain):
    """DAI/USDC and DAI/WETH pools with liquidity and an account holding some of each."""
    chain.set_reserves(DAI_USDC, 1567234 * 10**18, 1234567 * 10**6)
    chain.set_reserves(DAI_WETH, 4_000_000 * 10**18, 2000 * 10**18)
    chain.set_balance(DAI, ACCOUNT, 500 * 10**18)
    chain.set_balance(USDC, ACCOUNT, 100 * 10**6)
    chain.native_balances[ACCOUNT.lower()] = 3 * 10**18
    return chain


def run(coro):
    return asyncio.run(coro)


class TestQuote:
    """Quotes from live reserves."""

    def test_quote_uses_reserves_in_direction(self, service, seeded):
        quote = run(service.quote(DAI_USDC, USDC, "10000"))

        amount_in = 10000 * 10**6
        expected = quote_output(1234567 * 10**6, 1567234 * 10**18, amount_in)
        assert quote.input_amount == amount_in
        assert quote.output_amount == expected
        assert quote.minimum_output == minimum_acceptable_output(expected, 100)
        assert quote.output_asset == DAI

    def test_custom_tolerance(self, gateway, seeded):
        service = SwapService(gateway, tolerance_bps=50, clock=lambda: NOW)
        quote = run(service.quote(DAI_USDC, DAI, "1"))
        assert quote.minimum_output == quote.output_amount * 9950 // 10000

    def test_invalid_amount_quotes_zero(self, service, seeded):
        quote = run(service.quote(DAI_USDC, DAI, "not a number"))
        assert quote.input_amount == 0
        assert quote.output_amount == 0

    def test_asset_outside_pool(self, service, seeded):
        with pytest.raises(InvalidPairing):
            run(service.quote(DAI_USDC, WETH, "1"))


class TestChecks:
    """Authorization and balance checks."""

    def test_native_needs_no_authorization(self, service, seeded):
        assert run(service.needs_authorization(WETH)) is False

    def test_zero_allowance_needs_authorization(self, service, seeded):
        assert run(service.needs_authorization(DAI)) is True

    def test_any_allowance_counts(self, service, seeded):
        seeded.set_allowance(DAI, ACCOUNT, ROUTER, 1)
        assert run(service.needs_authorization(DAI)) is False

    def test_insufficient_balance(self, service, seeded):
        assert run(service.insufficient_balance(USDC, "100.000001")) is True
        assert run(service.insufficient_balance(USDC, "100")) is False
        assert run(service.insufficient_balance(WETH, "3.5")) is True


class TestSwapOrApprove:
    """Submitting the next transaction and tracking it."""

    def test_first_action_is_authorization(self, service, seeded):
        async def scenario():
            quote = await service.quote(DAI_USDC, DAI, "10")
            task = await service.swap_or_approve(quote)
            (request,) = service.tracker.pending()
            seeded.mine(request.id)
            return request, await task

        request, status = run(scenario())

        assert request.kind is RequestKind.SPEND_AUTHORIZATION
        assert request.subject_asset == DAI.id
        assert request.id == tx_hex(1)
        assert status == 1
        assert seeded.sent[0].function == "approve"
        assert len(service.tracker) == 0

    def test_swap_after_authorization(self, service, seeded):
        seeded.set_allowance(DAI, ACCOUNT, ROUTER, MAX_UINT256)

        async def scenario():
            quote = await service.quote(DAI_USDC, DAI, "10")
            task = await service.swap_or_approve(quote)
            (request,) = service.tracker.pending()
            seeded.mine(request.id, status=0)
            return quote, request, await task

        quote, request, status = run(scenario())

        assert request.kind is RequestKind.EXCHANGE
        assert status == 0
        (sent,) = seeded.sent
        assert sent.function == "swapExactTokensForTokens"
        amount_in, min_out, _, _, deadline = sent.args
        assert amount_in == quote.input_amount
        assert min_out == quote.minimum_output
        assert deadline == NOW + 600

    def test_native_input_skips_authorization(self, service, seeded):
        async def scenario():
            quote = await service.quote(DAI_WETH, WETH, "1")
            task = await service.swap_or_approve(quote)
            seeded.mine(tx_hex(1))
            return await task

        assert run(scenario()) == 1
        (sent,) = seeded.sent
        assert sent.function == "swapExactETHForTokens"
        assert sent.params["value"] == 10**18

    def test_zero_output_refused(self, service, seeded):
        async def scenario():
            quote = await service.quote(DAI_USDC, DAI, "0")
            await service.swap_or_approve(quote)

        with pytest.raises(ValueError, match="zero"):
            run(scenario())
        assert seeded.sent == []

    def test_rejection_creates_no_entry(self, service, seeded):
        seeded.set_allowance(USDC, ACCOUNT, ROUTER, MAX_UINT256)
        seeded.fail("swapExactTokensForTokens", ContractLogicError("execution reverted"))

        async def scenario():
            quote = await service.quote(DAI_USDC, USDC, "1")
            await service.swap_or_approve(quote)

        with pytest.raises(RouterRejected):
            run(scenario())
        assert len(service.tracker) == 0

    def test_deadline_uses_configured_window(self, gateway, seeded):
        seeded.set_allowance(DAI, ACCOUNT, ROUTER, MAX_UINT256)
        # Service clock far behind the gateway clock: deadline lands in the past
        service = SwapService(gateway, clock=lambda: NOW - 10_000)

        async def scenario():
            quote = await service.quote(DAI_USDC, DAI, "1")
            await service.swap_or_approve(quote)

        with pytest.raises(DeadlineInPast):
            run(scenario())
        assert len(service.tracker) == 0

    def test_shared_tracker(self, gateway, seeded):
        tracker = PendingExchangeTracker(gateway)
        service = SwapService(gateway, tracker=tracker, clock=lambda: NOW)

        async def scenario():
            quote = await service.quote(DAI_USDC, DAI, "1")
            task = await service.swap_or_approve(quote)
            assert len(tracker) == 1
            seeded.mine(tx_hex(1))
            await task

        run(scenario())
        assert len(tracker) == 0
