"""Command-line interface for quoting and inspecting pools."""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional, Sequence

from amm_swap.chain.config import GatewayConfig
from amm_swap.chain.gateway import ExchangeGateway
from amm_swap.core.quoter import DEFAULT_TOLERANCE_BPS, minimum_acceptable_output, quote_output
from amm_swap.core.units import to_base_units, to_display
from amm_swap.errors import SwapError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def quote_command(args: argparse.Namespace) -> int:
    """Quote an exchange from reserves given on the command line."""
    reserve_in = to_base_units(args.reserve_in, args.precision_in)
    reserve_out = to_base_units(args.reserve_out, args.precision_out)
    amount_in = to_base_units(args.amount, args.precision_in)

    amount_out = quote_output(reserve_in, reserve_out, amount_in)
    minimum = minimum_acceptable_output(amount_out, args.tolerance_bps)

    print(f"Input:   {to_display(amount_in, args.precision_in)}")
    print(f"Output:  {to_display(amount_out, args.precision_out)}")
    print(f"Minimum: {to_display(minimum, args.precision_out)} ({args.tolerance_bps} bps tolerance)")
    return 0


def reserves_command(args: argparse.Namespace) -> int:
    """Print the live reserves of a pair."""
    gateway = _gateway(args)
    try:
        reserve_a, reserve_b = asyncio.run(gateway.get_reserves(args.pool))
    except SwapError as e:
        print(f"Error: {e}")
        return 1
    print(f"reserve0: {reserve_a}")
    print(f"reserve1: {reserve_b}")
    return 0


def balance_command(args: argparse.Namespace) -> int:
    """Print an account's balance of an asset."""
    gateway = _gateway(args)
    try:
        balance = asyncio.run(gateway.get_balance(args.asset, args.owner))
    except SwapError as e:
        print(f"Error: {e}")
        return 1
    if args.precision is None:
        print(balance)
    else:
        print(to_display(balance, args.precision))
    return 0


def _gateway(args: argparse.Namespace) -> ExchangeGateway:
    config = GatewayConfig.from_env()
    return ExchangeGateway.connect(args.account, config)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Quote exchanges against Uniswap V2 style pools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  amm-swap quote --reserve-in 1000 --reserve-out 2000 --amount 1.5
  amm-swap reserves 0xA478c2975Ab1Ea89e8196811F51A7B7Ade33eB11
  amm-swap balance 0x6B175474E89094C44Da98b954EedeAC495271d0F 0xYourAccount --precision 18

Chain commands read AMM_SWAP_RPC_URL, AMM_SWAP_ROUTER and AMM_SWAP_NATIVE_ASSET.
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    parser.add_argument(
        "--account",
        default=os.environ.get("AMM_SWAP_ACCOUNT", ZERO_ADDRESS),
        help="Active account address (defaults to $AMM_SWAP_ACCOUNT)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    quote_parser = subparsers.add_parser("quote", help="Quote an exchange from given reserves")
    quote_parser.add_argument("--reserve-in", required=True, help="Input-side reserve (display units)")
    quote_parser.add_argument("--reserve-out", required=True, help="Output-side reserve (display units)")
    quote_parser.add_argument("--amount", required=True, help="Amount to sell (display units)")
    quote_parser.add_argument("--precision-in", type=int, default=18, help="Input asset decimals")
    quote_parser.add_argument("--precision-out", type=int, default=18, help="Output asset decimals")
    quote_parser.add_argument(
        "--tolerance-bps",
        type=int,
        default=DEFAULT_TOLERANCE_BPS,
        help="Slippage tolerance in basis points (default: 100)",
    )
    quote_parser.set_defaults(func=quote_command)

    reserves_parser = subparsers.add_parser("reserves", help="Read a pair's reserves")
    reserves_parser.add_argument("pool", help="Pair contract address")
    reserves_parser.set_defaults(func=reserves_command)

    balance_parser = subparsers.add_parser("balance", help="Read an account's balance")
    balance_parser.add_argument("asset", help="Token address (the native asset address reads ETH)")
    balance_parser.add_argument("owner", help="Account address")
    balance_parser.add_argument("--precision", type=int, default=None, help="Format with these decimals")
    balance_parser.set_defaults(func=balance_command)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | amm_swap | %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
