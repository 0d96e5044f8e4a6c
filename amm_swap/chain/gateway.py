"""Reads and writes against the pair, ERC-20 and router contracts."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Sequence, Tuple, TypeVar

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import TransactionNotFound, Web3Exception

from amm_swap.chain.abi import ERC20_ABI, MAX_UINT256, PAIR_ABI, ROUTER_ABI
from amm_swap.chain.config import GatewayConfig
from amm_swap.core.assets import Asset, normalize_id
from amm_swap.errors import (
    ContractReadError,
    DeadlineInPast,
    GatewayError,
    NetworkError,
    RouterRejected,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NETWORK_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


class ExchangeGateway:
    """The only component that talks to the chain.

    Reads are side-effect free and may run concurrently. Writes are sent
    from `account` with eth_sendTransaction, so signing is left to the
    node or wallet behind the provider. Nothing here retries: every
    failure surfaces as a GatewayError subclass.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        account: str,
        config: Optional[GatewayConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            w3: Connected async web3 client
            account: Active account address supplied by the wallet layer
            config: Router/native asset/gas settings (defaults to mainnet Uniswap V2)
            clock: Source of the current unix time, used for deadline checks
        """
        self._w3 = w3
        self.account = Web3.to_checksum_address(account)
        self.config = config or GatewayConfig()
        self._clock = clock
        self._native_id = normalize_id(self.config.native_asset_id)

    @classmethod
    def connect(cls, account: str, config: Optional[GatewayConfig] = None) -> "ExchangeGateway":
        """Create a gateway with an HTTP provider pointed at config.rpc_url."""
        config = config or GatewayConfig()
        w3 = AsyncWeb3(AsyncHTTPProvider(config.rpc_url))
        return cls(w3, account, config)

    def is_native_asset(self, asset_id: str) -> bool:
        """True if asset_id stands for the chain's native currency."""
        return normalize_id(asset_id) == self._native_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_reserves(self, pool_id: str) -> Tuple[int, int]:
        """Current (reserve_a, reserve_b) of a pair, in the pair's token order."""
        pair = self._contract(pool_id, PAIR_ABI)
        reserve0, reserve1, _ = await self._read(
            f"getReserves({pool_id})", pair.functions.getReserves().call()
        )
        return int(reserve0), int(reserve1)

    async def get_balance(self, asset_id: str, account: str) -> int:
        """Balance in base units; the native asset is read from the account itself."""
        owner = self._checksum(account)
        if self.is_native_asset(asset_id):
            balance = await self._read(f"getBalance({owner})", self._w3.eth.get_balance(owner))
        else:
            token = self._contract(asset_id, ERC20_ABI)
            balance = await self._read(
                f"balanceOf({asset_id}, {owner})", token.functions.balanceOf(owner).call()
            )
        return int(balance)

    async def get_allowance(self, asset_id: str, account: str) -> int:
        """How much of asset_id the configured router may spend for account."""
        owner = self._checksum(account)
        token = self._contract(asset_id, ERC20_ABI)
        allowance = await self._read(
            f"allowance({asset_id}, {owner})",
            token.functions.allowance(owner, self.config.router_address).call(),
        )
        return int(allowance)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def submit_spend_authorization(self, asset: Asset) -> str:
        """Approve the router for an unlimited amount of asset. Returns the tx id.

        Allowance is always MAX_UINT256, so each asset needs authorizing
        once per account.
        """
        token = self._contract(asset.id, ERC20_ABI, GatewayError)
        call = token.functions.approve(self.config.router_address, MAX_UINT256)
        try:
            tx_hash = await call.transact(self._tx_params())
        except Web3Exception as e:
            # Reverts at send time surface as Web3RPCError, at estimate time as ContractLogicError
            logger.warning("approve %s rejected: %s", asset.symbol, e)
            raise GatewayError(f"approve of {asset.symbol} rejected: {e}") from e
        except _NETWORK_ERRORS as e:
            raise NetworkError(f"approve of {asset.symbol} not sent: {e}") from e

        tx_id = Web3.to_hex(tx_hash)
        logger.info("spend authorization sent asset=%s tx=%s", asset.symbol, tx_id)
        return tx_id

    async def submit_exchange(
        self,
        input_amount: int,
        output_amount_minimum: int,
        path: Sequence[Asset],
        deadline: int,
    ) -> str:
        """Swap an exact input amount for at least output_amount_minimum.

        One of three router entry points is used, depending on whether
        the input or the output is the native asset:
        - native in:  swapExactETHForTokens, input sent as value
        - native out: swapExactTokensForETH
        - neither:    swapExactTokensForTokens

        Args:
            input_amount: Base units of the input asset to sell
            output_amount_minimum: Base units below which the router reverts
            path: (input_asset, output_asset)
            deadline: Unix time after which the router reverts

        Returns:
            Transaction id (0x-prefixed hash)

        Raises:
            DeadlineInPast: deadline is not after the current time
            RouterRejected: the router reverted before a hash was returned
        """
        now = int(self._clock())
        if deadline <= now:
            raise DeadlineInPast(deadline, now)

        input_asset, output_asset = path
        route = [
            self._checksum(input_asset.id, GatewayError),
            self._checksum(output_asset.id, GatewayError),
        ]
        router = self._contract(self.config.router_address, ROUTER_ABI)
        params = self._tx_params()

        if self.is_native_asset(input_asset.id):
            entry_point = "swapExactETHForTokens"
            call = router.functions.swapExactETHForTokens(
                output_amount_minimum, route, self.account, deadline
            )
            params["value"] = input_amount
        elif self.is_native_asset(output_asset.id):
            entry_point = "swapExactTokensForETH"
            call = router.functions.swapExactTokensForETH(
                input_amount, output_amount_minimum, route, self.account, deadline
            )
        else:
            entry_point = "swapExactTokensForTokens"
            call = router.functions.swapExactTokensForTokens(
                input_amount, output_amount_minimum, route, self.account, deadline
            )

        try:
            tx_hash = await call.transact(params)
        except Web3Exception as e:
            logger.warning("%s rejected: %s", entry_point, e)
            raise RouterRejected(entry_point, str(e)) from e
        except _NETWORK_ERRORS as e:
            raise NetworkError(f"{entry_point} not sent: {e}") from e

        tx_id = Web3.to_hex(tx_hash)
        logger.info(
            "exchange sent via %s %s->%s amount_in=%d min_out=%d tx=%s",
            entry_point,
            input_asset.symbol,
            output_asset.symbol,
            input_amount,
            output_amount_minimum,
            tx_id,
        )
        return tx_id

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    async def await_settlement(self, tx_id: str) -> Optional[int]:
        """Wait until tx_id is mined and return its receipt status.

        Returns None when the node does not know the transaction. There is
        no timeout: a transaction that is never mined keeps this waiting.
        """
        try:
            await self._w3.eth.get_transaction(tx_id)
        except TransactionNotFound:
            logger.info("transaction %s not found", tx_id)
            return None
        except _NETWORK_ERRORS as e:
            raise NetworkError(f"getTransaction({tx_id}) failed: {e}") from e

        while True:
            try:
                receipt = await self._w3.eth.get_transaction_receipt(tx_id)
            except TransactionNotFound:
                receipt = None
            except _NETWORK_ERRORS as e:
                raise NetworkError(f"getTransactionReceipt({tx_id}) failed: {e}") from e

            if receipt is not None and receipt.get("blockNumber") is not None:
                return receipt["status"]
            await asyncio.sleep(self.config.poll_interval)

    # ------------------------------------------------------------------

    def _contract(self, address: str, abi: list, error: type = ContractReadError):
        return self._w3.eth.contract(address=self._checksum(address, error), abi=abi)

    @staticmethod
    def _checksum(address: str, error: type = ContractReadError) -> str:
        try:
            return Web3.to_checksum_address(address)
        except (ValueError, TypeError) as e:
            raise error(f"not an address: {address!r}") from e

    def _tx_params(self) -> dict:
        return {"from": self.account, "gas": self.config.gas_limit}

    async def _read(self, what: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except _NETWORK_ERRORS as e:
            logger.warning("%s failed: %s", what, e)
            raise NetworkError(f"{what} failed: {e}") from e
        except Web3Exception as e:
            logger.warning("%s failed: %s", what, e)
            raise ContractReadError(f"{what} failed: {e}") from e
