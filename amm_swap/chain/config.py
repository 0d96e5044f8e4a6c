"""Deployment settings for the exchange gateway."""

from dataclasses import dataclass
import os
from typing import Mapping, Optional

from web3 import Web3

from amm_swap.errors import ConfigError

UNISWAP_V2_ROUTER02 = "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"

ENV_PREFIX = "AMM_SWAP_"


@dataclass(frozen=True)
class GatewayConfig:
    """Where the gateway talks to and how it sends exchanges.

    native_asset_id is the wrapped-native token address; exchanges that
    name it on either side are routed through the router's ETH entry
    points and balances for it are read from the account itself.
    """
    rpc_url: str = "http://127.0.0.1:8545"
    router_address: str = UNISWAP_V2_ROUTER02
    native_asset_id: str = WETH
    gas_limit: int = 200_000
    poll_interval: float = 1.0     # Seconds between receipt lookups
    deadline_seconds: int = 600    # Exchange validity window used by callers

    def __post_init__(self) -> None:
        for name in ("router_address", "native_asset_id"):
            value = getattr(self, name)
            if not Web3.is_address(value):
                raise ConfigError(f"{name} is not an address: {value!r}")
            object.__setattr__(self, name, Web3.to_checksum_address(value))
        if self.gas_limit <= 0:
            raise ConfigError(f"gas_limit must be > 0, got {self.gas_limit}")
        if self.poll_interval <= 0:
            raise ConfigError(f"poll_interval must be > 0, got {self.poll_interval}")
        if self.deadline_seconds <= 0:
            raise ConfigError(f"deadline_seconds must be > 0, got {self.deadline_seconds}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GatewayConfig":
        """Build a config from AMM_SWAP_* environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()

        def read(key: str, default, cast):
            raw = env.get(ENV_PREFIX + key)
            if raw is None or raw == "":
                return default
            try:
                return cast(raw)
            except ValueError as e:
                raise ConfigError(f"{ENV_PREFIX}{key}: {e}") from e

        return cls(
            rpc_url=read("RPC_URL", defaults.rpc_url, str),
            router_address=read("ROUTER", defaults.router_address, str),
            native_asset_id=read("NATIVE_ASSET", defaults.native_asset_id, str),
            gas_limit=read("GAS_LIMIT", defaults.gas_limit, int),
            poll_interval=read("POLL_INTERVAL", defaults.poll_interval, float),
            deadline_seconds=read("DEADLINE_SECONDS", defaults.deadline_seconds, int),
        )
