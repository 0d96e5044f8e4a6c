"""Exception hierarchy for quoting, chain access and settlement tracking."""

from typing import Optional


class SwapError(Exception):
    """Base class for all amm_swap errors."""


class ConfigError(SwapError):
    """Invalid gateway configuration (bad address, bad number)."""


class InvalidPairing(SwapError):
    """Asset is not one of the two sides of a pool."""

    def __init__(self, pool_id: str, asset_id: str):
        self.pool_id = pool_id
        self.asset_id = asset_id
        super().__init__(f"asset {asset_id} is not part of pool {pool_id}")


class GatewayError(SwapError):
    """Failure raised by the exchange gateway."""


class NetworkError(GatewayError):
    """The node could not be reached or the request did not complete."""


class ContractReadError(GatewayError):
    """A read call reached the node but the contract call failed."""


class DeadlineInPast(GatewayError):
    """Exchange deadline is not strictly in the future."""

    def __init__(self, deadline: int, now: int):
        self.deadline = deadline
        self.now = now
        super().__init__(f"deadline {deadline} is not after current time {now}")


class RouterRejected(GatewayError):
    """The router reverted the exchange before a transaction was sent."""

    def __init__(self, entry_point: str, reason: Optional[str] = None):
        self.entry_point = entry_point
        self.reason = reason
        message = f"router rejected {entry_point}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DuplicateRequest(SwapError):
    """A request with the same transaction id is already pending."""

    def __init__(self, tx_id: str):
        self.tx_id = tx_id
        super().__init__(f"already awaiting settlement of {tx_id}")


class SettlementNotFound(SwapError):
    """The ledger has no record of the transaction."""

    def __init__(self, tx_id: str):
        self.tx_id = tx_id
        super().__init__(f"transaction {tx_id} not found")
