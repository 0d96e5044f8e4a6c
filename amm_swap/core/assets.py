"""Asset, pool and exchange request data classes."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


def normalize_id(identifier: str) -> str:
    """Identifiers compare case-insensitively (checksummed vs. lower-case)."""
    return identifier.lower()


@dataclass(frozen=True)
class Asset:
    """A fungible asset as listed by the pool index.

    Example: Asset(id="0x6b17...", symbol="DAI", precision=18) means one
    DAI is 10**18 base units.
    """
    id: str
    symbol: str
    precision: int  # Decimal places of the base unit

    def __post_init__(self) -> None:
        if self.precision < 0:
            raise ValueError(f"precision must be >= 0, got {self.precision}")
        object.__setattr__(self, "id", normalize_id(self.id))


@dataclass(frozen=True)
class Pool:
    """A two-sided liquidity pool.

    The order of asset_a/asset_b matches the pool contract's reserve
    order, not any trading direction.
    """
    id: str
    asset_a: Asset
    asset_b: Asset
    reserve_usd: Decimal = field(default=Decimal("0"), compare=False)  # Display only

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", normalize_id(self.id))
        if self.asset_a.id == self.asset_b.id:
            raise ValueError(f"pool {self.id} pairs {self.asset_a.id} with itself")

    def contains(self, asset_id: str) -> bool:
        asset_id = normalize_id(asset_id)
        return asset_id in (self.asset_a.id, self.asset_b.id)

    def other(self, asset_id: str) -> Asset:
        """Return the asset on the opposite side of asset_id."""
        asset_id = normalize_id(asset_id)
        if asset_id == self.asset_a.id:
            return self.asset_b
        if asset_id == self.asset_b.id:
            return self.asset_a
        raise KeyError(asset_id)


class RequestKind(Enum):
    """What a submitted transaction does."""
    SPEND_AUTHORIZATION = "spend_authorization"
    EXCHANGE = "exchange"


@dataclass(frozen=True)
class ExchangeRequest:
    """A submitted write call awaiting settlement.

    id is the transaction hash returned by the node; subject_asset is the
    input asset of the exchange or the asset being authorized.
    """
    id: str
    kind: RequestKind
    subject_asset: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("transaction id must not be empty")
        object.__setattr__(self, "subject_asset", normalize_id(self.subject_asset))
