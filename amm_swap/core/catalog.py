"""Helpers over a pool index snapshot.

The snapshot (pools ordered by USD reserve) is fetched and refreshed by
the caller; everything here is pure.
"""

from typing import Iterable, Optional

from amm_swap.core.assets import Asset, Pool, normalize_id


def assets_from_pools(
    pools: Iterable[Pool],
    native_asset_id: Optional[str] = None,
    exclude: Iterable[str] = (),
) -> list[Asset]:
    """Distinct assets appearing in pools.

    The native asset sorts first, the rest by symbol. Assets whose id is
    in exclude are dropped.
    """
    excluded = {normalize_id(asset_id) for asset_id in exclude}
    native = normalize_id(native_asset_id) if native_asset_id else None

    seen: dict[str, Asset] = {}
    for pool in pools:
        for asset in (pool.asset_a, pool.asset_b):
            if asset.id not in excluded and asset.id not in seen:
                seen[asset.id] = asset

    return sorted(seen.values(), key=lambda a: (a.id != native, a.symbol.lower(), a.id))


def find_pool(pools: Iterable[Pool], asset_id_a: str, asset_id_b: str) -> Optional[Pool]:
    """First pool pairing the two assets, in either order."""
    wanted = {normalize_id(asset_id_a), normalize_id(asset_id_b)}
    for pool in pools:
        if {pool.asset_a.id, pool.asset_b.id} == wanted:
            return pool
    return None


def pairable_assets(asset_id: str, assets: Iterable[Asset], pools: Iterable[Pool]) -> list[Asset]:
    """Assets that share at least one pool with asset_id, in the order of assets."""
    asset_id = normalize_id(asset_id)
    partners = set()
    for pool in pools:
        if pool.contains(asset_id):
            partners.add(pool.other(asset_id).id)
    return [asset for asset in assets if asset.id in partners]


def default_pool(pools: list[Pool], native_asset_id: Optional[str] = None) -> Optional[Pool]:
    """Pool to preselect: first one selling the native asset, else the first pool."""
    if native_asset_id:
        native = normalize_id(native_asset_id)
        for pool in pools:
            if pool.asset_a.id == native:
                return pool
    return pools[0] if pools else None
