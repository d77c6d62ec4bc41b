"""Pool registry for hosting many independent pools.

Each asset pair has at most one pool. Pools never share a lock, so
operations on different pairs run in parallel; the registry's own lock only
guards pool creation and lookup.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

import structlog

from dex.errors import PoolExists, PoolNotFound
from dex.events import EventNotifier, LoggingNotifier
from dex.models.types import normalize_identity
from dex.pool.pool import Pool, compute_pool_id
from dex.transfers import TransferGateway

logger = structlog.get_logger()

# Builds the transfer gateway for a new pool from its pool_id
GatewayFactory = Callable[[str], TransferGateway]


class PoolRegistry:
    """Registry of pools keyed by their unordered asset pair.

    Usage:
        bank = AssetBank()
        registry = PoolRegistry(bank.custody_gateway)
        pool = registry.create_pool(WETH, USDC)
        assert registry.find_pool(USDC, WETH) is pool
    """

    def __init__(
        self,
        gateway_factory: GatewayFactory,
        notifier: EventNotifier | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            gateway_factory: Called with each new pool's id to build the
                gateway for its custody account
            notifier: Shared by all pools (default: structured log)
        """
        self._gateway_factory = gateway_factory
        self._notifier = notifier if notifier is not None else LoggingNotifier()
        self._pools: dict[str, Pool] = {}
        self._lock = threading.Lock()

    def create_pool(self, asset_a: str, asset_b: str) -> Pool:
        """Create and register the pool for (asset_a, asset_b).

        Raises:
            InvalidAsset: If either asset is empty or both are the same
            PoolExists: If the pair already has a pool (in either orientation)
        """
        asset_a = normalize_identity(asset_a)
        asset_b = normalize_identity(asset_b)
        pool_id = compute_pool_id(asset_a, asset_b)
        with self._lock:
            if pool_id in self._pools:
                raise PoolExists(f"Pool {pool_id} already exists for {asset_a}/{asset_b}")
            pool = Pool(asset_a, asset_b, self._gateway_factory(pool_id), self._notifier)
            self._pools[pool_id] = pool

        logger.info("pool_created", pool_id=pool_id, asset_a=asset_a, asset_b=asset_b)
        return pool

    def get_pool(self, pool_id: str) -> Pool:
        """Get a pool by identifier.

        Raises:
            PoolNotFound: If no pool has this identifier
        """
        with self._lock:
            pool = self._pools.get(pool_id)
        if pool is None:
            raise PoolNotFound(f"No pool with id {pool_id}")
        return pool

    def find_pool(self, asset_x: str, asset_y: str) -> Pool | None:
        """Get the pool for a pair (order independent), or None."""
        pool_id = compute_pool_id(normalize_identity(asset_x), normalize_identity(asset_y))
        with self._lock:
            return self._pools.get(pool_id)

    def pools(self) -> list[Pool]:
        """All registered pools, in creation order."""
        with self._lock:
            return list(self._pools.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._pools)

    def __contains__(self, pool_id: object) -> bool:
        with self._lock:
            return pool_id in self._pools
