"""Two-asset constant product pool.

A Pool owns its reserve and share ledgers and is the only way to mutate
them. Every public operation runs under the pool's lock inside a
transaction: it either commits completely or leaves ledgers and custody
exactly as they were. Independent pools share nothing and can run in
parallel.
"""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

from dex.amm.base import SwapQuote
from dex.amm.constant_product import constant_product
from dex.constants import POOL_ID_DOMAIN
from dex.errors import EmptyPool, InvalidAsset, ReentrantCall
from dex.events import EventNotifier, LoggingNotifier
from dex.models.types import normalize_identity
from dex.pool.liquidity import LiquidityManager
from dex.pool.reserves import ReserveLedger
from dex.pool.shares import ShareLedger
from dex.pool.swap import SwapExecutor
from dex.pool.transaction import transaction
from dex.transfers import TransferGateway

logger = structlog.get_logger()


def compute_pool_id(asset_a: str, asset_b: str) -> str:
    """Deterministic identifier for the pool of an asset pair.

    The pair is hashed in canonical (sorted) order, so both orientations
    of the same pair map to the same identifier.
    """
    first, second = sorted((asset_a, asset_b))
    digest = hashlib.sha256(
        POOL_ID_DOMAIN + b"\x00" + first.encode("utf-8") + b"\x00" + second.encode("utf-8")
    )
    return digest.hexdigest()[:16]


@dataclass(frozen=True)
class PoolSnapshot:
    """Consistent view of a pool's state between operations."""

    pool_id: str
    asset_a: str
    asset_b: str
    reserve_a: int
    reserve_b: int
    total_shares: int

    @property
    def is_empty(self) -> bool:
        return self.total_shares == 0


class Pool:
    """A single trading pair with fixed-fee constant product pricing.

    Args:
        asset_a: First asset; prices are quoted as B per A
        asset_b: Second asset, distinct from asset_a
        gateway: Transfer collaborator moving assets in and out of custody
        notifier: Receiver of committed events (default: structured log)

    Raises:
        InvalidAsset: If either asset is empty or both are the same
    """

    def __init__(
        self,
        asset_a: str,
        asset_b: str,
        gateway: TransferGateway,
        notifier: EventNotifier | None = None,
    ) -> None:
        asset_a = normalize_identity(asset_a)
        asset_b = normalize_identity(asset_b)
        if asset_a == asset_b:
            raise InvalidAsset(f"Pool assets must differ, got {asset_a} twice")

        self.asset_a = asset_a
        self.asset_b = asset_b
        self.pool_id = compute_pool_id(asset_a, asset_b)
        self.gateway = gateway
        self.notifier = notifier if notifier is not None else LoggingNotifier()

        self._reserves = ReserveLedger(asset_a, asset_b)
        self._shares = ShareLedger()
        self._liquidity = LiquidityManager(self.pool_id, self._reserves, self._shares, self.notifier)
        self._swaps = SwapExecutor(self.pool_id, self._reserves, self.notifier)

        self._lock = threading.Lock()
        self._owner: int | None = None

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Hold the pool lock, rejecting re-entry from the owning thread."""
        if self._owner == threading.get_ident():
            raise ReentrantCall(f"Pool {self.pool_id} re-entered during an operation")
        with self._lock:
            self._owner = threading.get_ident()
            try:
                yield
            finally:
                self._owner = None

    # --- Mutating operations ---

    def add_liquidity(self, amount_a: int, amount_b: int, holder: str) -> int:
        """Deposit amount_a of asset A and amount_b of asset B; returns shares minted."""
        holder = normalize_identity(holder, kind="holder")
        with self._exclusive(), transaction(
            self.pool_id, self._reserves, self._shares, self.gateway
        ) as txn:
            return self._liquidity.add_liquidity(txn, amount_a, amount_b, holder)

    def remove_liquidity(self, share_amount: int, holder: str) -> tuple[int, int]:
        """Burn share_amount of holder's shares; returns (amount_a, amount_b) paid out."""
        holder = normalize_identity(holder, kind="holder")
        with self._exclusive(), transaction(
            self.pool_id, self._reserves, self._shares, self.gateway
        ) as txn:
            return self._liquidity.remove_liquidity(txn, share_amount, holder)

    def swap(self, amount_in: int, asset_in: str, trader: str) -> int:
        """Sell amount_in of asset_in for the other asset; returns the amount received."""
        asset_in = normalize_identity(asset_in)
        trader = normalize_identity(trader, kind="trader")
        with self._exclusive(), transaction(
            self.pool_id, self._reserves, self._shares, self.gateway
        ) as txn:
            return self._swaps.swap(txn, asset_in, amount_in, trader)

    def swap_a_for_b(self, amount_in: int, trader: str) -> int:
        return self.swap(amount_in, self.asset_a, trader)

    def swap_b_for_a(self, amount_in: int, trader: str) -> int:
        return self.swap(amount_in, self.asset_b, trader)

    # --- Queries ---

    def get_reserves(self) -> tuple[int, int]:
        """Return (reserve_a, reserve_b)."""
        with self._exclusive():
            return self._reserves.get_reserves()

    def get_price(self) -> int:
        """Price of asset A in asset B, scaled by 1e18.

        Raises:
            EmptyPool: If the pool holds no liquidity
        """
        with self._exclusive():
            reserve_a, reserve_b = self._reserves.get_reserves()
        return constant_product.get_price(reserve_a, reserve_b)

    @staticmethod
    def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Price a swap against explicit (possibly hypothetical) reserves."""
        return constant_product.get_amount_out(amount_in, reserve_in, reserve_out)

    def quote_swap(self, asset_in: str, amount_in: int) -> SwapQuote:
        """Price a swap against the current reserves without executing it."""
        asset_in = normalize_identity(asset_in)
        with self._exclusive():
            return self._swaps.quote(asset_in, amount_in)

    def quote_swap_exact_out(self, asset_out: str, amount_out: int) -> SwapQuote:
        """Input needed to buy at least amount_out of asset_out at the current reserves."""
        asset_out = normalize_identity(asset_out)
        with self._exclusive():
            return self._swaps.quote_exact_out(asset_out, amount_out)

    def quote_deposit(self, asset: str, amount: int) -> int:
        """Amount of the other asset that matches amount of asset at the current ratio.

        Raises:
            UnknownAsset: If asset is not one of the pool's assets
            EmptyPool: If the pool holds no liquidity (any ratio is accepted)
            InvalidAmounts: If amount is not positive
        """
        asset = normalize_identity(asset)
        with self._exclusive():
            reserve = self._reserves.reserve_of(asset)
            other_reserve = self._reserves.reserve_of(self._reserves.other(asset))
        if reserve == 0 or other_reserve == 0:
            raise EmptyPool(f"Pool {self.pool_id} is empty; the first deposit sets the ratio")
        return constant_product.quote(amount, reserve, other_reserve)

    def balance_of(self, holder: str) -> int:
        """Share balance of holder."""
        holder = normalize_identity(holder, kind="holder")
        with self._exclusive():
            return self._shares.balance_of(holder)

    @property
    def total_shares(self) -> int:
        with self._exclusive():
            return self._shares.total_shares

    def snapshot(self) -> PoolSnapshot:
        """Reserves and share supply observed atomically."""
        with self._exclusive():
            reserve_a, reserve_b = self._reserves.get_reserves()
            return PoolSnapshot(
                pool_id=self.pool_id,
                asset_a=self.asset_a,
                asset_b=self.asset_b,
                reserve_a=reserve_a,
                reserve_b=reserve_b,
                total_shares=self._shares.total_shares,
            )

    def share_balances(self) -> dict[str, int]:
        """All non-zero share balances."""
        with self._exclusive():
            return self._shares.holders()

    def __repr__(self) -> str:
        return f"Pool({self.pool_id}, {self.asset_a}/{self.asset_b})"
