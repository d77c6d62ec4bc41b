"""Pool core: ledgers, liquidity management and swap execution."""

from dex.pool.liquidity import LiquidityManager, compute_shares_to_mint, compute_withdrawal
from dex.pool.pool import Pool, PoolSnapshot, compute_pool_id
from dex.pool.reserves import ReserveLedger
from dex.pool.shares import ShareLedger
from dex.pool.swap import SwapExecutor
from dex.pool.transaction import Transaction, transaction

__all__ = [
    "Pool",
    "PoolSnapshot",
    "compute_pool_id",
    # Ledgers
    "ReserveLedger",
    "ShareLedger",
    # Orchestration
    "LiquidityManager",
    "SwapExecutor",
    "Transaction",
    "transaction",
    # Math
    "compute_shares_to_mint",
    "compute_withdrawal",
]
