"""Liquidity management: deposits against shares and shares against withdrawals."""

from __future__ import annotations

import structlog

from dex.errors import (
    InsufficientShares,
    InvalidAmount,
    InvalidAmounts,
    Unauthorized,
    ZeroLiquidityMinted,
    ZeroWithdrawal,
)
from dex.events import EventNotifier, LiquidityAdded, LiquidityRemoved
from dex.pool.reserves import ReserveLedger
from dex.pool.shares import ShareLedger
from dex.pool.transaction import Transaction
from dex.safe_int import S

logger = structlog.get_logger()


def compute_shares_to_mint(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """Compute shares to mint for a deposit.

    For the first deposit (total_shares == 0):
        shares = floor(sqrt(amount_a * amount_b))

    For subsequent deposits:
        shares = min(floor(amount_a * total_shares / reserve_a),
                     floor(amount_b * total_shares / reserve_b))

    The first depositor sets the price. Later deposits are credited for the
    lesser-valued side only; any off-ratio surplus stays in the pool.

    Raises:
        InvalidAmounts: If either amount is not positive
        ArithmeticOverflow: If an intermediate leaves uint256
    """
    if amount_a <= 0 or amount_b <= 0:
        raise InvalidAmounts(f"Deposit amounts must be positive: ({amount_a}, {amount_b})")

    if total_shares == 0:
        return (S(amount_a) * S(amount_b)).isqrt().value

    shares_a = (S(amount_a) * S(total_shares)) // S(reserve_a)
    shares_b = (S(amount_b) * S(total_shares)) // S(reserve_b)
    return shares_a.min(shares_b).value


def compute_withdrawal(
    share_amount: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> tuple[int, int]:
    """Compute the assets paid out for burning share_amount shares.

    Formula:
        amount_a = floor(share_amount * reserve_a / total_shares)
        amount_b = floor(share_amount * reserve_b / total_shares)
    """
    amount_a = (S(share_amount) * S(reserve_a)) // S(total_shares)
    amount_b = (S(share_amount) * S(reserve_b)) // S(total_shares)
    return amount_a.value, amount_b.value


class LiquidityManager:
    """Orchestrates add/remove liquidity over a pool's ledgers.

    Methods run inside a Transaction opened by the owning Pool, under the
    pool's lock. Preconditions are checked before the first transfer or
    ledger mutation; anything that fails afterwards is undone by the
    transaction.
    """

    def __init__(
        self,
        pool_id: str,
        reserves: ReserveLedger,
        shares: ShareLedger,
        notifier: EventNotifier,
    ) -> None:
        self.pool_id = pool_id
        self.reserves = reserves
        self.shares = shares
        self.notifier = notifier

    def add_liquidity(self, txn: Transaction, amount_a: int, amount_b: int, holder: str) -> int:
        """Deposit both assets from holder and mint shares.

        Returns:
            Number of shares minted

        Raises:
            InvalidAmounts: If either amount is not positive
            ZeroLiquidityMinted: If the deposit is worth less than one share
            TransferFailed: If either inbound transfer fails
        """
        reserve_a, reserve_b = self.reserves.get_reserves()
        shares_minted = compute_shares_to_mint(
            amount_a, amount_b, reserve_a, reserve_b, self.shares.total_shares
        )
        if shares_minted == 0:
            raise ZeroLiquidityMinted(
                f"Deposit ({amount_a}, {amount_b}) against reserves "
                f"({reserve_a}, {reserve_b}) mints zero shares"
            )

        txn.pull(self.reserves.asset_a, holder, amount_a)
        txn.pull(self.reserves.asset_b, holder, amount_b)

        self.reserves.increase(self.reserves.asset_a, amount_a)
        self.reserves.increase(self.reserves.asset_b, amount_b)
        self.shares.mint(holder, shares_minted)

        self.notifier.notify(
            LiquidityAdded(
                pool_id=self.pool_id,
                provider=holder,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_minted=shares_minted,
            )
        )
        logger.info(
            "liquidity_added",
            pool_id=self.pool_id,
            provider=holder,
            amount_a=amount_a,
            amount_b=amount_b,
            shares_minted=shares_minted,
            total_shares=self.shares.total_shares,
        )
        return shares_minted

    def remove_liquidity(self, txn: Transaction, share_amount: int, holder: str) -> tuple[int, int]:
        """Burn holder's shares and pay out the proportional reserves.

        Returns:
            Tuple of (amount_a, amount_b) paid to holder

        Raises:
            InvalidAmount: If share_amount is not positive
            Unauthorized: If holder owns no shares
            InsufficientShares: If holder owns fewer than share_amount shares
            ZeroWithdrawal: If either payout rounds down to zero
            TransferFailed: If either outbound transfer fails
        """
        if share_amount <= 0:
            raise InvalidAmount(f"Share amount must be positive: {share_amount}")
        balance = self.shares.balance_of(holder)
        if balance == 0:
            raise Unauthorized(f"Holder {holder} owns no shares in pool {self.pool_id}")
        if balance < share_amount:
            raise InsufficientShares(
                f"Holder {holder} has {balance} shares, cannot remove {share_amount}"
            )

        reserve_a, reserve_b = self.reserves.get_reserves()
        amount_a, amount_b = compute_withdrawal(
            share_amount, reserve_a, reserve_b, self.shares.total_shares
        )
        if amount_a == 0 or amount_b == 0:
            raise ZeroWithdrawal(
                f"Burning {share_amount} shares pays out ({amount_a}, {amount_b})"
            )

        self.shares.burn(holder, share_amount)
        self.reserves.decrease(self.reserves.asset_a, amount_a)
        self.reserves.decrease(self.reserves.asset_b, amount_b)

        txn.push(self.reserves.asset_a, holder, amount_a)
        txn.push(self.reserves.asset_b, holder, amount_b)

        self.notifier.notify(
            LiquidityRemoved(
                pool_id=self.pool_id,
                provider=holder,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_burned=share_amount,
            )
        )
        logger.info(
            "liquidity_removed",
            pool_id=self.pool_id,
            provider=holder,
            amount_a=amount_a,
            amount_b=amount_b,
            shares_burned=share_amount,
            total_shares=self.shares.total_shares,
        )
        return amount_a, amount_b
