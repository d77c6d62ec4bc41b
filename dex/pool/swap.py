"""Swap execution against a pool's reserves."""

from __future__ import annotations

import structlog

from dex.amm.base import SwapQuote
from dex.amm.constant_product import ConstantProductAMM, constant_product
from dex.errors import EmptyPool, InsufficientOutput, InvalidAmount
from dex.events import EventNotifier, Swap
from dex.pool.reserves import ReserveLedger
from dex.pool.transaction import Transaction

logger = structlog.get_logger()


class SwapExecutor:
    """Executes one-directional trades, symmetric in which asset goes in.

    The pricing engine is consulted, never mutated. Reserve updates happen
    only after the input has been pulled into custody, and the payout is
    the last transfer of the operation.
    """

    def __init__(
        self,
        pool_id: str,
        reserves: ReserveLedger,
        notifier: EventNotifier,
        amm: ConstantProductAMM | None = None,
    ) -> None:
        self.pool_id = pool_id
        self.reserves = reserves
        self.notifier = notifier
        self.amm = amm or constant_product

    def quote(self, asset_in: str, amount_in: int) -> SwapQuote:
        """Price a swap against the current reserves without executing it.

        Raises:
            InvalidAmount: If amount_in is not positive
            UnknownAsset: If asset_in is not one of the pool's assets
            EmptyPool: If either reserve is zero
        """
        if amount_in <= 0:
            raise InvalidAmount(f"Swap amount must be positive: {amount_in}")
        asset_out = self.reserves.other(asset_in)
        reserve_in, reserve_out = self._live_reserves(asset_in, asset_out)

        amount_out = self.amm.get_amount_out(amount_in, reserve_in, reserve_out)
        return SwapQuote(
            amount_in=amount_in,
            amount_out=amount_out,
            asset_in=asset_in,
            asset_out=asset_out,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
        )

    def quote_exact_out(self, asset_out: str, amount_out: int) -> SwapQuote:
        """Smallest input of the other asset that buys at least amount_out of asset_out.

        Selling the quoted amount_in through swap() pays out amount_out or
        slightly more, never less.

        Raises:
            InvalidAmount: If amount_out is not positive
            UnknownAsset: If asset_out is not one of the pool's assets
            EmptyPool: If either reserve is zero
            InsufficientReserve: If amount_out would drain the output reserve
        """
        if amount_out <= 0:
            raise InvalidAmount(f"Requested output must be positive: {amount_out}")
        asset_in = self.reserves.other(asset_out)
        reserve_in, reserve_out = self._live_reserves(asset_in, asset_out)

        amount_in = self.amm.get_amount_in(amount_out, reserve_in, reserve_out)
        return SwapQuote(
            amount_in=amount_in,
            amount_out=amount_out,
            asset_in=asset_in,
            asset_out=asset_out,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
        )

    def _live_reserves(self, asset_in: str, asset_out: str) -> tuple[int, int]:
        reserve_in = self.reserves.reserve_of(asset_in)
        reserve_out = self.reserves.reserve_of(asset_out)
        if reserve_in == 0 or reserve_out == 0:
            raise EmptyPool(f"Pool {self.pool_id} has no liquidity to swap against")
        return reserve_in, reserve_out

    def swap(self, txn: Transaction, asset_in: str, amount_in: int, trader: str) -> int:
        """Sell amount_in of asset_in for the pool's other asset.

        Returns:
            Amount of the other asset paid to trader

        Raises:
            InvalidAmount: If amount_in is not positive
            EmptyPool: If either reserve is zero
            InsufficientOutput: If the input is too small to buy anything
            TransferFailed: If the inbound transfer or the payout fails
        """
        quote = self.quote(asset_in, amount_in)
        if quote.amount_out == 0:
            raise InsufficientOutput(
                f"Swapping {amount_in} {asset_in} against reserves "
                f"({quote.reserve_in}, {quote.reserve_out}) yields zero output"
            )

        k_before = self.reserves.product()
        txn.pull(quote.asset_in, trader, amount_in)
        self.reserves.increase(quote.asset_in, amount_in)
        self.reserves.decrease(quote.asset_out, quote.amount_out)
        txn.push(quote.asset_out, trader, quote.amount_out)

        k_after = self.reserves.product()
        if k_after < k_before:
            logger.warning(
                "constant_product_decreased",
                pool_id=self.pool_id,
                k_before=k_before,
                k_after=k_after,
            )

        self.notifier.notify(
            Swap(
                pool_id=self.pool_id,
                trader=trader,
                asset_in=quote.asset_in,
                asset_out=quote.asset_out,
                amount_in=amount_in,
                amount_out=quote.amount_out,
            )
        )
        logger.info(
            "swap_executed",
            pool_id=self.pool_id,
            trader=trader,
            asset_in=quote.asset_in,
            asset_out=quote.asset_out,
            amount_in=amount_in,
            amount_out=quote.amount_out,
        )
        return quote.amount_out
