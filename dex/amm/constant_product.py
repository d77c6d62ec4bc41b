"""Constant product pricing engine.

Pools price swaps with x * y = k and a fixed 0.3% fee on the input amount.
All math is integer-only with checked uint256 intermediates and truncating
division, so every rounding step favors the pool over the trader.
"""

from __future__ import annotations

from dex.amm.base import AMM
from dex.constants import FEE_DENOMINATOR, FEE_NUMERATOR, PRICE_SCALE
from dex.errors import EmptyPool, InsufficientReserve, InvalidAmounts
from dex.safe_int import S


class ConstantProductAMM(AMM):
    """Constant product math with the fee retained in the pool.

    Formula: amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)

    The 997/1000 factor accounts for the 0.3% fee. The fee portion of the
    input is never priced but still lands in the input reserve, which is why
    the reserve product grows with every swap.
    """

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount using the constant product formula.

        Args:
            amount_in: Input asset amount
            reserve_in: Reserve of input asset in pool
            reserve_out: Reserve of output asset in pool

        Returns:
            Output asset amount, rounded down

        Raises:
            InvalidAmounts: If any argument is not strictly positive
            ArithmeticOverflow: If an intermediate leaves uint256
        """
        if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
            raise InvalidAmounts(
                f"amount_in and reserves must be positive: "
                f"amount_in={amount_in}, reserve_in={reserve_in}, reserve_out={reserve_out}"
            )

        amount_in_with_fee = S(amount_in) * FEE_NUMERATOR
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * FEE_DENOMINATOR + amount_in_with_fee

        return (numerator // denominator).value

    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate the smallest input that yields at least amount_out.

        Formula: amount_in = (reserve_in * amount_out * 1000) / ((reserve_out - amount_out) * 997) + 1

        Args:
            amount_out: Desired output asset amount
            reserve_in: Reserve of input asset in pool
            reserve_out: Reserve of output asset in pool

        Returns:
            Required input asset amount, rounded up

        Raises:
            InvalidAmounts: If any argument is not strictly positive
            InsufficientReserve: If amount_out would drain the output reserve
        """
        if amount_out <= 0 or reserve_in <= 0 or reserve_out <= 0:
            raise InvalidAmounts(
                f"amount_out and reserves must be positive: "
                f"amount_out={amount_out}, reserve_in={reserve_in}, reserve_out={reserve_out}"
            )
        if amount_out >= reserve_out:
            raise InsufficientReserve(
                f"Cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})"
            )

        numerator = S(reserve_in) * S(amount_out) * FEE_DENOMINATOR
        denominator = (S(reserve_out) - S(amount_out)) * FEE_NUMERATOR

        return ((numerator // denominator) + 1).value

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of the other asset that matches amount_a at the current ratio.

        Depositing (amount_a, quote(amount_a, ...)) keeps the pool ratio and
        wastes nothing to the min() in share minting beyond integer rounding.

        Raises:
            InvalidAmounts: If any argument is not strictly positive
        """
        if amount_a <= 0 or reserve_a <= 0 or reserve_b <= 0:
            raise InvalidAmounts(
                f"amount and reserves must be positive: "
                f"amount={amount_a}, reserve_a={reserve_a}, reserve_b={reserve_b}"
            )
        return ((S(amount_a) * S(reserve_b)) // S(reserve_a)).value

    def get_price(self, reserve_a: int, reserve_b: int, scale: int = PRICE_SCALE) -> int:
        """Spot price of asset A in units of asset B, as a scaled integer.

        Raises:
            EmptyPool: If reserve_a is zero
        """
        if reserve_a == 0:
            raise EmptyPool("Price is undefined for an empty pool")
        return ((S(reserve_b) * S(scale)) // S(reserve_a)).value


# Singleton instance
constant_product = ConstantProductAMM()


__all__ = [
    "ConstantProductAMM",
    "constant_product",
]
