"""Reserve ledger: the pool's holdings of its two assets."""

from __future__ import annotations

from dex.errors import InsufficientReserve, InvalidAmount, UnknownAsset
from dex.safe_int import S


class ReserveLedger:
    """Exclusive owner of a pool's two reserves.

    Reserves only change through increase() and decrease(); neither can
    leave a reserve negative or above uint256.
    """

    def __init__(self, asset_a: str, asset_b: str) -> None:
        self.asset_a = asset_a
        self.asset_b = asset_b
        self._reserves: dict[str, int] = {asset_a: 0, asset_b: 0}

    def get_reserves(self) -> tuple[int, int]:
        """Return (reserve_a, reserve_b)."""
        return self._reserves[self.asset_a], self._reserves[self.asset_b]

    def reserve_of(self, asset: str) -> int:
        self._require_asset(asset)
        return self._reserves[asset]

    def other(self, asset: str) -> str:
        """The pool's other asset."""
        self._require_asset(asset)
        return self.asset_b if asset == self.asset_a else self.asset_a

    def increase(self, asset: str, amount: int) -> None:
        """Add amount to the reserve of asset.

        Raises:
            UnknownAsset: If asset is not one of the pool's assets
            InvalidAmount: If amount is negative
            ArithmeticOverflow: If the reserve would exceed uint256
        """
        self._require_asset(asset)
        if amount < 0:
            raise InvalidAmount(f"Reserve increase must be non-negative: {amount}")
        self._reserves[asset] = (S(self._reserves[asset]) + S(amount)).value

    def decrease(self, asset: str, amount: int) -> None:
        """Remove amount from the reserve of asset.

        Raises:
            UnknownAsset: If asset is not one of the pool's assets
            InvalidAmount: If amount is negative
            InsufficientReserve: If amount exceeds the current reserve
        """
        self._require_asset(asset)
        if amount < 0:
            raise InvalidAmount(f"Reserve decrease must be non-negative: {amount}")
        current = self._reserves[asset]
        if amount > current:
            raise InsufficientReserve(
                f"Reserve of {asset} is {current}, cannot decrease by {amount}"
            )
        self._reserves[asset] = current - amount

    def product(self) -> int:
        """reserve_a * reserve_b (unchecked; used for invariant comparisons only)."""
        reserve_a, reserve_b = self.get_reserves()
        return reserve_a * reserve_b

    def checkpoint(self) -> tuple[int, int]:
        return self.get_reserves()

    def restore(self, checkpoint: tuple[int, int]) -> None:
        """Reset both reserves to a previous checkpoint."""
        self._reserves[self.asset_a], self._reserves[self.asset_b] = checkpoint

    def _require_asset(self, asset: str) -> None:
        if asset not in self._reserves:
            raise UnknownAsset(
                f"Asset {asset} is not in pool ({self.asset_a}, {self.asset_b})"
            )

    def __repr__(self) -> str:
        reserve_a, reserve_b = self.get_reserves()
        return f"ReserveLedger({self.asset_a}={reserve_a}, {self.asset_b}={reserve_b})"
