"""Share ledger: liquidity-share balances per holder."""

from __future__ import annotations

from dex.errors import InsufficientShares, InvalidAmount
from dex.safe_int import S


class ShareLedger:
    """Exclusive owner of per-holder share balances and the total supply.

    Notes:
    - Balances are always positive; zero balances are pruned.
    - mint() and burn() update the holder balance and the total together,
      so sum(balances) == total_shares holds after every call.
    - checkpoint() does not copy balances. It starts an undo journal that
      records a holder's prior balance the first time the holder changes.
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._total_shares = 0
        self._undo: dict[str, int] | None = None

    @property
    def total_shares(self) -> int:
        return self._total_shares

    def balance_of(self, holder: str) -> int:
        """Share balance of holder. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def holders(self) -> dict[str, int]:
        """Return a copy of all non-zero balances."""
        return dict(self._balances)

    def mint(self, holder: str, amount: int) -> None:
        """Issue amount new shares to holder.

        Raises:
            InvalidAmount: If amount is not positive
            ArithmeticOverflow: If the total supply would exceed uint256
        """
        if amount <= 0:
            raise InvalidAmount(f"Mint amount must be positive: {amount}")
        new_total = (S(self._total_shares) + S(amount)).value
        self._journal(holder)
        self._balances[holder] = self.balance_of(holder) + amount
        self._total_shares = new_total

    def burn(self, holder: str, amount: int) -> None:
        """Destroy amount of holder's shares.

        Raises:
            InvalidAmount: If amount is not positive
            InsufficientShares: If holder owns fewer than amount shares
        """
        if amount <= 0:
            raise InvalidAmount(f"Burn amount must be positive: {amount}")
        balance = self.balance_of(holder)
        if balance < amount:
            raise InsufficientShares(
                f"Holder {holder} has {balance} shares, cannot burn {amount}"
            )
        self._journal(holder)
        remaining = balance - amount
        if remaining == 0:
            del self._balances[holder]
        else:
            self._balances[holder] = remaining
        self._total_shares -= amount

    def checkpoint(self) -> tuple[dict[str, int], int]:
        """Start a new undo journal and return it with the current total.

        Only the latest checkpoint can be restored.
        """
        self._undo = {}
        return self._undo, self._total_shares

    def restore(self, checkpoint: tuple[dict[str, int], int]) -> None:
        """Reset every holder changed since checkpoint, and the total supply."""
        undo, total = checkpoint
        for holder, balance in undo.items():
            if balance == 0:
                self._balances.pop(holder, None)
            else:
                self._balances[holder] = balance
        self._total_shares = total
        undo.clear()
        self._undo = None

    def release(self) -> None:
        """Stop journaling; the latest checkpoint can no longer be restored."""
        self._undo = None

    def _journal(self, holder: str) -> None:
        if self._undo is not None and holder not in self._undo:
            self._undo[holder] = self._balances.get(holder, 0)

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        return f"ShareLedger({len(self._balances)} holders, total={self._total_shares})"
