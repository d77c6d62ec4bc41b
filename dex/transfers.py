"""Asset transfer collaborator.

The pool never moves assets itself. It asks a TransferGateway to pull funds
into its custody or push funds out, and relies on each call being
all-or-nothing: a transfer either moves exactly the requested amount or
fails without effect. The gateway is trusted to honor that contract; the
pool does not re-check balances after a transfer.

AssetBank is an in-memory implementation used by the HTTP service and the
tests. It keeps one balance per (account, asset) and hands out a gateway per
custody account, so every pool holds its assets in its own account.
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

import structlog

from dex.errors import InvalidAmount, TransferFailed
from dex.models.types import normalize_identity
from dex.safe_int import S

logger = structlog.get_logger()


@runtime_checkable
class TransferGateway(Protocol):
    """Moves assets between holders and one pool's custody.

    Implementations either complete the whole transfer and return (None or
    True), or leave balances untouched and signal failure by raising
    TransferFailed or returning False.
    """

    def transfer_in(self, asset: str, sender: str, amount: int) -> bool | None:
        """Move amount of asset from sender into pool custody."""
        ...

    def transfer_out(self, asset: str, recipient: str, amount: int) -> bool | None:
        """Move amount of asset from pool custody to recipient."""
        ...


class AssetBank:
    """In-memory multi-asset balance table mapping (account, asset) -> amount.

    Notes:
    - Balances are always non-negative; zero balances are omitted.
    - freeze() blocks every transfer of one asset to or from one account,
      which is how tests simulate a token that rejects a payout.
    """

    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], int] = {}
        self._frozen: set[tuple[str, str]] = set()
        self._lock = threading.Lock()

    def balance_of(self, account: str, asset: str) -> int:
        """Balance of (account, asset). Returns 0 if not found."""
        key = (normalize_identity(account, kind="account"), normalize_identity(asset))
        with self._lock:
            return self._balances.get(key, 0)

    def mint(self, account: str, asset: str, amount: int) -> int:
        """Create amount of asset in account. Returns the new balance.

        Raises:
            InvalidAmount: If amount is not positive
            ArithmeticOverflow: If the balance would exceed uint256
        """
        if amount <= 0:
            raise InvalidAmount(f"Mint amount must be positive: {amount}")
        key = (normalize_identity(account, kind="account"), normalize_identity(asset))
        with self._lock:
            new_balance = (S(self._balances.get(key, 0)) + S(amount)).value
            self._balances[key] = new_balance
        logger.debug("asset_minted", account=key[0], asset=key[1], amount=amount)
        return new_balance

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        """Move amount of asset from sender to recipient atomically.

        Raises:
            TransferFailed: If sender and recipient are the same account,
                either side is frozen for this asset, the amount is not
                positive, or sender's balance is too small
        """
        asset = normalize_identity(asset)
        sender = normalize_identity(sender, kind="account")
        recipient = normalize_identity(recipient, kind="account")
        if amount <= 0:
            raise TransferFailed(f"Transfer amount must be positive: {amount}")
        if sender == recipient:
            # Custody paying itself would book reserves no transfer backs
            raise TransferFailed(f"Cannot transfer {asset} from {sender} to itself")

        with self._lock:
            for account in (sender, recipient):
                if (account, asset) in self._frozen:
                    raise TransferFailed(f"Account {account} is frozen for {asset}")
            balance = self._balances.get((sender, asset), 0)
            if balance < amount:
                raise TransferFailed(
                    f"Insufficient {asset} balance for {sender}: {balance} < {amount}"
                )
            credited = (S(self._balances.get((recipient, asset), 0)) + S(amount)).value
            self._set((sender, asset), balance - amount)
            self._set((recipient, asset), credited)

    def freeze(self, account: str, asset: str) -> None:
        """Make every transfer of asset to or from account fail."""
        with self._lock:
            self._frozen.add((normalize_identity(account, kind="account"), normalize_identity(asset)))

    def unfreeze(self, account: str, asset: str) -> None:
        with self._lock:
            self._frozen.discard(
                (normalize_identity(account, kind="account"), normalize_identity(asset))
            )

    def custody_gateway(self, custody: str) -> BankGateway:
        """Gateway that moves assets in and out of the custody account."""
        return BankGateway(self, normalize_identity(custody, kind="account"))

    def _set(self, key: tuple[str, str], amount: int) -> None:
        if amount == 0:
            self._balances.pop(key, None)
        else:
            self._balances[key] = amount

    def __repr__(self) -> str:
        return f"AssetBank({len(self._balances)} entries)"


class BankGateway:
    """TransferGateway backed by an AssetBank custody account."""

    def __init__(self, bank: AssetBank, custody: str) -> None:
        self.bank = bank
        self.custody = custody

    def transfer_in(self, asset: str, sender: str, amount: int) -> None:
        self.bank.transfer(asset, sender, self.custody, amount)

    def transfer_out(self, asset: str, recipient: str, amount: int) -> None:
        self.bank.transfer(asset, self.custody, recipient, amount)
