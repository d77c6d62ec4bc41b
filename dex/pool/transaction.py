"""All-or-nothing unit of work for a single pool operation.

A Transaction checkpoints both ledgers when it opens and records a
compensating transfer for every transfer it performs. If the operation
raises, the ledgers are restored and completed transfers are reversed in
reverse order, so a failed operation leaves neither ledger state nor asset
custody changed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

from dex.errors import DexError, TransferFailed
from dex.pool.reserves import ReserveLedger
from dex.pool.shares import ShareLedger
from dex.transfers import TransferGateway

logger = structlog.get_logger()


class Transaction:
    """Tracks ledger checkpoints and completed transfers for one operation."""

    def __init__(
        self,
        pool_id: str,
        reserves: ReserveLedger,
        shares: ShareLedger,
        gateway: TransferGateway,
    ) -> None:
        self.pool_id = pool_id
        self._reserves = reserves
        self._shares = shares
        self._gateway = gateway
        self._reserves_checkpoint = reserves.checkpoint()
        self._shares_checkpoint = shares.checkpoint()
        self._compensations: list[tuple[str, Callable[[], object]]] = []

    def pull(self, asset: str, sender: str, amount: int) -> None:
        """Transfer amount of asset from sender into pool custody.

        Raises:
            TransferFailed: If the gateway rejects the transfer or raises
        """
        _checked(self._gateway.transfer_in, "transfer_in", asset, sender, amount)
        self._compensations.append(
            (f"refund {amount} {asset} to {sender}",
             lambda: _checked(self._gateway.transfer_out, "transfer_out", asset, sender, amount))
        )

    def push(self, asset: str, recipient: str, amount: int) -> None:
        """Transfer amount of asset from pool custody to recipient.

        Raises:
            TransferFailed: If the gateway rejects the transfer or raises
        """
        _checked(self._gateway.transfer_out, "transfer_out", asset, recipient, amount)
        self._compensations.append(
            (f"reclaim {amount} {asset} from {recipient}",
             lambda: _checked(self._gateway.transfer_in, "transfer_in", asset, recipient, amount))
        )

    def commit(self) -> None:
        """Keep the operation's changes and drop the undo state."""
        self._shares.release()
        self._compensations.clear()

    def rollback(self) -> None:
        """Restore ledger checkpoints and reverse completed transfers.

        Raises:
            TransferFailed: If a compensating transfer fails; ledger state
                is still restored
        """
        self._reserves.restore(self._reserves_checkpoint)
        self._shares.restore(self._shares_checkpoint)

        failed: list[str] = []
        for description, compensate in reversed(self._compensations):
            try:
                compensate()
            except Exception as err:
                logger.error(
                    "compensation_failed",
                    pool_id=self.pool_id,
                    compensation=description,
                    error_type=type(err).__name__,
                    error=str(err),
                )
                failed.append(description)
        self._compensations.clear()

        if failed:
            raise TransferFailed(
                f"Rollback of pool {self.pool_id} could not {'; '.join(failed)}"
            )


@contextmanager
def transaction(
    pool_id: str,
    reserves: ReserveLedger,
    shares: ShareLedger,
    gateway: TransferGateway,
) -> Iterator[Transaction]:
    """Run a pool operation atomically.

    Usage:
        with transaction(pool_id, reserves, shares, gateway) as txn:
            txn.pull(asset, holder, amount)
            reserves.increase(asset, amount)
    """
    txn = Transaction(pool_id, reserves, shares, gateway)
    try:
        yield txn
    except Exception as err:
        logger.debug(
            "transaction_rolled_back",
            pool_id=pool_id,
            error_type=type(err).__name__,
            error=str(err),
        )
        txn.rollback()
        raise
    else:
        txn.commit()


def _checked(
    call: Callable[[str, str, int], bool | None],
    name: str,
    asset: str,
    account: str,
    amount: int,
) -> None:
    try:
        result = call(asset, account, amount)
    except DexError:
        raise
    except Exception as err:
        raise TransferFailed(
            f"{name} of {amount} {asset} for {account} failed: {type(err).__name__}: {err}"
        ) from err
    if result is False:
        raise TransferFailed(f"{name} of {amount} {asset} for {account} was rejected")
