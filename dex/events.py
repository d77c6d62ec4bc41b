"""Pool events and the notifiers that receive them.

Pools report every committed state transition to an EventNotifier. The
notifier is an external collaborator: the pool only calls notify() and
never depends on what the notifier does with the event.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import ClassVar, Protocol, TypeVar, runtime_checkable

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolEvent:
    """Base class for events emitted by a pool."""

    kind: ClassVar[str] = "pool_event"

    pool_id: str

    def to_dict(self) -> dict[str, object]:
        """Event fields plus its kind, for logging and serialization."""
        return {"kind": self.kind, **asdict(self)}


@dataclass(frozen=True)
class LiquidityAdded(PoolEvent):
    """A provider deposited both assets and received shares."""

    kind: ClassVar[str] = "liquidity_added"

    provider: str
    amount_a: int
    amount_b: int
    shares_minted: int


@dataclass(frozen=True)
class LiquidityRemoved(PoolEvent):
    """A provider burned shares and withdrew both assets."""

    kind: ClassVar[str] = "liquidity_removed"

    provider: str
    amount_a: int
    amount_b: int
    shares_burned: int


@dataclass(frozen=True)
class Swap(PoolEvent):
    """A trader exchanged one pool asset for the other."""

    kind: ClassVar[str] = "swap"

    trader: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int


@runtime_checkable
class EventNotifier(Protocol):
    """Receiver of pool events."""

    def notify(self, event: PoolEvent) -> None:
        """Handle a committed pool event."""
        ...


class LoggingNotifier:
    """Notifier that writes every event to the structured log."""

    def notify(self, event: PoolEvent) -> None:
        logger.info("pool_event", **event.to_dict())


E = TypeVar("E", bound=PoolEvent)


class EventLog:
    """Notifier that records events in memory, in emission order.

    Usage:
        events = EventLog()
        pool = Pool(WETH, USDC, gateway, notifier=events)
        pool.add_liquidity(100, 200, "alice")
        assert events.of_type(LiquidityAdded)[0].shares_minted == 141
    """

    def __init__(self) -> None:
        self.events: list[PoolEvent] = []

    def notify(self, event: PoolEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type[E]) -> list[E]:
        """Recorded events of one type."""
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()

    def __len__(self) -> int:
        return len(self.events)


class MultiNotifier:
    """Fan an event out to several notifiers in order."""

    def __init__(self, *notifiers: EventNotifier) -> None:
        self.notifiers = list(notifiers)

    def notify(self, event: PoolEvent) -> None:
        for notifier in self.notifiers:
            notifier.notify(event)
