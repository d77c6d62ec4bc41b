"""Base classes for AMM pricing implementations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SwapQuote:
    """Result of pricing a swap against a pool's current reserves."""

    amount_in: int
    amount_out: int
    asset_in: str
    asset_out: str
    reserve_in: int
    reserve_out: int

    @property
    def reserves_after(self) -> tuple[int, int]:
        """Reserves (in, out) the pool would hold if the swap executed."""
        return self.reserve_in + self.amount_in, self.reserve_out - self.amount_out


class AMM(ABC):
    """Abstract base class for pricing engines.

    Implementations are stateless: reserves are always passed explicitly so
    the same engine can quote live pools and hypothetical states alike.
    """

    @abstractmethod
    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input asset amount
            reserve_in: Reserve of input asset in pool
            reserve_out: Reserve of output asset in pool

        Returns:
            Output asset amount
        """
        ...

    @abstractmethod
    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate required input for a desired output.

        Args:
            amount_out: Desired output asset amount
            reserve_in: Reserve of input asset in pool
            reserve_out: Reserve of output asset in pool

        Returns:
            Required input asset amount
        """
        ...
