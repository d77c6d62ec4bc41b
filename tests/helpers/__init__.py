"""Test helpers module for shared test utilities.

- constants: Asset and account identities, funding amounts
- factories: Pool and funding helpers
"""

from tests.helpers.constants import ALICE, BOB, CAROL, DAI, ETHER, FUNDING, USDC, WETH
from tests.helpers.factories import custody_of, fund, make_pool

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "ALICE",
    "BOB",
    "CAROL",
    "FUNDING",
    "ETHER",
    # Factories
    "fund",
    "make_pool",
    "custody_of",
]
