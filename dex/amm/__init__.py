"""AMM (Automated Market Maker) pricing implementations."""

from dex.amm.base import AMM, SwapQuote
from dex.amm.constant_product import ConstantProductAMM, constant_product

__all__ = [
    # Base classes
    "AMM",
    "SwapQuote",
    # Constant product
    "ConstantProductAMM",
    "constant_product",
]
