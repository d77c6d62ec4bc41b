"""Two-asset constant product exchange."""

from dex.pool import Pool, PoolSnapshot
from dex.registry import PoolRegistry
from dex.transfers import AssetBank, TransferGateway

__version__ = "0.1.0"
__all__ = ["Pool", "PoolSnapshot", "PoolRegistry", "AssetBank", "TransferGateway", "__version__"]
