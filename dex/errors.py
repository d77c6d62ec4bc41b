"""Exchange error classes.

Every failure surfaced by a pool operation is a DexError subclass. Each class
carries a stable ``code`` used by the HTTP layer so clients can tell which
precondition or transfer failed without parsing the message.
"""


class DexError(Exception):
    """Base error for pool operations."""

    code = "dex_error"


class InvalidAmount(DexError):
    """A single amount was zero or negative where a positive value is required."""

    code = "invalid_amount"


class InvalidAmounts(DexError):
    """A combination of amounts failed a precondition (e.g. pricing with a zero reserve)."""

    code = "invalid_amounts"


class InvalidAsset(DexError, ValueError):
    """Asset or holder identity is empty, or both pool assets are the same."""

    code = "invalid_asset"


class UnknownAsset(DexError):
    """Asset is not one of the two assets bound to the pool."""

    code = "unknown_asset"


class InsufficientReserve(DexError):
    """Requested amount exceeds the pool's reserve of that asset."""

    code = "insufficient_reserve"


class InsufficientShares(DexError):
    """Holder's share balance is smaller than the amount to burn."""

    code = "insufficient_shares"


class Unauthorized(DexError):
    """Actor tried to burn or withdraw shares they do not hold."""

    code = "unauthorized"


class ZeroLiquidityMinted(DexError):
    """Deposit was too small relative to the reserves to mint a single share."""

    code = "zero_liquidity_minted"


class ZeroWithdrawal(DexError):
    """Burning the requested shares would pay out zero of one asset."""

    code = "zero_withdrawal"


class InsufficientOutput(DexError):
    """Swap input is too small to produce any output."""

    code = "insufficient_output"


class EmptyPool(DexError):
    """Operation requires funded reserves but the pool holds no liquidity."""

    code = "empty_pool"


class TransferFailed(DexError):
    """The transfer collaborator reported a failed transfer."""

    code = "transfer_failed"


class ReentrantCall(DexError):
    """Pool was re-entered from the thread that is already operating on it."""

    code = "reentrant_call"


class PoolExists(DexError):
    """A pool for this asset pair is already registered."""

    code = "pool_exists"


class PoolNotFound(DexError):
    """No pool is registered under the given identifier or pair."""

    code = "pool_not_found"


class ArithmeticOverflow(DexError, ArithmeticError):
    """Checked integer arithmetic left the uint256 range."""

    code = "arithmetic_overflow"
