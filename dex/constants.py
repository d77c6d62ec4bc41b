"""Protocol constants for the constant-product exchange.

The fee is fixed for the lifetime of every pool; there is no governance
over it.
"""

# Largest representable amount (reserves, shares, balances, intermediates)
UINT256_MAX = 2**256 - 1

# Swap fee of 0.3%: 997/1000 of the input is priced, the rest stays in the pool
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Fixed-point scale for prices (1e18), matching on-chain wei precision
PRICE_SCALE = 10**18

# Domain tag mixed into pool identifiers
POOL_ID_DOMAIN = b"dex-constant-product-pool"
