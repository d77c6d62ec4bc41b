"""Shared type definitions for exchange models.

These types are used by the pool core (identity normalization) and by the
API request/response models.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from dex.constants import UINT256_MAX
from dex.errors import InvalidAsset


def validate_uint256(value: Any) -> str:
    """Validate that a value is a valid uint256 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint256 as decimal string

    Raises:
        ValueError: If value is not a valid non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 must be string or int, got bool")

    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")

    return str(int_value)


def normalize_identity(value: str, *, kind: str = "asset") -> str:
    """Normalize an asset or holder identity.

    Identities are opaque non-empty strings. Hex addresses (``0x...``) are
    lowercased so that checksummed and lowercase spellings refer to the same
    account; anything else is only stripped of surrounding whitespace.

    Args:
        value: Raw identity
        kind: What the identity names, used in the error message

    Returns:
        Normalized identity

    Raises:
        InvalidAsset: If value is not a string or is empty after stripping
    """
    if not isinstance(value, str):
        raise InvalidAsset(f"{kind} identity must be a string, got {type(value).__name__}")
    ident = value.strip()
    if not ident:
        raise InvalidAsset(f"{kind} identity must not be empty")
    if ident[:2].lower() == "0x":
        ident = ident.lower()
    return ident


def _validate_asset(value: Any) -> str:
    return normalize_identity(value, kind="asset")


def _validate_account(value: Any) -> str:
    return normalize_identity(value, kind="account")


# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]

# Asset identity (normalized)
AssetId = Annotated[
    str,
    BeforeValidator(_validate_asset),
    Field(description="Asset identity; hex addresses are lowercased"),
]

# Holder / trader identity (normalized)
AccountId = Annotated[
    str,
    BeforeValidator(_validate_account),
    Field(description="Account identity; hex addresses are lowercased"),
]
