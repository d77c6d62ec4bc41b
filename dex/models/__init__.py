"""Pydantic models and shared types for the exchange API."""

from dex.models.types import AccountId, AssetId, Uint256, normalize_identity, validate_uint256

__all__ = [
    # Types
    "AccountId",
    "AssetId",
    "Uint256",
    "normalize_identity",
    "validate_uint256",
]
