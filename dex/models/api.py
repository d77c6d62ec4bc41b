"""Pydantic models for the exchange HTTP API.

Amounts cross the wire as uint256 decimal strings; field names are
camelCase on the wire and snake_case in Python.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from dex.models.types import AccountId, AssetId, Uint256
from dex.pool.pool import PoolSnapshot


class CreatePoolRequest(BaseModel):
    """Create the pool for a new asset pair."""

    asset_a: AssetId = Field(alias="assetA")
    asset_b: AssetId = Field(alias="assetB")

    model_config = {"populate_by_name": True}


class AddLiquidityRequest(BaseModel):
    """Deposit both assets into a pool."""

    holder: AccountId
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    """Burn shares for a proportional withdrawal."""

    holder: AccountId
    shares: Uint256


class SwapRequest(BaseModel):
    """Sell an exact amount of one pool asset for the other."""

    trader: AccountId
    asset_in: AssetId = Field(alias="assetIn")
    amount_in: Uint256 = Field(alias="amountIn")

    model_config = {"populate_by_name": True}


class MintRequest(BaseModel):
    """Fund an account in the in-memory asset bank."""

    account: AccountId
    amount: Uint256


class PoolResponse(BaseModel):
    """Pool state at one point in time."""

    pool_id: str = Field(alias="poolId")
    asset_a: str = Field(alias="assetA")
    asset_b: str = Field(alias="assetB")
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    total_shares: Uint256 = Field(alias="totalShares")
    price: Uint256 | None = Field(
        default=None,
        description="Price of asset A in asset B scaled by 1e18; absent for an empty pool.",
    )

    model_config = {"populate_by_name": True}

    @classmethod
    def from_snapshot(cls, snapshot: PoolSnapshot, price: int | None) -> PoolResponse:
        return cls(
            pool_id=snapshot.pool_id,
            asset_a=snapshot.asset_a,
            asset_b=snapshot.asset_b,
            reserve_a=snapshot.reserve_a,
            reserve_b=snapshot.reserve_b,
            total_shares=snapshot.total_shares,
            price=price,
        )


class ReservesResponse(BaseModel):
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")

    model_config = {"populate_by_name": True}


class PriceResponse(BaseModel):
    price: Uint256
    scale: Uint256


class SharesResponse(BaseModel):
    holder: str
    shares: Uint256
    total_shares: Uint256 = Field(alias="totalShares")

    model_config = {"populate_by_name": True}


class AddLiquidityResponse(BaseModel):
    shares_minted: Uint256 = Field(alias="sharesMinted")
    pool: PoolResponse

    model_config = {"populate_by_name": True}


class RemoveLiquidityResponse(BaseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")
    pool: PoolResponse

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    asset_in: str = Field(alias="assetIn")
    asset_out: str = Field(alias="assetOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    pool: PoolResponse

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class ExactOutQuoteResponse(BaseModel):
    """Smallest input buying at least amountOut against live reserves."""

    asset_in: str = Field(alias="assetIn")
    amount_in: Uint256 = Field(alias="amountIn")
    asset_out: str = Field(alias="assetOut")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class DepositQuoteResponse(BaseModel):
    """On-ratio amount of the other asset for a planned deposit."""

    asset: str
    amount: Uint256


class BalanceResponse(BaseModel):
    account: str
    asset: str
    balance: Uint256


class ErrorResponse(BaseModel):
    """Body returned for every rejected pool operation."""

    error: str = Field(description="Stable error code, e.g. 'insufficient_shares'")
    detail: str
