"""API endpoints for the exchange service."""

from fastapi import APIRouter, Depends, Query, Request

from dex.amm.constant_product import constant_product
from dex.constants import PRICE_SCALE
from dex.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    BalanceResponse,
    CreatePoolRequest,
    DepositQuoteResponse,
    ErrorResponse,
    ExactOutQuoteResponse,
    MintRequest,
    PoolResponse,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    ReservesResponse,
    SharesResponse,
    SwapRequest,
    SwapResponse,
)
from dex.models.types import normalize_identity
from dex.pool.pool import Pool
from dex.registry import PoolRegistry
from dex.transfers import AssetBank

# Documented bodies for rejected operations; see the handlers in dex.api.main
router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Operation rejected"},
        404: {"model": ErrorResponse, "description": "Pool not found"},
        409: {"model": ErrorResponse, "description": "Pool exists or is busy"},
    }
)


def get_registry(request: Request) -> PoolRegistry:
    """Dependency provider for the pool registry.

    Override this in tests to inject a prepared registry:
        app.dependency_overrides[get_registry] = lambda: registry
    """
    return request.app.state.registry


def get_bank(request: Request) -> AssetBank:
    """Dependency provider for the in-memory asset bank."""
    return request.app.state.bank


def _pool_response(pool: Pool) -> PoolResponse:
    snapshot = pool.snapshot()
    price = None
    if not snapshot.is_empty:
        price = constant_product.get_price(snapshot.reserve_a, snapshot.reserve_b)
    return PoolResponse.from_snapshot(snapshot, price)


@router.post("/pools", status_code=201, response_model_exclude_none=True)
def create_pool(
    body: CreatePoolRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> PoolResponse:
    """Create the pool for a new asset pair."""
    pool = registry.create_pool(body.asset_a, body.asset_b)
    return _pool_response(pool)


@router.get("/pools", response_model_exclude_none=True)
def list_pools(registry: PoolRegistry = Depends(get_registry)) -> list[PoolResponse]:
    return [_pool_response(pool) for pool in registry.pools()]


@router.get("/pools/{pool_id}", response_model_exclude_none=True)
def get_pool(pool_id: str, registry: PoolRegistry = Depends(get_registry)) -> PoolResponse:
    return _pool_response(registry.get_pool(pool_id))


@router.get("/pools/{pool_id}/reserves")
def get_reserves(pool_id: str, registry: PoolRegistry = Depends(get_registry)) -> ReservesResponse:
    reserve_a, reserve_b = registry.get_pool(pool_id).get_reserves()
    return ReservesResponse(reserve_a=reserve_a, reserve_b=reserve_b)


@router.get("/pools/{pool_id}/price")
def get_price(pool_id: str, registry: PoolRegistry = Depends(get_registry)) -> PriceResponse:
    """Price of asset A in asset B scaled by 1e18. Empty pools return 400 (empty_pool)."""
    price = registry.get_pool(pool_id).get_price()
    return PriceResponse(price=price, scale=PRICE_SCALE)


@router.get("/pools/{pool_id}/shares/{holder}")
def get_shares(
    pool_id: str,
    holder: str,
    registry: PoolRegistry = Depends(get_registry),
) -> SharesResponse:
    pool = registry.get_pool(pool_id)
    holder = normalize_identity(holder, kind="holder")
    return SharesResponse(
        holder=holder,
        shares=pool.balance_of(holder),
        total_shares=pool.total_shares,
    )


@router.get("/pools/{pool_id}/quote")
def quote_swap(
    pool_id: str,
    asset_in: str = Query(alias="assetIn"),
    amount_in: int = Query(alias="amountIn", ge=0),
    registry: PoolRegistry = Depends(get_registry),
) -> QuoteResponse:
    """Price a swap against the pool's current reserves without executing it."""
    quote = registry.get_pool(pool_id).quote_swap(asset_in, amount_in)
    return QuoteResponse(amount_out=quote.amount_out)


@router.get("/pools/{pool_id}/quote/exact-out")
def quote_swap_exact_out(
    pool_id: str,
    asset_out: str = Query(alias="assetOut"),
    amount_out: int = Query(alias="amountOut", ge=0),
    registry: PoolRegistry = Depends(get_registry),
) -> ExactOutQuoteResponse:
    """Smallest input of the other asset that buys at least amountOut of assetOut."""
    quote = registry.get_pool(pool_id).quote_swap_exact_out(asset_out, amount_out)
    return ExactOutQuoteResponse(
        asset_in=quote.asset_in,
        amount_in=quote.amount_in,
        asset_out=quote.asset_out,
        amount_out=quote.amount_out,
    )


@router.get("/pools/{pool_id}/quote/deposit")
def quote_deposit(
    pool_id: str,
    asset: str = Query(),
    amount: int = Query(ge=0),
    registry: PoolRegistry = Depends(get_registry),
) -> DepositQuoteResponse:
    """Amount of the other asset to deposit alongside amount of asset at the current ratio."""
    pool = registry.get_pool(pool_id)
    other_amount = pool.quote_deposit(asset, amount)
    asset = normalize_identity(asset)
    other = pool.asset_b if asset == pool.asset_a else pool.asset_a
    return DepositQuoteResponse(asset=other, amount=other_amount)


@router.post("/pools/{pool_id}/liquidity")
def add_liquidity(
    pool_id: str,
    body: AddLiquidityRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> AddLiquidityResponse:
    pool = registry.get_pool(pool_id)
    shares = pool.add_liquidity(int(body.amount_a), int(body.amount_b), body.holder)
    return AddLiquidityResponse(shares_minted=shares, pool=_pool_response(pool))


@router.post("/pools/{pool_id}/liquidity/remove")
def remove_liquidity(
    pool_id: str,
    body: RemoveLiquidityRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> RemoveLiquidityResponse:
    pool = registry.get_pool(pool_id)
    amount_a, amount_b = pool.remove_liquidity(int(body.shares), body.holder)
    return RemoveLiquidityResponse(amount_a=amount_a, amount_b=amount_b, pool=_pool_response(pool))


@router.post("/pools/{pool_id}/swap")
def swap(
    pool_id: str,
    body: SwapRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> SwapResponse:
    pool = registry.get_pool(pool_id)
    amount_out = pool.swap(int(body.amount_in), body.asset_in, body.trader)
    asset_out = pool.asset_b if body.asset_in == pool.asset_a else pool.asset_a
    return SwapResponse(
        asset_in=body.asset_in,
        asset_out=asset_out,
        amount_in=body.amount_in,
        amount_out=amount_out,
        pool=_pool_response(pool),
    )


@router.get("/quote")
def get_amount_out(
    amount_in: int = Query(alias="amountIn", ge=0),
    reserve_in: int = Query(alias="reserveIn", ge=0),
    reserve_out: int = Query(alias="reserveOut", ge=0),
) -> QuoteResponse:
    """Price a swap against explicit, possibly hypothetical, reserves."""
    return QuoteResponse(amount_out=Pool.get_amount_out(amount_in, reserve_in, reserve_out))


@router.post("/assets/{asset}/mint")
def mint_asset(
    asset: str,
    body: MintRequest,
    bank: AssetBank = Depends(get_bank),
) -> BalanceResponse:
    """Credit an account with newly created units of an asset."""
    asset = normalize_identity(asset)
    balance = bank.mint(body.account, asset, int(body.amount))
    return BalanceResponse(account=body.account, asset=asset, balance=balance)


@router.get("/assets/{asset}/balances/{account}")
def get_balance(
    asset: str,
    account: str,
    bank: AssetBank = Depends(get_bank),
) -> BalanceResponse:
    asset = normalize_identity(asset)
    account = normalize_identity(account, kind="account")
    return BalanceResponse(account=account, asset=asset, balance=bank.balance_of(account, asset))


__all__ = ["router", "get_registry", "get_bank"]
