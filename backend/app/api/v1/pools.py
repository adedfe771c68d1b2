"""
Pool Endpoints

Create pools, set their initial price, add and remove liquidity,
and read back ticks and positions.
"""
import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.errors import to_http_exception
from app.api.schemas import (
    CreatePoolRequest,
    InitializeRequest,
    InitializeResponse,
    LiquidityResponse,
    PoolListResponse,
    PoolResponse,
    PositionResponse,
    ProvideLiquidityRequest,
    QuoteResponse,
    RemoveLiquidityRequest,
    TickResponse,
)
from app.config import settings
from app.core.registry import PoolExists, PoolNotFound, PoolRegistry, get_registry
from clamm import LiquidityPool
from clamm.errors import PoolError
from clamm.math.sqrt_price_math import price_to_sqrt_price_x96, sqrt_price_x96_to_price

logger = logging.getLogger(__name__)

router = APIRouter()


def _pool_response(pool: LiquidityPool) -> PoolResponse:
    reserve0, reserve1 = pool.reserves()
    return PoolResponse(
        pool_id=pool.address,
        config=pool.config.to_dict(),
        state=pool.state.to_dict(),
        reserves={pool.token0: reserve0, pool.token1: reserve1},
    )


def _lookup(registry: PoolRegistry, pool_id: str) -> LiquidityPool:
    try:
        return registry.get(pool_id)
    except PoolNotFound:
        raise HTTPException(status_code=404, detail=f"Pool {pool_id} not found")


@router.post("/pools", response_model=PoolResponse, status_code=201)
async def create_pool(request: CreatePoolRequest, registry: PoolRegistry = Depends(get_registry)):
    """
    Create a pool

    tick_spacing defaults to the standard spacing of the fee tier.
    """
    fee_tier = request.fee_tier if request.fee_tier is not None else settings.DEFAULT_FEE_TIER
    try:
        pool = registry.create(request.token0, request.token1, fee_tier, request.tick_spacing)
    except PoolError as e:
        raise to_http_exception(e)
    except PoolExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _pool_response(pool)


@router.get("/pools", response_model=PoolListResponse)
async def list_pools(registry: PoolRegistry = Depends(get_registry)):
    return PoolListResponse(pools=[_pool_response(pool) for pool in registry.all()])


@router.get("/pools/{pool_id}", response_model=PoolResponse)
async def get_pool(pool_id: str, registry: PoolRegistry = Depends(get_registry)):
    return _pool_response(_lookup(registry, pool_id))


@router.post("/pools/{pool_id}/initialize", response_model=InitializeResponse)
async def initialize_pool(
    pool_id: str,
    request: InitializeRequest,
    registry: PoolRegistry = Depends(get_registry)
):
    """Set the initial sqrt price (once) and unlock the pool"""
    if (request.sqrt_price_x96 is None) == (request.price is None):
        raise HTTPException(status_code=422, detail="Give exactly one of sqrt_price_x96 or price")

    pool = _lookup(registry, pool_id)
    sqrt_price_x96 = request.sqrt_price_x96
    if sqrt_price_x96 is None:
        try:
            sqrt_price_x96 = price_to_sqrt_price_x96(request.price, request.decimals0, request.decimals1)
        except (ValueError, OverflowError) as e:
            raise HTTPException(status_code=422, detail=f"Cannot convert price: {e}")

    try:
        tick = pool.initialize(sqrt_price_x96)
    except PoolError as e:
        raise to_http_exception(e)
    return InitializeResponse(
        pool_id=pool.address,
        sqrt_price_x96=sqrt_price_x96,
        tick=tick,
        price=sqrt_price_x96_to_price(sqrt_price_x96),
    )


@router.post("/pools/{pool_id}/liquidity", response_model=LiquidityResponse)
async def provide_liquidity(
    pool_id: str,
    request: ProvideLiquidityRequest,
    registry: PoolRegistry = Depends(get_registry)
):
    """
    Add liquidity to a position

    The payer must have approved the pool address (pool_id) on the ledger
    for both tokens.
    """
    pool = _lookup(registry, pool_id)
    try:
        amount0, amount1 = pool.provide_liquidity(
            request.recipient,
            request.tick_lower,
            request.tick_upper,
            request.amount,
            payer=request.payer,
        )
    except PoolError as e:
        logger.info("provide_liquidity on %s failed: %s", pool.address, e.code)
        raise to_http_exception(e)
    return LiquidityResponse(amount0=amount0, amount1=amount1)


@router.post("/pools/{pool_id}/liquidity/remove", response_model=LiquidityResponse)
async def remove_liquidity(
    pool_id: str,
    request: RemoveLiquidityRequest,
    registry: PoolRegistry = Depends(get_registry)
):
    """Remove liquidity; released tokens are credited to the position's tokens_owed"""
    pool = _lookup(registry, pool_id)
    try:
        amount0, amount1 = pool.remove_liquidity(
            request.owner, request.tick_lower, request.tick_upper, request.amount
        )
    except PoolError as e:
        logger.info("remove_liquidity on %s failed: %s", pool.address, e.code)
        raise to_http_exception(e)
    return LiquidityResponse(amount0=amount0, amount1=amount1)


@router.get("/pools/{pool_id}/ticks", response_model=List[TickResponse])
async def list_ticks(pool_id: str, registry: PoolRegistry = Depends(get_registry)):
    """Initialized ticks in ascending order"""
    pool = _lookup(registry, pool_id)
    return [
        TickResponse(tick=tick, **pool.tick(tick).to_dict())
        for tick in pool.ticks.initialized_ticks()
    ]


@router.get("/pools/{pool_id}/ticks/{tick}", response_model=TickResponse)
async def get_tick(pool_id: str, tick: int, registry: PoolRegistry = Depends(get_registry)):
    pool = _lookup(registry, pool_id)
    return TickResponse(tick=tick, **pool.tick(tick).to_dict())


@router.get("/pools/{pool_id}/positions", response_model=PositionResponse)
async def get_position(
    pool_id: str,
    owner: str = Query(...),
    tick_lower: int = Query(...),
    tick_upper: int = Query(...),
    registry: PoolRegistry = Depends(get_registry)
):
    pool = _lookup(registry, pool_id)
    info = pool.position(owner, tick_lower, tick_upper)
    return PositionResponse(owner=owner, tick_lower=tick_lower, tick_upper=tick_upper, **info.to_dict())


@router.get("/pools/{pool_id}/positions/amounts", response_model=Dict[str, int])
async def get_position_amounts(
    pool_id: str,
    owner: str = Query(...),
    tick_lower: int = Query(...),
    tick_upper: int = Query(...),
    registry: PoolRegistry = Depends(get_registry)
):
    """Token amounts the position's liquidity represents at the current price"""
    pool = _lookup(registry, pool_id)
    try:
        amount0, amount1 = pool.amounts_for_position(owner, tick_lower, tick_upper)
    except PoolError as e:
        raise to_http_exception(e)
    return {"amount0": amount0, "amount1": amount1}


@router.get("/pools/{pool_id}/quote", response_model=QuoteResponse)
async def quote_liquidity(
    pool_id: str,
    tick_lower: int = Query(...),
    tick_upper: int = Query(...),
    amount0: int = Query(..., ge=0),
    amount1: int = Query(..., ge=0),
    registry: PoolRegistry = Depends(get_registry)
):
    """Largest liquidity amount0/amount1 can fund in [tick_lower, tick_upper)"""
    pool = _lookup(registry, pool_id)
    try:
        liquidity = pool.quote_liquidity(tick_lower, tick_upper, amount0, amount1)
    except PoolError as e:
        raise to_http_exception(e)
    return QuoteResponse(liquidity=liquidity)
