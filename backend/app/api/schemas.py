"""
Pydantic schemas for API request/response validation
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime


class CreatePoolRequest(BaseModel):
    """Request payload for POST /api/v1/pools endpoint"""
    token0: str = Field(..., description="Token0 address")
    token1: str = Field(..., description="Token1 address")
    fee_tier: Optional[int] = Field(None, description="Fee tier in hundredths of a bip (default: settings.DEFAULT_FEE_TIER)")
    tick_spacing: Optional[int] = Field(None, description="Tick spacing (default: derived from fee tier)")

    class Config:
        json_schema_extra = {
            "example": {
                "token0": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
                "token1": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
                "fee_tier": 3000
            }
        }


class PoolConfigModel(BaseModel):
    token0: str
    token1: str
    fee_tier: int
    tick_spacing: int
    max_liquidity_per_tick: int


class PriceStateModel(BaseModel):
    sqrt_price_x96: int
    tick: int
    unlocked: bool


class PoolResponse(BaseModel):
    """Pool config, price state and custody balances"""
    pool_id: str = Field(..., description="Pool address (custody account)")
    config: PoolConfigModel
    state: PriceStateModel
    reserves: Dict[str, int] = Field(..., description="Token balances held by the pool")


class InitializeRequest(BaseModel):
    """Request payload for POST /api/v1/pools/{pool_id}/initialize endpoint

    Give either sqrt_price_x96 or a human-readable price (token1 per token0).
    """
    sqrt_price_x96: Optional[int] = Field(None, description="Initial sqrt price in Q64.96")
    price: Optional[float] = Field(None, gt=0, description="Initial price, converted to sqrt_price_x96")
    decimals0: int = Field(18, ge=0, le=255, description="Token0 decimals (used with price)")
    decimals1: int = Field(18, ge=0, le=255, description="Token1 decimals (used with price)")

    class Config:
        json_schema_extra = {
            "example": {
                "sqrt_price_x96": 79228162514264337593543950336
            }
        }


class InitializeResponse(BaseModel):
    pool_id: str
    sqrt_price_x96: int
    tick: int
    price: float = Field(..., description="Price at sqrt_price_x96 (token1 per token0, raw units)")


class ProvideLiquidityRequest(BaseModel):
    """Request payload for POST /api/v1/pools/{pool_id}/liquidity endpoint"""
    recipient: str = Field(..., description="Position owner")
    tick_lower: int = Field(..., description="Lower tick of the range")
    tick_upper: int = Field(..., description="Upper tick of the range")
    amount: int = Field(..., description="Liquidity to add")
    payer: Optional[str] = Field(None, description="Account paying the tokens (default: recipient)")

    class Config:
        json_schema_extra = {
            "example": {
                "recipient": "0x00000000000000000000000000000000000000a1",
                "tick_lower": -600,
                "tick_upper": 600,
                "amount": 1000000000000000000
            }
        }


class RemoveLiquidityRequest(BaseModel):
    """Request payload for POST /api/v1/pools/{pool_id}/liquidity/remove endpoint"""
    owner: str = Field(..., description="Position owner")
    tick_lower: int = Field(..., description="Lower tick of the range")
    tick_upper: int = Field(..., description="Upper tick of the range")
    amount: int = Field(..., description="Liquidity to remove")


class LiquidityResponse(BaseModel):
    """Token amounts moved by a liquidity change"""
    amount0: int = Field(..., description="Token0 amount (paid by the caller on add, credited on remove)")
    amount1: int = Field(..., description="Token1 amount (paid by the caller on add, credited on remove)")


class TickResponse(BaseModel):
    tick: int
    liquidity_gross: int
    liquidity_net: int
    fee_growth_outside_0_x128: int
    fee_growth_outside_1_x128: int
    initialized: bool


class PositionResponse(BaseModel):
    owner: str
    tick_lower: int
    tick_upper: int
    liquidity: int
    fee_growth_inside_0_last_x128: int
    fee_growth_inside_1_last_x128: int
    tokens_owed_0: int
    tokens_owed_1: int


class QuoteResponse(BaseModel):
    """Largest liquidity the given amounts can fund at the current price"""
    liquidity: int


class MintRequest(BaseModel):
    """Request payload for POST /api/v1/ledger/mint endpoint"""
    token: str
    account: str
    amount: int = Field(..., gt=0)


class ApproveRequest(BaseModel):
    """Request payload for POST /api/v1/ledger/approve endpoint"""
    token: str
    owner: str
    spender: str
    amount: int = Field(..., ge=0, description="Allowance (2^256-1 = infinite)")


class BalanceResponse(BaseModel):
    token: str
    account: str
    balance: int


class HealthCheckResponse(BaseModel):
    """Response payload for GET /api/v1/health endpoint"""
    status: str = Field(..., description="Health status (healthy, unhealthy)")
    version: str = Field(..., description="API version")
    pools: int = Field(..., description="Number of registered pools")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")


class PoolListResponse(BaseModel):
    pools: List[PoolResponse]
