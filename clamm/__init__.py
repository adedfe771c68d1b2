"""
clamm - Concentrated Liquidity Accounting Core

집중화된 유동성 AMM의 유동성 회계 코어.
틱/포지션 단위의 유동성 기록, 틱별 유동성 상한, flip 감지,
재진입 방지와 원자적 롤백을 제공합니다.
"""

__version__ = "0.1.0"

from .constants import Q96, Q128, MIN_TICK, MAX_TICK, UINT128_MAX, FEE_TIERS, TICK_SPACINGS
from .core.pool import LiquidityPool, PoolConfig
from .core.tokens import TokenLedger
