"""
Pool Registry

프로세스 로컬 풀 저장소. 모든 풀은 하나의 TokenLedger 를 공유하므로
ledger 엔드포인트로 지급한 잔고를 어느 풀에서든 사용할 수 있습니다.
"""
import logging
from typing import Dict, List, Optional

from clamm import LiquidityPool, TokenLedger
from clamm.core.pool import pool_address
from clamm.math.tick_math import get_tick_spacing_for_fee

logger = logging.getLogger(__name__)


class PoolNotFound(KeyError):
    pass


class PoolExists(Exception):
    pass


class PoolRegistry:
    """주소(pool id) → LiquidityPool"""

    def __init__(self, ledger: Optional[TokenLedger] = None):
        self.ledger = ledger if ledger is not None else TokenLedger()
        self._pools: Dict[str, LiquidityPool] = {}

    def create(
        self,
        token0: str,
        token1: str,
        fee_tier: int,
        tick_spacing: Optional[int] = None
    ) -> LiquidityPool:
        """풀 생성. tick_spacing 이 없으면 수수료 티어 표에서 가져온다

        Raises:
            ValueError: 지원하지 않는 수수료 티어 (tick_spacing 미지정 시)
            PoolExists: 같은 (token0, token1, fee, spacing) 풀이 이미 있는 경우
        """
        if tick_spacing is None:
            tick_spacing = get_tick_spacing_for_fee(fee_tier)

        address = pool_address(token0, token1, fee_tier, tick_spacing)
        if address in self._pools:
            raise PoolExists(f"pool {address} already exists")

        pool = LiquidityPool(token0, token1, fee_tier, tick_spacing, ledger=self.ledger)
        self._pools[pool.address] = pool
        logger.info("registered pool %s (%d total)", pool.address, len(self._pools))
        return pool

    def get(self, pool_id: str) -> LiquidityPool:
        try:
            return self._pools[pool_id.lower()]
        except KeyError:
            raise PoolNotFound(pool_id) from None

    def all(self) -> List[LiquidityPool]:
        return list(self._pools.values())

    def reset(self) -> None:
        self.ledger = TokenLedger()
        self._pools.clear()


# Global registry (프로세스당 하나)
_registry = PoolRegistry()


def get_registry() -> PoolRegistry:
    """FastAPI dependency"""
    return _registry
