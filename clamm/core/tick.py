"""
Tick Store - 틱별 유동성 기록

각 틱은 자신을 경계로 참조하는 유동성의 총합(liquidity_gross)과,
가격이 위로 틱을 지날 때 활성 유동성에 더해지는 부호 있는 값(liquidity_net)을 가집니다.

- 기록이 없는 틱은 0 기록으로 읽힙니다.
- 유동성 변경으로 처음 참조될 때 생성됩니다.
- 감소 후 liquidity_gross가 0이 되면 clear로 삭제됩니다.
- initialized == (liquidity_gross != 0) 은 항상 성립합니다.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List

from ..constants import MIN_TICK, MAX_TICK, UINT128_MAX
from ..errors import InvalidTickSpacing, LiquidityCeilingExceeded
from ..math.liquidity_math import add_delta

logger = logging.getLogger(__name__)


@dataclass
class TickInfo:
    """Tick-Indexed State

    - liquidity_gross: 이 틱을 경계로 하는 총 유동성
    - liquidity_net: 가격이 위로 틱을 지날 때의 유동성 변화량 (ΔL)
    - fee_growth_outside_0_x128 / fee_growth_outside_1_x128: 예약 필드, 항상 0
    - initialized: liquidity_gross != 0
    """
    liquidity_gross: int = 0
    liquidity_net: int = 0
    fee_growth_outside_0_x128: int = 0
    fee_growth_outside_1_x128: int = 0
    initialized: bool = False

    def to_dict(self) -> dict:
        return {
            "liquidity_gross": self.liquidity_gross,
            "liquidity_net": self.liquidity_net,
            "fee_growth_outside_0_x128": self.fee_growth_outside_0_x128,
            "fee_growth_outside_1_x128": self.fee_growth_outside_1_x128,
            "initialized": self.initialized,
        }


def tick_spacing_to_max_liquidity_per_tick(tick_spacing: int) -> int:
    """틱 간격에서 틱당 최대 유동성 계산

    유효한 모든 틱이 동시에 최대 유동성을 가져도
    어떤 틱의 liquidity_gross도 uint128을 넘지 않도록 하는 상한.

        min_tick = floor(MIN_TICK / spacing) * spacing
        max_tick = floor(MAX_TICK / spacing) * spacing
        num_ticks = (max_tick - min_tick) / spacing + 1
        max_liquidity = floor(UINT128_MAX / num_ticks)

    Args:
        tick_spacing: 틱 간격 (양의 정수)

    Returns:
        틱당 최대 유동성

    Raises:
        InvalidTickSpacing: 간격이 양의 정수가 아닌 경우
    """
    if isinstance(tick_spacing, bool) or not isinstance(tick_spacing, int) or tick_spacing <= 0:
        raise InvalidTickSpacing(f"tick spacing must be a positive integer, got {tick_spacing!r}")

    min_tick = (MIN_TICK // tick_spacing) * tick_spacing
    max_tick = (MAX_TICK // tick_spacing) * tick_spacing
    num_ticks = (max_tick - min_tick) // tick_spacing + 1
    return UINT128_MAX // num_ticks


class TickStore:
    """틱 인덱스 → TickInfo 저장소

    풀(LiquidityPool)만 update/clear로 변경합니다. 읽기는 복사본을 돌려줍니다.
    """

    def __init__(self):
        self._ticks: Dict[int, TickInfo] = {}

    def get(self, tick: int) -> TickInfo:
        """틱 기록 조회 (없으면 0 기록)"""
        info = self._ticks.get(tick)
        return replace(info) if info is not None else TickInfo()

    def __contains__(self, tick: int) -> bool:
        return tick in self._ticks

    def __len__(self) -> int:
        return len(self._ticks)

    def initialized_ticks(self) -> List[int]:
        """유동성이 있는 틱 인덱스 (오름차순)"""
        return sorted(self._ticks)

    def update(
        self,
        tick: int,
        tick_current: int,
        liquidity_delta: int,
        upper: bool,
        max_liquidity: int
    ) -> bool:
        """틱의 유동성을 갱신하고 flip 여부를 반환

        Args:
            tick: 갱신할 틱
            tick_current: 현재 풀 틱 (fee growth outside 초기화용, 이 범위에서는 미사용)
            liquidity_delta: 부호 있는 유동성 변화량
            upper: 변경되는 범위의 상한 틱이면 True, 하한 틱이면 False
            max_liquidity: 틱당 최대 유동성

        Returns:
            0 ↔ 0이 아닌 값 전환이 일어났으면 True

        Raises:
            LiquidityUnderflow: liquidity_gross가 음수가 되는 경우
            LiquidityCeilingExceeded: liquidity_gross가 max_liquidity를 넘는 경우
        """
        if liquidity_delta == 0 and tick not in self._ticks:
            return False

        info = self._ticks.get(tick) or TickInfo()

        liquidity_gross_before = info.liquidity_gross
        liquidity_gross_after = add_delta(liquidity_gross_before, liquidity_delta)

        if liquidity_gross_after > max_liquidity:
            raise LiquidityCeilingExceeded(
                f"tick {tick}: liquidity {liquidity_gross_after} exceeds max {max_liquidity}"
            )

        flipped = (liquidity_gross_after == 0) != (liquidity_gross_before == 0)

        if upper:
            liquidity_net = info.liquidity_net - liquidity_delta
        else:
            liquidity_net = info.liquidity_net + liquidity_delta

        # fee growth outside 필드는 그대로 둔다
        self._ticks[tick] = replace(
            info,
            liquidity_gross=liquidity_gross_after,
            liquidity_net=liquidity_net,
            initialized=info.initialized or liquidity_gross_before == 0,
        )

        if flipped:
            logger.debug("tick %d flipped (gross %d -> %d)", tick, liquidity_gross_before, liquidity_gross_after)
        return flipped

    def clear(self, tick: int) -> None:
        """틱 기록 삭제 (0 기록으로 초기화)

        감소 후 liquidity_gross가 0이 되어 flip된 틱에만 호출해야 합니다.
        """
        self._ticks.pop(tick, None)
        logger.debug("tick %d cleared", tick)

    def snapshot(self) -> Dict[int, TickInfo]:
        return {tick: replace(info) for tick, info in self._ticks.items()}

    def restore(self, snapshot: Dict[int, TickInfo]) -> None:
        self._ticks = snapshot
