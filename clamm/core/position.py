"""
Position Store - (owner, tick_lower, tick_upper)별 유동성 기록

포지션은 한 소유자가 한 가격 범위 [tick_lower, tick_upper)에 공급한 유동성입니다.
처음 접근할 때 유동성 0으로 생성되며, 유동성은 음수가 될 수 없습니다.
"""

import hashlib
from dataclasses import dataclass, replace
from typing import Dict

from ..constants import Q128
from ..errors import NoPosition
from ..math.liquidity_math import add_delta
from .tokens import normalize_address


@dataclass
class PositionInfo:
    """Position-Indexed State

    - liquidity: 포지션의 유동성 (l)
    - fee_growth_inside_0_last_x128 / fee_growth_inside_1_last_x128:
      마지막 갱신 시점의 범위 내 수수료 성장값
    - tokens_owed_0 / tokens_owed_1: 포지션 소유자에게 지급될 토큰 수량
    """
    liquidity: int = 0
    fee_growth_inside_0_last_x128: int = 0
    fee_growth_inside_1_last_x128: int = 0
    tokens_owed_0: int = 0
    tokens_owed_1: int = 0

    def to_dict(self) -> dict:
        return {
            "liquidity": self.liquidity,
            "fee_growth_inside_0_last_x128": self.fee_growth_inside_0_last_x128,
            "fee_growth_inside_1_last_x128": self.fee_growth_inside_1_last_x128,
            "tokens_owed_0": self.tokens_owed_0,
            "tokens_owed_1": self.tokens_owed_1,
        }


def position_key(owner: str, tick_lower: int, tick_upper: int) -> str:
    """(owner, tick_lower, tick_upper)의 결정적 키 (SHA3-256 hex)"""
    packed = f"{normalize_address(owner)}|{tick_lower}|{tick_upper}".encode()
    return hashlib.sha3_256(packed).hexdigest()


class PositionStore:
    """포지션 키 → PositionInfo 저장소"""

    def __init__(self):
        self._positions: Dict[str, PositionInfo] = {}

    def get_or_create(self, owner: str, tick_lower: int, tick_upper: int) -> PositionInfo:
        """포지션 조회, 없으면 유동성 0으로 생성 (변경 가능한 핸들 반환)"""
        key = position_key(owner, tick_lower, tick_upper)
        position = self._positions.get(key)
        if position is None:
            position = self._positions[key] = PositionInfo()
        return position

    def get(self, owner: str, tick_lower: int, tick_upper: int) -> PositionInfo:
        """읽기 전용 조회 (복사본, 없으면 0 기록)"""
        position = self._positions.get(position_key(owner, tick_lower, tick_upper))
        return replace(position) if position is not None else PositionInfo()

    def __len__(self) -> int:
        return len(self._positions)

    @staticmethod
    def update(
        position: PositionInfo,
        liquidity_delta: int,
        fee_growth_inside_0_x128: int = 0,
        fee_growth_inside_1_x128: int = 0
    ) -> None:
        """포지션에 유동성 델타를 적용하고 수수료를 적립

        Raises:
            NoPosition: 유동성 0인 포지션에 델타 0을 적용하는 경우
            LiquidityUnderflow: 유동성이 음수가 되는 경우
        """
        if liquidity_delta == 0:
            if position.liquidity <= 0:
                raise NoPosition("cannot poke a position with zero liquidity")
            liquidity_next = position.liquidity
        else:
            liquidity_next = add_delta(position.liquidity, liquidity_delta)

        tokens_owed_0 = (
            (fee_growth_inside_0_x128 - position.fee_growth_inside_0_last_x128) * position.liquidity // Q128
        )
        tokens_owed_1 = (
            (fee_growth_inside_1_x128 - position.fee_growth_inside_1_last_x128) * position.liquidity // Q128
        )

        position.liquidity = liquidity_next
        position.fee_growth_inside_0_last_x128 = fee_growth_inside_0_x128
        position.fee_growth_inside_1_last_x128 = fee_growth_inside_1_x128
        if tokens_owed_0 > 0 or tokens_owed_1 > 0:
            position.tokens_owed_0 += tokens_owed_0
            position.tokens_owed_1 += tokens_owed_1

    def snapshot(self) -> Dict[str, PositionInfo]:
        return {key: replace(position) for key, position in self._positions.items()}

    def restore(self, snapshot: Dict[str, PositionInfo]) -> None:
        self._positions = snapshot
