"""
Price State

풀의 현재 sqrtPriceX96, 현재 틱, 그리고 모든 변경 진입점을 보호하는
단일 상호 배제 플래그(unlocked)를 보관합니다.

- sqrt_price_x96 == 0 은 "초기화되지 않음"을 뜻합니다.
- unlocked 는 초기화 전에는 False 이므로, 초기화 전의 변경 호출은 모두 Locked 로 실패합니다.
"""

from dataclasses import dataclass


@dataclass
class PriceState:
    sqrt_price_x96: int = 0
    tick: int = 0
    unlocked: bool = False

    @property
    def initialized(self) -> bool:
        return self.sqrt_price_x96 != 0

    def to_dict(self) -> dict:
        return {
            "sqrt_price_x96": self.sqrt_price_x96,
            "tick": self.tick,
            "unlocked": self.unlocked,
        }
