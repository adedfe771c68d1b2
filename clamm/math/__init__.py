"""
Math layer for clamm

풀이 사용하는 가격 수학 협력자:
- tick_math: sqrtPriceX96 ↔ Tick 변환
- sqrt_price_math: sqrtPriceX96 ↔ 가격 변환
- liquidity_math: 유동성 ↔ 토큰 수량, 부호 있는 유동성 델타
"""

from .tick_math import (
    MIN_SQRT_RATIO,
    MAX_SQRT_RATIO,
    get_tick_at_sqrt_ratio,
    get_sqrt_ratio_at_tick,
    round_tick_to_spacing,
    get_tick_spacing_for_fee,
)
from .sqrt_price_math import (
    sqrt_price_x96_to_price,
    price_to_sqrt_price_x96,
)
from .liquidity_math import (
    add_delta,
    get_amount0_delta,
    get_amount1_delta,
    get_amount0_delta_signed,
    get_amount1_delta_signed,
    get_liquidity_for_amounts,
    get_amounts_for_liquidity,
)
