"""
Liquidity Math - 유동성 계산

가격 범위에서의 유동성 ↔ 토큰 수량 변환과 부호 있는 유동성 델타 적용.
풀이 포지션 변경 시 주고받을 토큰 수량을 계산할 때 사용하는 닫힌 형태의 공식.

핵심 공식:
    Δx = L * (1/√P_a - 1/√P_b)   # token0
    Δy = L * (√P_b - √P_a)       # token1
"""

from typing import Tuple

from ..constants import Q96, UINT128_MAX
from ..errors import LiquidityOverflow, LiquidityUnderflow


def add_delta(liquidity: int, delta: int) -> int:
    """부호 있는 델타를 부호 없는 유동성에 더함

    Args:
        liquidity: 현재 유동성 (>= 0)
        delta: 부호 있는 변화량

    Returns:
        새 유동성

    Raises:
        LiquidityUnderflow: 결과가 음수인 경우
        LiquidityOverflow: 결과가 uint128 범위를 넘는 경우
    """
    result = liquidity + delta
    if result < 0:
        raise LiquidityUnderflow(f"liquidity {liquidity} cannot absorb delta {delta}")
    if result > UINT128_MAX:
        raise LiquidityOverflow(f"liquidity {liquidity} + {delta} exceeds uint128")
    return result


def get_amount0_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """두 가격 사이에서 유동성 L에 해당하는 token0 수량

    공식: Δx = L * 2^96 * (√P_b - √P_a) / √P_b / √P_a

    Args:
        sqrt_ratio_a_x96: 한쪽 sqrtPriceX96 (순서 무관)
        sqrt_ratio_b_x96: 다른 쪽 sqrtPriceX96
        liquidity: 유동성 (>= 0)
        round_up: True면 올림, False면 내림

    Returns:
        amount0 (최소 단위)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    numerator1 = liquidity << 96
    numerator2 = sqrt_ratio_b_x96 - sqrt_ratio_a_x96

    if round_up:
        return _div_rounding_up(
            _mul_div_rounding_up(numerator1, numerator2, sqrt_ratio_b_x96),
            sqrt_ratio_a_x96
        )
    return (numerator1 * numerator2 // sqrt_ratio_b_x96) // sqrt_ratio_a_x96


def get_amount1_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """두 가격 사이에서 유동성 L에 해당하는 token1 수량

    공식: Δy = L * (√P_b - √P_a) / 2^96
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    if round_up:
        return _div_rounding_up(liquidity * (sqrt_ratio_b_x96 - sqrt_ratio_a_x96), Q96)
    return liquidity * (sqrt_ratio_b_x96 - sqrt_ratio_a_x96) // Q96


def get_amount0_delta_signed(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, liquidity_delta: int) -> int:
    """부호 있는 token0 변화량

    유동성 추가(양수)는 올림한 양수 (호출자가 풀에 지불),
    유동성 제거(음수)는 내림한 음수 (풀이 호출자에게 지불).
    """
    if liquidity_delta < 0:
        return -get_amount0_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, -liquidity_delta, False)
    return get_amount0_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity_delta, True)


def get_amount1_delta_signed(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, liquidity_delta: int) -> int:
    """부호 있는 token1 변화량 (get_amount0_delta_signed와 같은 부호 규칙)"""
    if liquidity_delta < 0:
        return -get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, -liquidity_delta, False)
    return get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity_delta, True)


def get_liquidity_for_amount0(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int
) -> int:
    """amount0로 얻을 수 있는 최대 유동성

    공식: L = Δx * √P_a * √P_b / (√P_b - √P_a)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_b_x96 == sqrt_ratio_a_x96:
        return 0

    intermediate = sqrt_ratio_a_x96 * sqrt_ratio_b_x96 // Q96
    return amount0 * intermediate // (sqrt_ratio_b_x96 - sqrt_ratio_a_x96)


def get_liquidity_for_amount1(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount1: int
) -> int:
    """amount1로 얻을 수 있는 최대 유동성

    공식: L = Δy / (√P_b - √P_a)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_b_x96 == sqrt_ratio_a_x96:
        return 0

    return amount1 * Q96 // (sqrt_ratio_b_x96 - sqrt_ratio_a_x96)


def get_liquidity_for_amounts(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int,
    amount1: int
) -> int:
    """현재 가격과 범위, 두 토큰 수량으로 민트 가능한 최대 유동성

    Args:
        sqrt_ratio_x96: 현재 sqrtPriceX96
        sqrt_ratio_a_x96: 범위 하한 sqrtPriceX96
        sqrt_ratio_b_x96: 범위 상한 sqrtPriceX96
        amount0: token0 수량
        amount1: token1 수량

    Returns:
        유동성 (두 제약 조건 중 작은 값)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        return get_liquidity_for_amount0(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount0)
    if sqrt_ratio_x96 < sqrt_ratio_b_x96:
        liquidity0 = get_liquidity_for_amount0(sqrt_ratio_x96, sqrt_ratio_b_x96, amount0)
        liquidity1 = get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_x96, amount1)
        return min(liquidity0, liquidity1)
    return get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount1)


def get_amounts_for_liquidity(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int
) -> Tuple[int, int]:
    """현재 가격과 범위에서 유동성 L이 보유하는 토큰 수량 (내림)

    Returns:
        (amount0, amount1) 튜플
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        # 가격이 범위 아래: token0만 보유
        return get_amount0_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity, False), 0
    if sqrt_ratio_x96 < sqrt_ratio_b_x96:
        return (
            get_amount0_delta(sqrt_ratio_x96, sqrt_ratio_b_x96, liquidity, False),
            get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_x96, liquidity, False),
        )
    # 가격이 범위 위: token1만 보유
    return 0, get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity, False)


def _mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """(a * b) / denominator 올림"""
    quotient, remainder = divmod(a * b, denominator)
    return quotient + (1 if remainder else 0)


def _div_rounding_up(numerator: int, denominator: int) -> int:
    """numerator / denominator 올림"""
    quotient, remainder = divmod(numerator, denominator)
    return quotient + (1 if remainder else 0)
