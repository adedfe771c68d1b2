"""
Sqrt Price Math - sqrtPriceX96 ↔ 가격 변환

풀 상태는 sqrtPriceX96 형식으로 가격을 저장합니다.
sqrtPriceX96 = sqrt(price) * 2^96

human-readable 가격으로 풀을 초기화하거나 상태를 보여줄 때만 사용.
"""

import math

from ..constants import Q96


def sqrt_price_x96_to_price(
    sqrt_price_x96: int,
    decimal0: int = 18,
    decimal1: int = 18
) -> float:
    """sqrtPriceX96을 human-readable 가격으로 변환

    가격 = (sqrtPriceX96 / 2^96)^2 / 10^(decimal1 - decimal0)

    Args:
        sqrt_price_x96: sqrtPriceX96 값
        decimal0: token0 소수점 자릿수
        decimal1: token1 소수점 자릿수

    Returns:
        가격 (token1/token0 기준)
    """
    price_raw = (sqrt_price_x96 / Q96) ** 2
    return price_raw / (10 ** (decimal1 - decimal0))


def price_to_sqrt_price_x96(
    price: float,
    decimal0: int = 18,
    decimal1: int = 18
) -> int:
    """Human-readable 가격을 sqrtPriceX96으로 변환

    sqrtPriceX96 = sqrt(price * 10^(decimal1 - decimal0)) * 2^96

    Raises:
        ValueError: 가격이 양수가 아닌 경우
    """
    if price <= 0:
        raise ValueError("price must be positive")

    adjusted_price = price * (10 ** (decimal1 - decimal0))
    return int(math.sqrt(adjusted_price) * Q96)
