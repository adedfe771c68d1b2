"""
Sqrt Price Math 테스트
"""

import pytest

from ..constants import Q96
from ..math.sqrt_price_math import price_to_sqrt_price_x96, sqrt_price_x96_to_price


class TestPriceConversion:
    """sqrtPriceX96 ↔ 가격 변환 테스트"""

    def test_price_one(self):
        assert price_to_sqrt_price_x96(1.0) == Q96
        assert sqrt_price_x96_to_price(Q96) == 1.0

    def test_price_four(self):
        """sqrt(4) = 2"""
        assert price_to_sqrt_price_x96(4.0) == 2 * Q96
        assert sqrt_price_x96_to_price(2 * Q96) == 4.0

    def test_decimal_adjustment(self):
        """USDC(6)/WETH(18) 같은 소수점 차이 반영"""
        sqrt_price = price_to_sqrt_price_x96(1.0, decimal0=6, decimal1=18)
        assert sqrt_price_x96_to_price(sqrt_price, decimal0=6, decimal1=18) == pytest.approx(1.0)

    @pytest.mark.parametrize("price", [0, -1.5])
    def test_non_positive_price(self, price):
        with pytest.raises(ValueError):
            price_to_sqrt_price_x96(price)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
