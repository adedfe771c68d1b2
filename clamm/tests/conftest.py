"""
Shared fixtures for pool tests.
"""

import pytest

from ..constants import Q96, UINT256_MAX
from ..core.pool import LiquidityPool
from ..core.tokens import TokenLedger

TOKEN0 = "0x1111111111111111111111111111111111111111"
TOKEN1 = "0x9999999999999999999999999999999999999999"
LP = "0x00000000000000000000000000000000000000a1"
OTHER_LP = "0x00000000000000000000000000000000000000b2"

FUNDING = 10 ** 40


@pytest.fixture
def ledger():
    return TokenLedger()


@pytest.fixture
def pool(ledger):
    """0.30% 티어 풀 (spacing 60), LP 계정에 잔고와 무제한 허용량 지급"""
    pool = LiquidityPool(TOKEN0, TOKEN1, fee_tier=3000, tick_spacing=60, ledger=ledger)
    for account in (LP, OTHER_LP):
        for token in (TOKEN0, TOKEN1):
            ledger.mint(token, account, FUNDING)
            ledger.approve(token, account, pool.address, UINT256_MAX)
    return pool


@pytest.fixture
def initialized_pool(pool):
    """가격 1 (틱 0)로 초기화된 풀"""
    pool.initialize(Q96)
    return pool
