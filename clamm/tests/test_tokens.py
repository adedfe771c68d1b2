"""
Token Ledger 테스트
"""

import pytest

from ..constants import UINT256_MAX
from ..core.tokens import TokenLedger
from ..errors import TransferFailed

TOKEN = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
ALICE = "0x1111111111111111111111111111111111111111"
POOL = "0x9999999999999999999999999999999999999999"


@pytest.fixture
def ledger():
    ledger = TokenLedger()
    ledger.mint(TOKEN, ALICE, 1000)
    return ledger


class TestTransferFrom:
    """transfer_from 테스트"""

    def test_pull_with_allowance(self, ledger):
        ledger.approve(TOKEN, ALICE, POOL, 600)
        ledger.transfer_from(TOKEN, ALICE, POOL, 400)

        assert ledger.balance_of(TOKEN, ALICE) == 600
        assert ledger.balance_of(TOKEN, POOL) == 400
        assert ledger.allowance(TOKEN, ALICE, POOL) == 200

    def test_infinite_allowance_not_decremented(self, ledger):
        ledger.approve(TOKEN, ALICE, POOL, UINT256_MAX)
        ledger.transfer_from(TOKEN, ALICE, POOL, 400)
        assert ledger.allowance(TOKEN, ALICE, POOL) == UINT256_MAX

    def test_missing_allowance(self, ledger):
        with pytest.raises(TransferFailed):
            ledger.transfer_from(TOKEN, ALICE, POOL, 1)
        assert ledger.balance_of(TOKEN, ALICE) == 1000

    def test_insufficient_balance(self, ledger):
        """잔고 부족 시 아무것도 바뀌지 않음"""
        ledger.approve(TOKEN, ALICE, POOL, UINT256_MAX)
        with pytest.raises(TransferFailed):
            ledger.transfer_from(TOKEN, ALICE, POOL, 1001)

        assert ledger.balance_of(TOKEN, ALICE) == 1000
        assert ledger.balance_of(TOKEN, POOL) == 0

    def test_self_transfer_needs_no_allowance(self, ledger):
        ledger.transfer_from(TOKEN, ALICE, POOL, 10, spender=ALICE)
        assert ledger.balance_of(TOKEN, POOL) == 10


class TestRevertTransfer:
    """revert_transfer 테스트"""

    def test_reverts_only_that_transfer(self, ledger):
        """되돌리기는 해당 전송만 복구하고 이후 다른 변경은 유지"""
        ledger.approve(TOKEN, ALICE, POOL, 600)
        ledger.transfer_from(TOKEN, ALICE, POOL, 400)
        ledger.mint(TOKEN, POOL, 50)

        ledger.revert_transfer(TOKEN, ALICE, POOL, 400)

        assert ledger.balance_of(TOKEN, ALICE) == 1000
        assert ledger.balance_of(TOKEN, POOL) == 50
        assert ledger.allowance(TOKEN, ALICE, POOL) == 600

    def test_infinite_allowance_stays_infinite(self, ledger):
        ledger.approve(TOKEN, ALICE, POOL, UINT256_MAX)
        ledger.transfer_from(TOKEN, ALICE, POOL, 400)
        ledger.revert_transfer(TOKEN, ALICE, POOL, 400)
        assert ledger.allowance(TOKEN, ALICE, POOL) == UINT256_MAX


class TestAddressCase:
    """주소 대소문자 정규화 테스트"""

    def test_balance_and_allowance_ignore_case(self, ledger):
        ledger.approve(TOKEN.upper().replace("0X", "0x"), ALICE, POOL.upper().replace("0X", "0x"), 10)
        ledger.transfer_from(TOKEN, ALICE.upper().replace("0X", "0x"), POOL, 10)

        assert ledger.balance_of(TOKEN, ALICE) == 990
        assert ledger.balance_of(TOKEN, POOL) == 10


class TestLedgerSnapshot:
    """snapshot / restore 테스트"""

    def test_restore(self, ledger):
        ledger.approve(TOKEN, ALICE, POOL, 500)
        snapshot = ledger.snapshot()

        ledger.transfer_from(TOKEN, ALICE, POOL, 500)
        ledger.restore(snapshot)

        assert ledger.balance_of(TOKEN, ALICE) == 1000
        assert ledger.balance_of(TOKEN, POOL) == 0
        assert ledger.allowance(TOKEN, ALICE, POOL) == 500


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
