"""
Token transfer collaborator

풀은 토큰을 pull 방식(transfer_from)으로만 가져옵니다.
TokenTransfer 를 만족하는 어떤 객체든 주입할 수 있고, 기본값은 메모리 내 ERC20 스타일 원장입니다.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Tuple

from ..constants import UINT256_MAX
from ..errors import TransferFailed

logger = logging.getLogger(__name__)


class TokenTransfer(Protocol):
    def transfer_from(
        self, token: str, sender: str, recipient: str, amount: int, spender: Optional[str] = None
    ) -> None:
        ...


@dataclass
class _LedgerState:
    balances: Dict[Tuple[str, str], int] = field(default_factory=dict)
    allowances: Dict[Tuple[str, str, str], int] = field(default_factory=dict)




def normalize_address(address: str) -> str:
    """주소 비교는 대소문자를 구분하지 않는다"""
    return address.lower()


class TokenLedger:
    """메모리 내 ERC20 스타일 원장

    - balances: (token, account) → 잔고
    - allowances: (token, owner, spender) → 허용량 (UINT256_MAX 는 무제한)

    주소는 소문자로 정규화해 저장합니다.
    실패한 transfer_from 은 아무것도 변경하지 않습니다.
    """

    def __init__(self):
        self._state = _LedgerState()

    def balance_of(self, token: str, account: str) -> int:
        return self._state.balances.get((normalize_address(token), normalize_address(account)), 0)

    def allowance(self, token: str, owner: str, spender: str) -> int:
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        return self._state.allowances.get(key, 0)

    def mint(self, token: str, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("mint amount must be non-negative")
        self._credit(token, account, amount)

    def approve(self, token: str, owner: str, spender: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("allowance must be non-negative")
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        self._state.allowances[key] = amount

    def transfer_from(
        self, token: str, sender: str, recipient: str, amount: int, spender: Optional[str] = None
    ) -> None:
        """sender 의 토큰을 recipient 로 이동 (spender 의 허용량 사용)

        spender 를 생략하면 recipient 가 직접 가져가는 것으로 봅니다.

        Raises:
            TransferFailed: 잔고 또는 허용량이 부족한 경우
        """
        spender = recipient if spender is None else spender
        if amount < 0:
            raise TransferFailed(f"negative transfer amount {amount}")

        balance = self.balance_of(token, sender)
        if balance < amount:
            logger.warning("transfer of %d %s from %s rejected: balance %d", amount, token, sender, balance)
            raise TransferFailed(f"insufficient {token} balance for {sender}: {balance} < {amount}")

        if normalize_address(spender) != normalize_address(sender):
            allowed = self.allowance(token, sender, spender)
            if allowed < amount:
                logger.warning("transfer of %d %s from %s rejected: allowance %d", amount, token, sender, allowed)
                raise TransferFailed(f"insufficient {token} allowance for {spender}: {allowed} < {amount}")
            if allowed != UINT256_MAX:
                self.approve(token, sender, spender, allowed - amount)

        self._credit(token, sender, -amount)
        self._credit(token, recipient, amount)

    def revert_transfer(
        self, token: str, sender: str, recipient: str, amount: int, spender: Optional[str] = None
    ) -> None:
        """성공한 transfer_from 하나를 되돌린다 (잔고와 소비된 허용량 복구)

        다른 계정이나 다른 호출의 변경은 건드리지 않습니다.
        """
        spender = recipient if spender is None else spender
        self._credit(token, recipient, -amount)
        self._credit(token, sender, amount)

        if normalize_address(spender) != normalize_address(sender):
            allowed = self.allowance(token, sender, spender)
            if allowed != UINT256_MAX:
                self.approve(token, sender, spender, allowed + amount)

    def _credit(self, token: str, account: str, amount: int) -> None:
        key = (normalize_address(token), normalize_address(account))
        balance = self._state.balances.get(key, 0) + amount
        if balance:
            self._state.balances[key] = balance
        else:
            self._state.balances.pop(key, None)

    def snapshot(self) -> _LedgerState:
        return _LedgerState(dict(self._state.balances), dict(self._state.allowances))

    def restore(self, snapshot: _LedgerState) -> None:
        self._state = snapshot
