"""
Journal - 호출 단위 원자적 롤백

변경 호출이 시작될 때 참여 저장소들의 스냅샷을 찍고,
호출이 예외로 끝나면 모든 저장소를 스냅샷으로 되돌립니다.
참여자는 snapshot() / restore(snapshot) 을 제공해야 합니다.

여러 풀이 공유하는 협력자(토큰 원장)는 통째로 스냅샷하지 않고,
이 호출이 만든 변경마다 되돌리기 함수를 record() 로 등록합니다.
"""

import logging
from typing import Any, Callable, List, Tuple

logger = logging.getLogger(__name__)


def supports_snapshot(participant: Any) -> bool:
    return callable(getattr(participant, "snapshot", None)) and callable(getattr(participant, "restore", None))


class Journal:
    """with 블록 하나를 하나의 트랜잭션으로 취급

    사용법:
        with Journal(ticks, positions) as journal:
            ledger.transfer_from(token, payer, pool, amount)
            journal.record(lambda: ledger.revert_transfer(token, payer, pool, amount))
            ...  # 예외가 나면 저장소 복원 + 등록된 되돌리기 실행
    """

    def __init__(self, *participants: Any):
        self._participants = [p for p in participants if supports_snapshot(p)]
        self._snapshots: List[Tuple[Any, Any]] = []
        self._undo: List[Callable[[], None]] = []

    def record(self, undo: Callable[[], None]) -> None:
        self._undo.append(undo)

    def __enter__(self) -> "Journal":
        self._snapshots = [(p, p.snapshot()) for p in self._participants]
        self._undo = []
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            for undo in reversed(self._undo):
                undo()
            for participant, snapshot in reversed(self._snapshots):
                participant.restore(snapshot)
            logger.debug(
                "rolled back %d stores and %d transfers after %s",
                len(self._snapshots), len(self._undo), exc_type.__name__,
            )
        self._snapshots = []
        self._undo = []
        return False
