"""
Liquidity Pool - 유동성 오케스트레이터

TickStore 와 PositionStore 의 유일한 writer.
입력을 검증하고, 가격 상태를 한 번 스냅샷한 뒤, 유동성 델타를 포지션과
두 경계 틱에 원자적으로 적용하고, 0으로 돌아간 틱을 정리하며, 주고받을 토큰 수량을 계산합니다.

변경 진입점 흐름 (provide_liquidity):
    수량 확인 → canonical 확인 → 잠금 획득 + 저널 시작 → 범위 검증 → 현재 틱 스냅샷
    → 포지션 / 하한 틱 / 상한 틱 갱신 → (감소 시) flip 된 틱 정리
    → 토큰 수량 계산 → 호출자로부터 토큰 pull → 잠금 해제

실패하면 저널이 틱/포지션/원장을 진입 시점으로 되돌리고 잠금은 항상 해제됩니다.
"""

import hashlib
import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator, Optional, Tuple

from ..constants import MIN_TICK, MAX_TICK
from ..errors import (
    AboveGlobalMax,
    AlreadyInitialized,
    AmountIsZero,
    BelowGlobalMin,
    IdenticalTokens,
    InvalidRange,
    InvalidSqrtPrice,
    Locked,
    NonCanonicalContext,
    NotInitialized,
    PoolError,
    TransferFailed,
)
from ..math.liquidity_math import (
    get_amount0_delta_signed,
    get_amount1_delta_signed,
    get_amounts_for_liquidity,
    get_liquidity_for_amounts,
)
from ..math.tick_math import get_sqrt_ratio_at_tick, get_tick_at_sqrt_ratio
from .journal import Journal
from .position import PositionInfo, PositionStore
from .state import PriceState
from .tick import TickInfo, TickStore, tick_spacing_to_max_liquidity_per_tick
from .tokens import TokenLedger, TokenTransfer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolConfig:
    """생성 시 고정되는 풀 설정"""
    token0: str
    token1: str
    fee_tier: int
    tick_spacing: int
    max_liquidity_per_tick: int

    def to_dict(self) -> dict:
        return {
            "token0": self.token0,
            "token1": self.token1,
            "fee_tier": self.fee_tier,
            "tick_spacing": self.tick_spacing,
            "max_liquidity_per_tick": self.max_liquidity_per_tick,
        }


@dataclass(frozen=True)
class ModifyPositionParams:
    owner: str
    tick_lower: int
    tick_upper: int
    liquidity_delta: int


def pool_address(token0: str, token1: str, fee_tier: int, tick_spacing: int) -> str:
    """풀 설정에서 결정적으로 만든 풀 주소 (토큰 custody 계정)"""
    digest = hashlib.sha3_256(f"{token0}|{token1}|{fee_tier}|{tick_spacing}".encode()).hexdigest()
    return "0x" + digest[-40:]


class LiquidityPool:
    """집중화된 유동성 풀의 유동성 회계 코어

    사용법:
        ledger = TokenLedger()
        pool = LiquidityPool("0xA", "0xB", fee_tier=3000, tick_spacing=60, ledger=ledger)
        pool.initialize(2 ** 96)
        amount0, amount1 = pool.provide_liquidity("0xLP", -60, 60, 1000)
    """

    def __init__(
        self,
        token0: str,
        token1: str,
        fee_tier: int,
        tick_spacing: int,
        ledger: Optional[TokenTransfer] = None
    ):
        """
        Args:
            token0: token0 주소
            token1: token1 주소
            fee_tier: 수수료 티어 (예: 3000)
            tick_spacing: 틱 간격 (예: 60)
            ledger: 토큰 전송 협력자 (기본값: 새 TokenLedger)
        """
        if token0 == token1:
            raise IdenticalTokens(f"token0 and token1 are both {token0}")

        self.config = PoolConfig(
            token0=token0,
            token1=token1,
            fee_tier=fee_tier,
            tick_spacing=tick_spacing,
            max_liquidity_per_tick=tick_spacing_to_max_liquidity_per_tick(tick_spacing),
        )
        self.address = pool_address(token0, token1, fee_tier, tick_spacing)
        self.ledger = ledger if ledger is not None else TokenLedger()
        self.ticks = TickStore()
        self.positions = PositionStore()
        self._state = PriceState()
        # 얕은 복사본은 저장소를 공유하므로 변경을 거부한다
        self._origin = self

        logger.info(
            "pool %s created: %s/%s fee=%d spacing=%d",
            self.address, token0, token1, fee_tier, tick_spacing,
        )

    def __repr__(self) -> str:
        return (
            f"LiquidityPool({self.token0!r}, {self.token1!r}, fee_tier={self.fee_tier}, "
            f"tick_spacing={self.tick_spacing})"
        )

    # ------------------------------------------------------------------ read-only

    @property
    def token0(self) -> str:
        return self.config.token0

    @property
    def token1(self) -> str:
        return self.config.token1

    @property
    def fee_tier(self) -> int:
        return self.config.fee_tier

    @property
    def tick_spacing(self) -> int:
        return self.config.tick_spacing

    @property
    def max_liquidity_per_tick(self) -> int:
        return self.config.max_liquidity_per_tick

    @property
    def state(self) -> PriceState:
        """현재 가격 상태 (복사본)"""
        return replace(self._state)

    def tick(self, tick: int) -> TickInfo:
        return self.ticks.get(tick)

    def position(self, owner: str, tick_lower: int, tick_upper: int) -> PositionInfo:
        return self.positions.get(owner, tick_lower, tick_upper)

    def reserves(self) -> Tuple[int, int]:
        """풀 주소가 원장에 보유한 (token0, token1) 잔고"""
        balance_of = getattr(self.ledger, "balance_of", None)
        if balance_of is None:
            return 0, 0
        return balance_of(self.token0, self.address), balance_of(self.token1, self.address)

    def amounts_for_position(self, owner: str, tick_lower: int, tick_upper: int) -> Tuple[int, int]:
        """현재 가격에서 포지션 유동성이 나타내는 토큰 수량 (내림)"""
        self._require_initialized()
        self._check_ticks(tick_lower, tick_upper)
        position = self.positions.get(owner, tick_lower, tick_upper)
        return get_amounts_for_liquidity(
            self._state.sqrt_price_x96,
            get_sqrt_ratio_at_tick(tick_lower),
            get_sqrt_ratio_at_tick(tick_upper),
            position.liquidity,
        )

    def quote_liquidity(self, tick_lower: int, tick_upper: int, amount0: int, amount1: int) -> int:
        """현재 가격에서 두 토큰 수량으로 범위에 공급할 수 있는 최대 유동성"""
        self._require_initialized()
        self._check_ticks(tick_lower, tick_upper)
        return get_liquidity_for_amounts(
            self._state.sqrt_price_x96,
            get_sqrt_ratio_at_tick(tick_lower),
            get_sqrt_ratio_at_tick(tick_upper),
            amount0,
            amount1,
        )

    # ------------------------------------------------------------------ mutating

    def initialize(self, sqrt_price_x96: int) -> int:
        """풀 가격을 한 번만 설정하고 잠금을 푼다

        Returns:
            sqrt_price_x96 에 해당하는 틱

        Raises:
            AlreadyInitialized: 이미 초기화된 경우
            InvalidSqrtPrice: sqrt 가격이 유효 범위를 벗어난 경우
        """
        if self._state.sqrt_price_x96 != 0:
            raise AlreadyInitialized(f"pool {self.address} is already initialized")

        try:
            tick = get_tick_at_sqrt_ratio(sqrt_price_x96)
        except ValueError as exc:
            raise InvalidSqrtPrice(str(exc)) from exc

        self._state = PriceState(sqrt_price_x96=sqrt_price_x96, tick=tick, unlocked=True)
        logger.info("pool %s initialized at sqrtPriceX96=%d tick=%d", self.address, sqrt_price_x96, tick)
        return tick

    def provide_liquidity(
        self,
        recipient: str,
        tick_lower: int,
        tick_upper: int,
        amount: int,
        payer: Optional[str] = None
    ) -> Tuple[int, int]:
        """recipient 의 포지션에 유동성을 추가하고 필요한 토큰을 payer 로부터 가져온다

        Args:
            recipient: 포지션 소유자
            tick_lower: 하한 틱
            tick_upper: 상한 틱
            amount: 추가할 유동성 (> 0)
            payer: 토큰을 지불할 계정 (기본값: recipient)

        Returns:
            (amount0, amount1): 호출자가 풀에 지불한 토큰 수량
        """
        if amount <= 0:
            raise AmountIsZero("liquidity amount must be positive")
        self._check_canonical()
        payer = recipient if payer is None else payer

        with self._lock() as journal:
            amount0, amount1 = self._modify_position(
                ModifyPositionParams(recipient, tick_lower, tick_upper, amount)
            )
            if amount0 > 0:
                self._pull(journal, self.token0, payer, amount0)
            if amount1 > 0:
                self._pull(journal, self.token1, payer, amount1)

        return amount0, amount1

    def remove_liquidity(
        self,
        owner: str,
        tick_lower: int,
        tick_upper: int,
        amount: int
    ) -> Tuple[int, int]:
        """owner 포지션의 유동성을 제거하고 해제된 토큰을 tokens_owed 에 적립한다

        토큰은 전송하지 않습니다 (수집은 별도 기능).

        Returns:
            (amount0, amount1): 포지션에 적립된 토큰 수량
        """
        if amount <= 0:
            raise AmountIsZero("liquidity amount must be positive")
        self._check_canonical()

        with self._lock():
            amount0, amount1 = self._modify_position(
                ModifyPositionParams(owner, tick_lower, tick_upper, -amount)
            )
            amount0, amount1 = -amount0, -amount1
            if amount0 > 0 or amount1 > 0:
                position = self.positions.get_or_create(owner, tick_lower, tick_upper)
                position.tokens_owed_0 += amount0
                position.tokens_owed_1 += amount1

        return amount0, amount1

    # ------------------------------------------------------------------ internals

    @contextmanager
    def _lock(self) -> Iterator[Journal]:
        """재진입 방지 잠금 + 실패 시 롤백"""
        if not self._state.unlocked:
            logger.warning("pool %s: rejected call while locked", self.address)
            raise Locked(f"pool {self.address} is locked")

        self._state.unlocked = False
        try:
            with Journal(self.ticks, self.positions) as journal:
                yield journal
        finally:
            self._state.unlocked = True

    def _check_canonical(self) -> None:
        if self._origin is not self:
            raise NonCanonicalContext("pool storage is owned by another instance")

    def _require_initialized(self) -> None:
        if not self._state.initialized:
            raise NotInitialized(f"pool {self.address} is not initialized")

    @staticmethod
    def _check_ticks(tick_lower: int, tick_upper: int) -> None:
        if tick_lower >= tick_upper:
            raise InvalidRange(f"tick_lower {tick_lower} must be below tick_upper {tick_upper}")
        if tick_lower < MIN_TICK:
            raise BelowGlobalMin(f"tick_lower {tick_lower} is below {MIN_TICK}")
        if tick_upper > MAX_TICK:
            raise AboveGlobalMax(f"tick_upper {tick_upper} is above {MAX_TICK}")

    def _modify_position(self, params: ModifyPositionParams) -> Tuple[int, int]:
        """포지션과 두 경계 틱에 유동성 델타를 적용하고 부호 있는 토큰 수량을 반환"""
        self._check_ticks(params.tick_lower, params.tick_upper)

        # 같은 호출 안에서는 외부 호출 전까지 가격이 바뀌지 않는다
        sqrt_price_x96 = self._state.sqrt_price_x96
        tick_current = self._state.tick

        self._update_position(
            params.owner, params.tick_lower, params.tick_upper, params.liquidity_delta, tick_current
        )

        amount0 = amount1 = 0
        delta = params.liquidity_delta
        sqrt_lower = get_sqrt_ratio_at_tick(params.tick_lower)
        sqrt_upper = get_sqrt_ratio_at_tick(params.tick_upper)

        if tick_current < params.tick_lower:
            # 범위 아래: token0 만 필요
            amount0 = get_amount0_delta_signed(sqrt_lower, sqrt_upper, delta)
        elif tick_current < params.tick_upper:
            amount0 = get_amount0_delta_signed(sqrt_price_x96, sqrt_upper, delta)
            amount1 = get_amount1_delta_signed(sqrt_lower, sqrt_price_x96, delta)
        else:
            # 범위 위: token1 만 필요
            amount1 = get_amount1_delta_signed(sqrt_lower, sqrt_upper, delta)

        logger.debug(
            "pool %s: owner=%s [%d, %d) delta=%d amounts=(%d, %d)",
            self.address, params.owner, params.tick_lower, params.tick_upper, delta, amount0, amount1,
        )
        return amount0, amount1

    def _update_position(
        self,
        owner: str,
        tick_lower: int,
        tick_upper: int,
        liquidity_delta: int,
        tick_current: int
    ) -> PositionInfo:
        position = self.positions.get_or_create(owner, tick_lower, tick_upper)
        # fee growth 는 이 범위에서 항상 0
        self.positions.update(position, liquidity_delta, 0, 0)

        flipped_lower = flipped_upper = False
        if liquidity_delta != 0:
            max_liquidity = self.max_liquidity_per_tick
            flipped_lower = self.ticks.update(tick_lower, tick_current, liquidity_delta, False, max_liquidity)
            flipped_upper = self.ticks.update(tick_upper, tick_current, liquidity_delta, True, max_liquidity)

        if liquidity_delta < 0:
            if flipped_lower:
                self.ticks.clear(tick_lower)
            if flipped_upper:
                self.ticks.clear(tick_upper)

        return position

    def _pull(self, journal: Journal, token: str, payer: str, amount: int) -> None:
        """payer 의 토큰을 풀 custody 로 가져온다

        원장은 다른 풀과 공유될 수 있으므로 롤백은 이 pull 만 되돌린다.
        revert_transfer 를 제공하지 않는 원장의 pull 은 되돌리지 않는다.
        """
        try:
            result = self.ledger.transfer_from(token, payer, self.address, amount, spender=self.address)
        except PoolError:
            raise
        except Exception as exc:
            raise TransferFailed(f"transfer of {amount} {token} from {payer} failed: {exc}") from exc

        if result is False:
            raise TransferFailed(f"transfer of {amount} {token} from {payer} was rejected")

        revert_transfer = getattr(self.ledger, "revert_transfer", None)
        if callable(revert_transfer):
            journal.record(
                lambda: revert_transfer(token, payer, self.address, amount, spender=self.address)
            )
