"""
Pool core

- tick: TickStore, 틱당 최대 유동성
- position: PositionStore
- state: PriceState (가격 + 재진입 잠금)
- journal: 호출 단위 롤백
- tokens: 토큰 전송 협력자와 메모리 내 원장
- pool: LiquidityPool 오케스트레이터
"""
