"""
Pool API 테스트

라우팅, 요청 검증, PoolError → HTTP 상태 코드 매핑을 테스트합니다.
"""
import pytest

from clamm.constants import Q96
from clamm.math.liquidity_math import get_amount0_delta, get_amount1_delta
from clamm.math.tick_math import get_sqrt_ratio_at_tick

from .conftest import FUNDING, LP, TOKEN0, TOKEN1


def _add(client, pool_id, lower=-60, upper=60, amount=10 ** 18, **extra):
    body = {"recipient": LP, "tick_lower": lower, "tick_upper": upper, "amount": amount}
    body.update(extra)
    return client.post(f"/api/v1/pools/{pool_id}/liquidity", json=body)


def _initialize(client, pool_id, sqrt_price_x96=Q96):
    return client.post(f"/api/v1/pools/{pool_id}/initialize", json={"sqrt_price_x96": sqrt_price_x96})


class TestService:
    """루트 / health 엔드포인트"""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["health"] == "/api/v1/health"

    def test_health(self, client, pool_id):
        data = client.get("/api/v1/health").json()
        assert data["status"] == "healthy"
        assert data["pools"] == 1


class TestPools:
    """풀 생성 / 조회"""

    def test_create_derives_spacing_from_fee_tier(self, client, pool_id):
        data = client.get(f"/api/v1/pools/{pool_id}").json()
        assert data["config"]["tick_spacing"] == 60
        assert data["state"] == {"sqrt_price_x96": 0, "tick": 0, "unlocked": False}

    def test_create_with_explicit_spacing(self, client):
        response = client.post(
            "/api/v1/pools",
            json={"token0": TOKEN0, "token1": TOKEN1, "fee_tier": 3000, "tick_spacing": 10},
        )
        assert response.status_code == 201
        assert response.json()["config"]["tick_spacing"] == 10

    def test_duplicate_pool(self, client, pool_id):
        response = client.post("/api/v1/pools", json={"token0": TOKEN0, "token1": TOKEN1, "fee_tier": 3000})
        assert response.status_code == 409

    def test_identical_tokens(self, client):
        """IdenticalTokens 는 입력 오류 (422)"""
        response = client.post("/api/v1/pools", json={"token0": TOKEN0, "token1": TOKEN0, "fee_tier": 3000})
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "IT"

    def test_unsupported_fee_tier(self, client):
        response = client.post("/api/v1/pools", json={"token0": TOKEN0, "token1": TOKEN1, "fee_tier": 1234})
        assert response.status_code == 422

    def test_list(self, client, pool_id):
        pools = client.get("/api/v1/pools").json()["pools"]
        assert [pool["pool_id"] for pool in pools] == [pool_id]

    def test_unknown_pool(self, client):
        assert client.get("/api/v1/pools/0xdeadbeef").status_code == 404


class TestInitialize:
    """가격 초기화"""

    def test_initialize(self, client, pool_id):
        response = _initialize(client, pool_id)
        assert response.status_code == 200
        assert response.json()["tick"] == 0

        state = client.get(f"/api/v1/pools/{pool_id}").json()["state"]
        assert state["unlocked"] is True

    def test_initialize_twice(self, client, pool_id):
        _initialize(client, pool_id)
        response = _initialize(client, pool_id)
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "AI"

    def test_initialize_from_price(self, client, pool_id):
        """price 로 초기화하면 sqrt_price_x96 로 변환"""
        response = client.post(f"/api/v1/pools/{pool_id}/initialize", json={"price": 1.0})
        assert response.status_code == 200
        data = response.json()
        assert data["sqrt_price_x96"] == Q96
        assert data["tick"] == 0
        assert data["price"] == pytest.approx(1.0)

    def test_initialize_needs_exactly_one_price(self, client, pool_id):
        response = client.post(
            f"/api/v1/pools/{pool_id}/initialize",
            json={"sqrt_price_x96": Q96, "price": 1.0},
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("body", [
        {"price": 1.0, "decimals0": 0, "decimals1": 400},
        {"price": 1e300, "decimals0": 0, "decimals1": 255},
    ])
    def test_unconvertible_price(self, client, pool_id, body):
        """변환할 수 없는 가격은 422, 풀은 초기화되지 않음"""
        response = client.post(f"/api/v1/pools/{pool_id}/initialize", json=body)
        assert response.status_code == 422
        assert client.get(f"/api/v1/pools/{pool_id}").json()["state"]["sqrt_price_x96"] == 0

    def test_invalid_sqrt_price(self, client, pool_id):
        response = _initialize(client, pool_id, sqrt_price_x96=1)
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "R"


class TestLiquidity:
    """유동성 추가 / 제거"""

    def test_provide_before_initialize_is_locked(self, client, pool_id):
        response = _add(client, pool_id)
        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["code"] == "LOK"
        assert detail["error"] == "Locked"

    def test_provide_in_range(self, client, pool_id):
        """현재 틱이 범위 안이면 두 토큰 모두 지불"""
        _initialize(client, pool_id)
        response = _add(client, pool_id)
        assert response.status_code == 200

        data = response.json()
        assert data["amount0"] == get_amount0_delta(Q96, get_sqrt_ratio_at_tick(60), 10 ** 18, True)
        assert data["amount1"] == get_amount1_delta(get_sqrt_ratio_at_tick(-60), Q96, 10 ** 18, True)

        balance = client.get(f"/api/v1/ledger/{TOKEN0}/{LP}").json()["balance"]
        assert balance == FUNDING - data["amount0"]

        reserves = client.get(f"/api/v1/pools/{pool_id}").json()["reserves"]
        assert reserves == {TOKEN0: data["amount0"], TOKEN1: data["amount1"]}

    def test_ticks_and_position_recorded(self, client, pool_id):
        _initialize(client, pool_id)
        _add(client, pool_id)

        ticks = client.get(f"/api/v1/pools/{pool_id}/ticks").json()
        assert [tick["tick"] for tick in ticks] == [-60, 60]
        assert ticks[0]["liquidity_net"] == 10 ** 18
        assert ticks[1]["liquidity_net"] == -(10 ** 18)

        position = client.get(
            f"/api/v1/pools/{pool_id}/positions",
            params={"owner": LP, "tick_lower": -60, "tick_upper": 60},
        ).json()
        assert position["liquidity"] == 10 ** 18

    @pytest.mark.parametrize("lower,upper,code", [
        (60, -60, "TLU"),
        (-887400, 60, "TLM"),
        (-60, 887400, "TUM"),
    ])
    def test_invalid_range(self, client, pool_id, lower, upper, code):
        _initialize(client, pool_id)
        response = _add(client, pool_id, lower=lower, upper=upper)
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == code

    def test_zero_amount(self, client, pool_id):
        _initialize(client, pool_id)
        response = _add(client, pool_id, amount=0)
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "AZ"

    def test_unfunded_payer(self, client, pool_id):
        """allowance 없는 payer 는 402, 상태 변화 없음"""
        _initialize(client, pool_id)
        response = _add(client, pool_id, payer="0x00000000000000000000000000000000000000ff")
        assert response.status_code == 402
        assert response.json()["detail"]["code"] == "STF"
        assert client.get(f"/api/v1/pools/{pool_id}/ticks").json() == []

    def test_remove_full_position(self, client, pool_id):
        """전량 제거 시 경계 틱이 정리되고 tokens_owed 에 적립"""
        _initialize(client, pool_id)
        _add(client, pool_id)

        response = client.post(
            f"/api/v1/pools/{pool_id}/liquidity/remove",
            json={"owner": LP, "tick_lower": -60, "tick_upper": 60, "amount": 10 ** 18},
        )
        assert response.status_code == 200
        removed = response.json()
        assert removed["amount0"] > 0 and removed["amount1"] > 0

        assert client.get(f"/api/v1/pools/{pool_id}/ticks").json() == []
        position = client.get(
            f"/api/v1/pools/{pool_id}/positions",
            params={"owner": LP, "tick_lower": -60, "tick_upper": 60},
        ).json()
        assert position["liquidity"] == 0
        assert position["tokens_owed_0"] == removed["amount0"]
        assert position["tokens_owed_1"] == removed["amount1"]

    def test_remove_more_than_held(self, client, pool_id):
        _initialize(client, pool_id)
        _add(client, pool_id, amount=100)
        response = client.post(
            f"/api/v1/pools/{pool_id}/liquidity/remove",
            json={"owner": LP, "tick_lower": -60, "tick_upper": 60, "amount": 101},
        )
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "LS"


class TestQuotes:
    """읽기 전용 견적 엔드포인트"""

    def test_quote_before_initialize(self, client, pool_id):
        response = client.get(
            f"/api/v1/pools/{pool_id}/quote",
            params={"tick_lower": -60, "tick_upper": 60, "amount0": 10, "amount1": 10},
        )
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "NI"

    def test_quote_funds_at_most_given_amounts(self, client, pool_id):
        _initialize(client, pool_id)
        liquidity = client.get(
            f"/api/v1/pools/{pool_id}/quote",
            params={"tick_lower": -60, "tick_upper": 60, "amount0": 10 ** 18, "amount1": 10 ** 18},
        ).json()["liquidity"]
        assert liquidity > 0

        paid = _add(client, pool_id, amount=liquidity).json()
        # 올림 때문에 최대 1 wei 초과 가능
        assert paid["amount0"] <= 10 ** 18 + 1
        assert paid["amount1"] <= 10 ** 18 + 1

    def test_position_amounts(self, client, pool_id):
        _initialize(client, pool_id)
        paid = _add(client, pool_id).json()
        amounts = client.get(
            f"/api/v1/pools/{pool_id}/positions/amounts",
            params={"owner": LP, "tick_lower": -60, "tick_upper": 60},
        ).json()
        assert paid["amount0"] - 2 <= amounts["amount0"] <= paid["amount0"]
        assert paid["amount1"] - 2 <= amounts["amount1"] <= paid["amount1"]


    def test_position_amounts_out_of_range_tick(self, client, pool_id):
        _initialize(client, pool_id)
        response = client.get(
            f"/api/v1/pools/{pool_id}/positions/amounts",
            params={"owner": LP, "tick_lower": -900000, "tick_upper": 60},
        )
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "TLM"


class TestLedger:
    """ledger 엔드포인트"""

    def test_mint_and_balance(self, client):
        response = client.post("/api/v1/ledger/mint", json={"token": TOKEN0, "account": LP, "amount": 5})
        assert response.json()["balance"] == 5
        assert client.get(f"/api/v1/ledger/{TOKEN0}/{LP}").json()["balance"] == 5

    def test_mint_rejects_non_positive(self, client):
        response = client.post("/api/v1/ledger/mint", json={"token": TOKEN0, "account": LP, "amount": 0})
        assert response.status_code == 422

    def test_approve(self, client):
        response = client.post(
            "/api/v1/ledger/approve",
            json={"token": TOKEN0, "owner": LP, "spender": TOKEN1, "amount": 7},
        )
        assert response.json()["allowance"] == 7


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
