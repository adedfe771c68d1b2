"""
API test fixtures
"""
import pytest
from fastapi.testclient import TestClient

from app.core.registry import PoolRegistry, get_registry
from app.main import app

TOKEN0 = "0x1111111111111111111111111111111111111111"
TOKEN1 = "0x9999999999999999999999999999999999999999"
LP = "0x00000000000000000000000000000000000000a1"

FUNDING = 10 ** 30
UINT256_MAX = 2 ** 256 - 1


@pytest.fixture
def registry():
    return PoolRegistry()


@pytest.fixture
def client(registry):
    app.dependency_overrides[get_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def pool_id(client):
    """0.30% 풀 생성 후 LP 자금 지급 및 풀에 무제한 허용"""
    response = client.post("/api/v1/pools", json={"token0": TOKEN0, "token1": TOKEN1, "fee_tier": 3000})
    assert response.status_code == 201
    pool_id = response.json()["pool_id"]

    for token in (TOKEN0, TOKEN1):
        client.post("/api/v1/ledger/mint", json={"token": token, "account": LP, "amount": FUNDING})
        client.post(
            "/api/v1/ledger/approve",
            json={"token": token, "owner": LP, "spender": pool_id, "amount": UINT256_MAX},
        )
    return pool_id
