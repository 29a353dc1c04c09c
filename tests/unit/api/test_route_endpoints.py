"""Tests for the HTTP API."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from launchroute import __version__
from launchroute.api.endpoints import get_service
from launchroute.api.main import app
from launchroute.constants import FOUR_HELPER_V3
from launchroute.errors import ErrorKind, RouteError
from launchroute.rpc.client import MockRpcClient
from launchroute.service import RouteQueryService
from tests.helpers import (
    FOUR_TOKEN,
    ONE,
    PAIR_A,
    PLAIN_TOKEN,
    WBNB,
    add_v2_pair,
    four_token_info,
)


@pytest.fixture
def api(service: RouteQueryService) -> Iterator[TestClient]:
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(api: TestClient) -> None:
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


class TestGetRoute:
    def test_on_curve_token(self, api: TestClient, client: MockRpcClient) -> None:
        client.set_response(
            FOUR_HELPER_V3, "getTokenInfo", four_token_info(funds=12 * ONE, max_funds=24 * ONE)
        )
        response = api.get(f"/route/{FOUR_TOKEN}")

        assert response.status_code == 200
        assert response.json() == {
            "platform": "four",
            "preferredChannel": "four",
            "readyForPancake": False,
            "progress": 0.5,
            "migrating": False,
            "quoteToken": WBNB,
            "metadata": {},
        }

    def test_pancake_token(self, api: TestClient, client: MockRpcClient) -> None:
        add_v2_pair(client, PLAIN_TOKEN, WBNB, PAIR_A, quote_reserve=ONE)
        body = api.get(f"/route/{PLAIN_TOKEN}").json()
        assert body["preferredChannel"] == "pancake"
        assert body["readyForPancake"] is True
        assert body["metadata"]["pancakePairAddress"] == PAIR_A

    def test_platform_override(self, api: TestClient, client: MockRpcClient) -> None:
        client.set_response(FOUR_HELPER_V3, "getTokenInfo", four_token_info(funds=1, max_funds=4))
        body = api.get(f"/route/{PLAIN_TOKEN}", params={"platform": "four"}).json()
        assert body["platform"] == "four"
        assert body["progress"] == 0.25

    def test_invalid_address(self, api: TestClient) -> None:
        assert api.get("/route/0x1234").status_code == 422

    def test_invalid_platform(self, api: TestClient) -> None:
        response = api.get(f"/route/{PLAIN_TOKEN}", params={"platform": "solana"})
        assert response.status_code == 422

    def test_unavailable_route(self, service: RouteQueryService, api: TestClient) -> None:
        async def failing(token: str, platform: object = None) -> None:
            raise RouteError("every probe failed", ErrorKind.NETWORK)

        service.query_route = failing  # type: ignore[method-assign]
        response = api.get(f"/route/{FOUR_TOKEN}")
        assert response.status_code == 503
        assert response.json() == {"detail": "route temporarily unknown"}


class TestCacheEndpoints:
    def test_stats(self, api: TestClient, client: MockRpcClient) -> None:
        add_v2_pair(client, PLAIN_TOKEN, WBNB, PAIR_A, quote_reserve=ONE)
        api.get(f"/route/{PLAIN_TOKEN}")

        body = api.get("/cache/stats").json()
        assert body["routeCache"]["size"] == 1
        assert body["routeCache"]["migrated"] == 1
        assert body["pairCache"]["size"] == 1

    def test_clear_token(
        self, api: TestClient, client: MockRpcClient, service: RouteQueryService
    ) -> None:
        add_v2_pair(client, PLAIN_TOKEN, WBNB, PAIR_A, quote_reserve=ONE)
        api.get(f"/route/{PLAIN_TOKEN}")

        response = api.delete(f"/cache/{PLAIN_TOKEN.upper().replace('0X', '0x')}")
        assert response.status_code == 200
        assert response.json() == {"status": "cleared", "token": PLAIN_TOKEN}
        assert service.cache_manager.keys() == []

    def test_clear_token_invalid(self, api: TestClient) -> None:
        assert api.delete("/cache/nope").status_code == 422

    def test_clear_all(
        self, api: TestClient, client: MockRpcClient, service: RouteQueryService
    ) -> None:
        add_v2_pair(client, PLAIN_TOKEN, WBNB, PAIR_A, quote_reserve=ONE)
        api.get(f"/route/{PLAIN_TOKEN}")

        assert api.delete("/cache").json() == {"status": "cleared"}
        assert service.get_stats()["routeCache"]["size"] == 0


def test_lifespan_creates_service(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAUNCHROUTE_RPC_URL", "http://127.0.0.1:8545")
    monkeypatch.setenv("LAUNCHROUTE_NOT_MIGRATED_TTL", "15")
    with TestClient(app) as api:
        assert api.get("/health").status_code == 200
        service = app.state.route_service
        assert isinstance(service, RouteQueryService)
        assert service.cache_manager.config.not_migrated_ttl == 15.0
