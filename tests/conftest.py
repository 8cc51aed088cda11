from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Callable, Collection, Iterator, Optional, Union

import httpx
import pytest

from lifi_api.configuration.config import settings
from lifi_api.core.response_classifier import classify
from lifi_api.core.structures.structures import Outcome, SchemaKind
from lifi_api.integrations.lifi.lifi_client import LifiClient
from lifi_api.integrations.lifi.lifi_structures import LifiTestData
from lifi_api.logging.logger import init_logging
from lifi_api.testdata.loader import load_test_data

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
MOCK_BASE_URL = "https://lifi.test/v1"


def pytest_configure(config: pytest.Config) -> None:
    init_logging()


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if settings.LIFI_LIVE_TESTS:
        return
    skip_live = pytest.mark.skip(reason="live LI.FI scenarios are disabled (set LIFI_LIVE_TESTS=1)")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


def _load_fixture(name: str) -> dict:
    with (FIXTURES_DIR / name).open("r", encoding="utf-8") as handle:
        return json.load(handle)


@pytest.fixture
def quote_payload() -> dict:
    return _load_fixture("quote_ok.json")


@pytest.fixture
def tools_payload() -> dict:
    return _load_fixture("tools_ok.json")


@pytest.fixture
def token_payload() -> dict:
    return _load_fixture("token_sol.json")


@pytest.fixture
def error_by_key_payload() -> dict:
    return _load_fixture("error_by_key.json")


@pytest.fixture
def error_by_index_payload() -> dict:
    return _load_fixture("error_by_index.json")


@pytest.fixture
def routes_payload(quote_payload: dict) -> dict:
    step = copy.deepcopy(quote_payload)
    action = step["action"]
    estimate = step["estimate"]
    return {
        "routes": [
            {
                "id": "route-0001",
                "fromChainId": action["fromChainId"],
                "toChainId": action["toChainId"],
                "fromToken": action["fromToken"],
                "toToken": action["toToken"],
                "fromAmount": action["fromAmount"],
                "fromAmountUSD": estimate["fromAmountUSD"],
                "toAmount": estimate["toAmount"],
                "toAmountMin": estimate["toAmountMin"],
                "toAmountUSD": estimate["toAmountUSD"],
                "gasCostUSD": "5.41",
                "steps": [step],
                "fromAddress": action["fromAddress"],
                "toAddress": action["toAddress"],
                "containsSwitchChain": False,
            }
        ],
        "unavailableRoutes": {"filteredOut": [], "failed": []},
    }


@pytest.fixture(scope="session")
def test_data() -> LifiTestData:
    return load_test_data()


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Build a detached-but-addressable response, as if returned by the client."""

    def _make(
            status: int,
            *,
            json_body: object = None,
            content: Optional[bytes] = None,
            method: str = "GET",
            path: str = "/quote",
    ) -> httpx.Response:
        request = httpx.Request(method, f"{MOCK_BASE_URL}{path}")
        if content is not None:
            return httpx.Response(status, content=content, request=request)
        if json_body is None:
            return httpx.Response(status, request=request)
        return httpx.Response(status, json=json_body, request=request)

    return _make


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def mock_client(recorded_requests: list[httpx.Request]) -> Iterator[Callable[[Callable[[httpx.Request], httpx.Response]], LifiClient]]:
    """Factory for a LifiClient whose transport is an in-process handler."""
    clients: list[LifiClient] = []

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> LifiClient:
        def _recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        client = LifiClient(base_url=MOCK_BASE_URL, api_key="", transport=httpx.MockTransport(_recording_handler))
        clients.append(client)
        return client

    yield _factory
    for client in clients:
        client.close()


@pytest.fixture(scope="session")
def live_client() -> Iterator[LifiClient]:
    with LifiClient() as client:
        yield client


@pytest.fixture
def classified() -> Callable[..., Outcome]:
    """Classify a live response against an explicit status set; a 429 skips the test."""

    def _classify(
            response: httpx.Response,
            expected_statuses: Collection[int],
            schema_kind: Optional[Union[SchemaKind, str]] = None,
    ) -> Outcome:
        outcome = classify(response, expected_statuses, schema_kind)
        if outcome.is_rate_limited:
            pytest.skip("rate limited by LI.FI (429)")
        return outcome

    return _classify
