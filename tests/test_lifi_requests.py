from __future__ import annotations

import json

import httpx
import pytest

from lifi_api.configuration.config import settings
from lifi_api.integrations.lifi.lifi_client import LifiClient
from lifi_api.integrations.lifi.lifi_helpers import API_KEY_HEADER, _body_snippet, _build_lifi_headers, _build_timeout
from lifi_api.integrations.lifi.lifi_requests import (
    build_quote_query,
    build_routes_body,
    build_token_query,
    build_tools_query,
)
from lifi_api.integrations.lifi.lifi_structures import (
    QuoteOrder,
    QuoteParams,
    RouteOptions,
    RoutesRequest,
    TokenQuery,
    ToolFilter,
)

WALLET = "0x29DaCdF7cCaDf4eE67c923b4C22255A4B2494eD7"
USDC_ETHEREUM = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
USDC_POLYGON = "0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359"


def _quote_params(**overrides) -> QuoteParams:
    values = dict(
        fromChain="1",
        toChain="137",
        fromToken=USDC_ETHEREUM,
        toToken=USDC_POLYGON,
        fromAmount="10000000",
        fromAddress=WALLET,
    )
    values.update(overrides)
    return QuoteParams(**values)


def _routes_request(**overrides) -> RoutesRequest:
    values = dict(
        fromChainId=1,
        toChainId=137,
        fromTokenAddress=USDC_ETHEREUM,
        toTokenAddress=USDC_POLYGON,
        fromAmount="10000000",
    )
    values.update(overrides)
    return RoutesRequest(**values)


def test_quote_query_contains_required_fields_in_order():
    assert build_quote_query(_quote_params()) == [
        ("fromChain", "1"),
        ("toChain", "137"),
        ("fromToken", USDC_ETHEREUM),
        ("toToken", USDC_POLYGON),
        ("fromAmount", "10000000"),
        ("fromAddress", WALLET),
    ]


def test_quote_query_keeps_empty_required_fields():
    query = dict(build_quote_query(_quote_params(fromAmount="", fromAddress="")))

    assert query["fromAmount"] == ""
    assert query["fromAddress"] == ""


def test_quote_query_omits_unset_optionals():
    query = build_quote_query(_quote_params(toAddress="", integrator=None, referrer=""))

    names = [name for name, _ in query]
    assert "toAddress" not in names
    assert "integrator" not in names
    assert "referrer" not in names


def test_quote_query_renders_optionals():
    query = dict(
        build_quote_query(
            _quote_params(
                toAddress=WALLET,
                order=QuoteOrder.CHEAPEST,
                slippage=0.005,
                allowDestinationCall=False,
                skipSimulation=True,
            )
        )
    )

    assert query["toAddress"] == WALLET
    assert query["order"] == "CHEAPEST"
    assert query["slippage"] == "0.005"
    assert query["allowDestinationCall"] == "false"
    assert query["skipSimulation"] == "true"


def test_quote_query_repeats_list_values():
    query = build_quote_query(_quote_params(allowBridges=["stargateV2", "across"], denyExchanges=["1inch"]))

    assert [value for name, value in query if name == "allowBridges"] == ["stargateV2", "across"]
    assert [value for name, value in query if name == "denyExchanges"] == ["1inch"]
    assert all("," not in value for name, value in query if name == "allowBridges")


def test_quote_query_with_empty_list_sends_nothing():
    query = build_quote_query(_quote_params(preferBridges=[]))

    assert "preferBridges" not in [name for name, _ in query]


def test_tools_query():
    assert build_tools_query() == []
    assert build_tools_query([1, "POL", ""]) == [("chains", "1"), ("chains", "POL")]


def test_token_query():
    assert build_token_query(TokenQuery(chain="SOL", token="Sol")) == [("chain", "SOL"), ("token", "Sol")]


def test_routes_body_minimal():
    assert build_routes_body(_routes_request()) == {
        "fromChainId": 1,
        "toChainId": 137,
        "fromTokenAddress": USDC_ETHEREUM,
        "toTokenAddress": USDC_POLYGON,
        "fromAmount": "10000000",
    }


def test_routes_body_drops_empty_options_object():
    body = build_routes_body(_routes_request(fromAddress="", options=RouteOptions(bridges=ToolFilter())))

    assert "fromAddress" not in body
    assert "options" not in body


def test_routes_body_renders_options():
    options = RouteOptions(
        slippage=0.03,
        order=QuoteOrder.FASTEST,
        allowSwitchChain=False,
        bridges=ToolFilter(allow=["stargateV2"], deny=[]),
        exchanges=ToolFilter(prefer=["1inch"]),
        timing={"swapStepTimingStrategies": [{"strategy": "minWaitTime", "minWaitTimeMs": 600}]},
    )

    body = build_routes_body(_routes_request(fromAddress=WALLET, toAddress=WALLET, options=options))

    assert body["fromAddress"] == WALLET
    assert body["options"] == {
        "slippage": 0.03,
        "bridges": {"allow": ["stargateV2"], "deny": []},
        "exchanges": {"prefer": ["1inch"]},
        "order": "FASTEST",
        "allowSwitchChain": False,
        "timing": {"swapStepTimingStrategies": [{"strategy": "minWaitTime", "minWaitTimeMs": 600}]},
    }
    json.dumps(body)


def test_headers_without_key(monkeypatch):
    monkeypatch.setattr(settings, "LIFI_API_KEY", "")

    headers = _build_lifi_headers()

    assert headers["Accept"] == "application/json"
    assert API_KEY_HEADER not in headers


def test_headers_key_from_settings_and_explicit_override(monkeypatch):
    monkeypatch.setattr(settings, "LIFI_API_KEY", "from-env")

    assert _build_lifi_headers()[API_KEY_HEADER] == "from-env"
    assert _build_lifi_headers("explicit")[API_KEY_HEADER] == "explicit"
    assert API_KEY_HEADER not in _build_lifi_headers("   ")


def test_timeout_caps_connect():
    timeout = _build_timeout(30.0)

    assert timeout.read == 30.0
    assert timeout.connect == 10.0
    assert _build_timeout(2.5).connect == 2.5


def test_body_snippet_is_single_line_and_bounded():
    response = httpx.Response(502, content=("bad\n gateway " * 50).encode())

    snippet = _body_snippet(response, limit=20)

    assert "\n" not in snippet
    assert snippet.startswith("bad gateway bad")
    assert len(snippet) == 21


def test_client_sends_quote_query(mock_client, recorded_requests, quote_payload):
    client = mock_client(lambda request: httpx.Response(200, json=quote_payload))

    response = client.get_quote(_quote_params(allowBridges=["stargateV2", "across"]))

    assert response.status_code == 200
    request = recorded_requests[0]
    assert request.method == "GET"
    assert request.url.path == "/v1/quote"
    assert request.url.params.get_list("allowBridges") == ["stargateV2", "across"]
    assert request.url.params["fromChain"] == "1"
    assert request.headers["accept"] == "application/json"
    assert API_KEY_HEADER not in request.headers


def test_client_returns_non_success_responses_untouched(mock_client):
    client = mock_client(lambda request: httpx.Response(404, json={"message": "No available quotes"}))

    response = client.get_quote(_quote_params())

    assert response.status_code == 404
    assert response.json() == {"message": "No available quotes"}


def test_client_posts_routes_body(mock_client, recorded_requests, routes_payload):
    client = mock_client(lambda request: httpx.Response(200, json=routes_payload))

    client.post_advanced_routes(_routes_request(options=RouteOptions(slippage=0.01)))

    request = recorded_requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/advanced/routes"
    assert json.loads(request.content) == {
        "fromChainId": 1,
        "toChainId": 137,
        "fromTokenAddress": USDC_ETHEREUM,
        "toTokenAddress": USDC_POLYGON,
        "fromAmount": "10000000",
        "options": {"slippage": 0.01},
    }


def test_client_tools_without_filter_has_no_query(mock_client, recorded_requests, tools_payload):
    client = mock_client(lambda request: httpx.Response(200, json=tools_payload))

    client.get_tools()
    client.get_tools(chains=[1, 137])

    assert recorded_requests[0].url.path == "/v1/tools"
    assert recorded_requests[0].url.query == b""
    assert recorded_requests[1].url.params.get_list("chains") == ["1", "137"]


def test_client_token_lookup(mock_client, recorded_requests, token_payload):
    client = mock_client(lambda request: httpx.Response(200, json=token_payload))

    client.get_token(TokenQuery(chain="SOL", token="Sol"))

    assert recorded_requests[0].url.path == "/v1/token"
    assert dict(recorded_requests[0].url.params) == {"chain": "SOL", "token": "Sol"}


def test_client_sends_api_key_header():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    with LifiClient(base_url="https://lifi.test/v1/", api_key="secret", transport=httpx.MockTransport(handler)) as client:
        client.get_tools()

    assert seen[0].headers[API_KEY_HEADER] == "secret"
    assert str(seen[0].url) == "https://lifi.test/v1/tools"


def test_client_propagates_transport_errors(mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    client = mock_client(handler)

    with pytest.raises(httpx.ConnectError):
        client.get_quote(_quote_params())


def test_client_rejects_blank_base_url():
    with pytest.raises(ValueError):
        LifiClient(base_url="  ")
