from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Union

import httpx

from lifi_api.integrations.lifi.lifi_helpers import (
    _build_lifi_headers,
    _build_timeout,
    _log_transport_error,
    _normalize_base_url,
)
from lifi_api.integrations.lifi.lifi_requests import (
    QueryItems,
    build_quote_query,
    build_routes_body,
    build_token_query,
    build_tools_query,
)
from lifi_api.integrations.lifi.lifi_structures import QuoteParams, RoutesRequest, TokenQuery
from lifi_api.logging.logger import get_logger

log = get_logger(__name__)

QUOTE_PATH: str = "/quote"
ADVANCED_ROUTES_PATH: str = "/advanced/routes"
TOOLS_PATH: str = "/tools"
TOKEN_PATH: str = "/token"


@dataclass(frozen=True)
class _RequestPlan:
    """Everything needed to issue one call, independent of sync/async transport."""
    method: str
    path: str
    tag: str
    params: Optional[QueryItems] = None
    json: Optional[Dict[str, object]] = None


def _quote_plan(params: QuoteParams) -> _RequestPlan:
    return _RequestPlan(method="GET", path=QUOTE_PATH, tag="QUOTE", params=build_quote_query(params))


def _routes_plan(request: RoutesRequest) -> _RequestPlan:
    return _RequestPlan(method="POST", path=ADVANCED_ROUTES_PATH, tag="ROUTES", json=build_routes_body(request))


def _tools_plan(chains: Optional[Iterable[Union[str, int]]]) -> _RequestPlan:
    query = build_tools_query(chains)
    return _RequestPlan(method="GET", path=TOOLS_PATH, tag="TOOLS", params=query or None)


def _token_plan(query: TokenQuery) -> _RequestPlan:
    return _RequestPlan(method="GET", path=TOKEN_PATH, tag="TOKEN", params=build_token_query(query))


def _log_response(plan: _RequestPlan, response: httpx.Response) -> None:
    elapsed_ms = response.elapsed.total_seconds() * 1000.0 if _has_elapsed(response) else -1.0
    log.debug(
        "[LI.FI][%s][RECEIVE] %s %s status=%d elapsed_ms=%.0f",
        plan.tag,
        plan.method,
        plan.path,
        response.status_code,
        elapsed_ms,
    )


def _has_elapsed(response: httpx.Response) -> bool:
    try:
        response.elapsed
    except RuntimeError:
        return False
    return True


class LifiClient:
    """
    Thin synchronous wrapper over the LI.FI REST endpoints.

    Responses are returned as-is, whatever their status: deciding what a status
    means is the classifier's job. Transport errors (`httpx.RequestError`) are
    logged and propagated; there are no retries.
    """

    def __init__(
            self,
            *,
            base_url: Optional[str] = None,
            api_key: Optional[str] = None,
            timeout_seconds: Optional[float] = None,
            transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = _normalize_base_url(base_url)
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=_build_lifi_headers(api_key),
            timeout=_build_timeout(timeout_seconds),
            transport=transport,
        )

    def __enter__(self) -> "LifiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _send(self, plan: _RequestPlan) -> httpx.Response:
        log.debug("[LI.FI][%s][REQUEST] %s %s params=%s", plan.tag, plan.method, plan.path, plan.params)
        try:
            response = self._client.request(plan.method, plan.path, params=plan.params, json=plan.json)
        except httpx.RequestError as exc:
            _log_transport_error(plan.method, f"{self.base_url}{plan.path}", exc)
            raise
        _log_response(plan, response)
        return response

    def get_quote(self, params: QuoteParams) -> httpx.Response:
        return self._send(_quote_plan(params))

    def post_advanced_routes(self, request: RoutesRequest) -> httpx.Response:
        return self._send(_routes_plan(request))

    def get_tools(self, chains: Optional[Iterable[Union[str, int]]] = None) -> httpx.Response:
        return self._send(_tools_plan(chains))

    def get_token(self, query: TokenQuery) -> httpx.Response:
        return self._send(_token_plan(query))


class AsyncLifiClient:
    """Async twin of `LifiClient`, used for concurrent fan-out."""

    def __init__(
            self,
            *,
            base_url: Optional[str] = None,
            api_key: Optional[str] = None,
            timeout_seconds: Optional[float] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = _normalize_base_url(base_url)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=_build_lifi_headers(api_key),
            timeout=_build_timeout(timeout_seconds),
            transport=transport,
        )

    async def __aenter__(self) -> "AsyncLifiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, plan: _RequestPlan) -> httpx.Response:
        log.debug("[LI.FI][%s][REQUEST] %s %s params=%s", plan.tag, plan.method, plan.path, plan.params)
        try:
            response = await self._client.request(plan.method, plan.path, params=plan.params, json=plan.json)
        except httpx.RequestError as exc:
            _log_transport_error(plan.method, f"{self.base_url}{plan.path}", exc)
            raise
        _log_response(plan, response)
        return response

    async def get_quote(self, params: QuoteParams) -> httpx.Response:
        return await self._send(_quote_plan(params))

    async def post_advanced_routes(self, request: RoutesRequest) -> httpx.Response:
        return await self._send(_routes_plan(request))

    async def get_tools(self, chains: Optional[Iterable[Union[str, int]]] = None) -> httpx.Response:
        return await self._send(_tools_plan(chains))

    async def get_token(self, query: TokenQuery) -> httpx.Response:
        return await self._send(_token_plan(query))
