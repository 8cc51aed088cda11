"""
Pure translation of structured parameters into LI.FI query strings and bodies.

Rules shared by every endpoint:
    - optional values that are None or "" are omitted;
    - list values are repeated as same-named entries, never comma-joined;
    - booleans are sent as 'true' / 'false'.
"""
from __future__ import annotations

from dataclasses import fields
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from lifi_api.integrations.lifi.lifi_structures import (
    QuoteParams,
    RouteOptions,
    RoutesRequest,
    TokenQuery,
    ToolFilter,
)

QueryItems = List[Tuple[str, str]]

_QUOTE_REQUIRED: Tuple[str, ...] = ("fromChain", "toChain", "fromToken", "toToken", "fromAmount", "fromAddress")
_QUOTE_SINGLE_OPTIONAL: Tuple[str, ...] = (
    "toAddress",
    "order",
    "slippage",
    "integrator",
    "fee",
    "referrer",
    "allowDestinationCall",
    "fromAmountForGas",
    "maxPriceImpact",
    "skipSimulation",
)
_QUOTE_REPEATABLE: Tuple[str, ...] = (
    "allowBridges",
    "allowExchanges",
    "denyBridges",
    "denyExchanges",
    "preferBridges",
    "preferExchanges",
    "swapStepTimingStrategies",
    "routeTimingStrategies",
)


def _to_query_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _is_omitted(value: object) -> bool:
    return value is None or value == ""


def build_quote_query(params: QuoteParams) -> QueryItems:
    """
    Build the `GET /quote` query as ordered (name, value) pairs.

    Required parameters are always sent, even when empty, so that the server
    (not this layer) reports missing input.
    """
    items: QueryItems = [(name, _to_query_value(getattr(params, name))) for name in _QUOTE_REQUIRED]

    for name in _QUOTE_SINGLE_OPTIONAL:
        value = getattr(params, name)
        if not _is_omitted(value):
            items.append((name, _to_query_value(value)))

    for name in _QUOTE_REPEATABLE:
        for value in getattr(params, name) or ():
            if not _is_omitted(value):
                items.append((name, _to_query_value(value)))

    return items


def build_tools_query(chains: Optional[Iterable[Union[str, int]]] = None) -> QueryItems:
    """`GET /tools` accepts an optional repeatable `chains` filter (ids or keys)."""
    if chains is None:
        return []
    return [("chains", _to_query_value(chain)) for chain in chains if not _is_omitted(chain)]


def build_token_query(query: TokenQuery) -> QueryItems:
    return [("chain", query.chain), ("token", query.token)]


def _tool_filter_body(tool_filter: ToolFilter) -> Dict[str, List[str]]:
    body: Dict[str, List[str]] = {}
    for name in ("allow", "deny", "prefer"):
        values: Optional[Sequence[str]] = getattr(tool_filter, name)
        if values is not None:
            body[name] = [value for value in values if value]
    return body


def _options_body(options: RouteOptions) -> Dict[str, object]:
    body: Dict[str, object] = {}
    for option_field in fields(options):
        value = getattr(options, option_field.name)
        if _is_omitted(value):
            continue
        if isinstance(value, ToolFilter):
            nested = _tool_filter_body(value)
            if nested:
                body[option_field.name] = nested
        elif isinstance(value, Enum):
            body[option_field.name] = value.value
        elif isinstance(value, Mapping):
            body[option_field.name] = dict(value)
        else:
            body[option_field.name] = value
    return body


def build_routes_body(request: RoutesRequest) -> Dict[str, object]:
    """
    Build the `POST /advanced/routes` JSON body.

    Required fields are always present; optional top-level fields and options
    are dropped when None or empty. An options object with nothing set is omitted.
    """
    body: Dict[str, object] = {
        "fromChainId": request.fromChainId,
        "toChainId": request.toChainId,
        "fromTokenAddress": request.fromTokenAddress,
        "toTokenAddress": request.toTokenAddress,
        "fromAmount": request.fromAmount,
    }
    for name in ("fromAddress", "toAddress", "fromAmountForGas"):
        value = getattr(request, name)
        if not _is_omitted(value):
            body[name] = value

    if request.options is not None:
        options = _options_body(request.options)
        if options:
            body["options"] = options
    return body
