from __future__ import annotations

import re
from dataclasses import replace
from typing import List, Optional

from lifi_api.core.utils.address_utils import addresses_equal
from lifi_api.core.utils.amount_utils import amount_not_above, is_positive_amount
from lifi_api.integrations.lifi.lifi_schemas import Route, Step, Token
from lifi_api.integrations.lifi.lifi_structures import QuoteParams, RoutesRequest, TokenPair

_CHAIN_ID_PATTERN = re.compile(r"[0-9]+")


def build_quote_params(pair: TokenPair, wallet_address: str, **overrides: object) -> QuoteParams:
    """Quote request for `pair`, sending from and to the same wallet unless overridden."""
    params = QuoteParams(
        fromChain=pair.fromChain,
        toChain=pair.toChain,
        fromToken=pair.fromToken,
        toToken=pair.toToken,
        fromAmount=pair.fromAmount,
        fromAddress=wallet_address,
        toAddress=wallet_address,
    )
    return replace(params, **overrides) if overrides else params


def build_routes_request(pair: TokenPair, wallet_address: str, **overrides: object) -> RoutesRequest:
    """Advanced-routes body for `pair`. Chain ids travel as numbers in this endpoint."""
    request = RoutesRequest(
        fromChainId=_chain_id(pair.fromChain),
        toChainId=_chain_id(pair.toChain),
        fromTokenAddress=pair.fromToken,
        toTokenAddress=pair.toToken,
        fromAmount=pair.fromAmount,
        fromAddress=wallet_address,
        toAddress=wallet_address,
    )
    return replace(request, **overrides) if overrides else request


def _chain_id(raw: str) -> int:
    if _CHAIN_ID_PATTERN.fullmatch(str(raw).strip()) is None:
        raise ValueError(f"chain '{raw}' is not a numeric chain id")
    return int(raw)


def _expect_equal(mismatches: List[str], field: str, actual: object, expected: object) -> None:
    if actual != expected:
        mismatches.append(f"{field}: expected {expected!r}, got {actual!r}")


def _expect_same_address(mismatches: List[str], field: str, token: Token, expected: str) -> None:
    if not addresses_equal(token.address, expected):
        mismatches.append(f"{field}: expected {expected!r}, got {token.address!r}")


def quote_echo_mismatches(step: Step, pair: TokenPair) -> List[str]:
    """
    Compare what a 200 quote echoes back with what was requested.

    Returns a human-readable line per mismatch; an empty list means the echo is faithful.
    """
    mismatches: List[str] = []
    action = step.action
    _expect_equal(mismatches, "action.fromChainId", action.fromChainId, _chain_id(pair.fromChain))
    _expect_equal(mismatches, "action.toChainId", action.toChainId, _chain_id(pair.toChain))
    _expect_same_address(mismatches, "action.fromToken.address", action.fromToken, pair.fromToken)
    _expect_same_address(mismatches, "action.toToken.address", action.toToken, pair.toToken)
    _expect_equal(mismatches, "action.fromAmount", action.fromAmount, pair.fromAmount)
    _expect_equal(mismatches, "estimate.fromAmount", step.estimate.fromAmount, pair.fromAmount)
    mismatches.extend(estimate_amount_problems(step.estimate.toAmount, step.estimate.toAmountMin, "estimate"))
    return mismatches


def route_echo_mismatches(route: Route, pair: TokenPair) -> List[str]:
    mismatches: List[str] = []
    _expect_equal(mismatches, "route.fromChainId", route.fromChainId, _chain_id(pair.fromChain))
    _expect_equal(mismatches, "route.toChainId", route.toChainId, _chain_id(pair.toChain))
    _expect_same_address(mismatches, "route.fromToken.address", route.fromToken, pair.fromToken)
    _expect_same_address(mismatches, "route.toToken.address", route.toToken, pair.toToken)
    _expect_equal(mismatches, "route.fromAmount", route.fromAmount, pair.fromAmount)
    mismatches.extend(estimate_amount_problems(route.toAmount, route.toAmountMin, "route"))
    if not route.steps:
        mismatches.append("route.steps: expected at least one step")
    return mismatches


def estimate_amount_problems(to_amount: str, to_amount_min: Optional[str], prefix: str) -> List[str]:
    problems: List[str] = []
    if not is_positive_amount(to_amount):
        problems.append(f"{prefix}.toAmount: expected a positive amount, got {to_amount!r}")
    if to_amount_min is not None and not amount_not_above(to_amount_min, to_amount):
        problems.append(f"{prefix}.toAmountMin: expected <= toAmount ({to_amount!r}), got {to_amount_min!r}")
    return problems
