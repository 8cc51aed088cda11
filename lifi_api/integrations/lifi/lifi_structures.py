from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Sequence


class QuoteOrder(str, Enum):
    FASTEST = "FASTEST"
    CHEAPEST = "CHEAPEST"


@dataclass(frozen=True)
class QuoteParams:
    """Query parameters for `GET /quote`. Chains and tokens are passed through as given."""
    fromChain: str
    toChain: str
    fromToken: str
    toToken: str
    fromAmount: str
    fromAddress: str
    toAddress: Optional[str] = None
    order: Optional[QuoteOrder] = None
    slippage: Optional[float] = None
    integrator: Optional[str] = None
    fee: Optional[float] = None
    referrer: Optional[str] = None
    allowDestinationCall: Optional[bool] = None
    fromAmountForGas: Optional[str] = None
    maxPriceImpact: Optional[float] = None
    skipSimulation: Optional[bool] = None
    allowBridges: Optional[Sequence[str]] = None
    allowExchanges: Optional[Sequence[str]] = None
    denyBridges: Optional[Sequence[str]] = None
    denyExchanges: Optional[Sequence[str]] = None
    preferBridges: Optional[Sequence[str]] = None
    preferExchanges: Optional[Sequence[str]] = None
    swapStepTimingStrategies: Optional[Sequence[str]] = None
    routeTimingStrategies: Optional[Sequence[str]] = None


@dataclass(frozen=True)
class ToolFilter:
    """allow/deny/prefer lists for bridges or exchanges in route options."""
    allow: Optional[Sequence[str]] = None
    deny: Optional[Sequence[str]] = None
    prefer: Optional[Sequence[str]] = None


@dataclass(frozen=True)
class RouteOptions:
    insurance: Optional[bool] = None
    integrator: Optional[str] = None
    slippage: Optional[float] = None
    bridges: Optional[ToolFilter] = None
    exchanges: Optional[ToolFilter] = None
    order: Optional[QuoteOrder] = None
    allowSwitchChain: Optional[bool] = None
    allowDestinationCall: Optional[bool] = None
    referrer: Optional[str] = None
    fee: Optional[float] = None
    maxPriceImpact: Optional[float] = None
    timing: Optional[Mapping[str, object]] = None


@dataclass(frozen=True)
class RoutesRequest:
    """JSON body for `POST /advanced/routes`. Chain ids are numeric here, unlike the quote query."""
    fromChainId: int
    toChainId: int
    fromTokenAddress: str
    toTokenAddress: str
    fromAmount: str
    fromAddress: Optional[str] = None
    toAddress: Optional[str] = None
    fromAmountForGas: Optional[str] = None
    options: Optional[RouteOptions] = None


@dataclass(frozen=True)
class TokenQuery:
    chain: str
    token: str


@dataclass(frozen=True)
class TokenPair:
    """One happy-path transfer from the bundled test data."""
    name: str
    fromChain: str
    toChain: str
    fromToken: str
    toToken: str
    fromAmount: str


@dataclass(frozen=True)
class BoundaryValue:
    name: str
    fromAmount: str


@dataclass
class LifiTestData:
    tokenPairs: List[TokenPair] = field(default_factory=list)
    invalidTokens: List[TokenPair] = field(default_factory=list)
    boundaryValues: List[BoundaryValue] = field(default_factory=list)

    def boundary(self, name: str) -> BoundaryValue:
        for value in self.boundaryValues:
            if value.name == name:
                return value
        raise KeyError(f"Unknown boundary value '{name}'")
