"""
Pydantic models describing the LI.FI response bodies the suite validates.

The models are purely structural:
    - amounts and USD values stay strings; their numeric meaning is checked by
      `lifi_api.core.utils.amount_utils`, not here;
    - optional fields may be absent but not null, except the few the API
      really nulls (`ErrorResponse.errors`, `Step.execution`, `Step.transactionRequest`);
    - unknown fields are kept, the remote contract grows over time.

`validate_payload` is the only entry point callers need: it never raises on a
malformed body and returns a `ValidationResult` instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, Iterator, List, Literal, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, ValidationError, model_validator

from lifi_api.core.structures.structures import SchemaKind, ValidationIssue, ValidationResult
from lifi_api.logging.logger import get_logger

log = get_logger(__name__)

StepType = Literal["swap", "cross", "lifi", "protocol"]
Number = Union[StrictInt, StrictFloat]
ChainId = Union[str, StrictInt]


class LifiModel(BaseModel):
    """Common configuration: extra fields kept, immutable, explicit nulls rejected."""

    model_config = ConfigDict(extra="allow", frozen=True)

    _nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def _reject_explicit_nulls(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        for name in cls.model_fields:
            if name in data and data[name] is None and name not in cls._nullable_fields:
                raise ValueError(f"'{name}' is optional but must not be null")
        return data


class Token(LifiModel):
    address: str
    symbol: str
    decimals: StrictInt
    chainId: StrictInt
    name: str
    coinKey: Optional[str] = None
    priceUSD: Optional[str] = None
    logoURI: Optional[str] = None


class SingleTokenResponse(Token):
    """`GET /token` payload: a token extended with market data."""
    marketCapUSD: Optional[Number] = None
    volumeUSD24H: Optional[Number] = None


class Action(LifiModel):
    fromChainId: StrictInt
    toChainId: StrictInt
    fromToken: Token
    toToken: Token
    fromAmount: str
    toAddress: Optional[str] = None
    fromAddress: Optional[str] = None
    slippage: Optional[Number] = None


class FeeCost(LifiModel):
    name: str
    description: Optional[str] = None
    percentage: str
    token: Token
    amount: Optional[str] = None
    amountUSD: str
    included: Optional[StrictBool] = None


class GasCost(LifiModel):
    type: str
    price: Optional[str] = None
    estimate: Optional[str] = None
    limit: Optional[str] = None
    amount: str
    amountUSD: Optional[str] = None
    token: Token


class Estimate(LifiModel):
    tool: Optional[str] = None
    fromAmount: str
    fromAmountUSD: Optional[str] = None
    toAmount: str
    toAmountMin: str
    toAmountUSD: Optional[str] = None
    approvalAddress: str
    feeCosts: Optional[List[FeeCost]] = None
    gasCosts: Optional[List[GasCost]] = None
    executionDuration: Optional[Number] = None
    data: Optional[Dict[str, Any]] = None


class ToolDetails(LifiModel):
    key: Optional[str] = None
    name: Optional[str] = None
    logoURI: Optional[str] = None


class IncludedStep(LifiModel):
    """A constituent operation of an aggregated step. Does not nest further."""
    id: str
    type: str
    tool: str
    toolDetails: Optional[ToolDetails] = None
    action: Action
    estimate: Estimate


class Step(LifiModel):
    """A single execution unit; `GET /quote` returns exactly one of these."""
    _nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"execution", "transactionRequest"})

    id: str
    type: Optional[StepType] = None
    tool: str
    toolDetails: Optional[ToolDetails] = None
    action: Action
    estimate: Estimate
    integrator: Optional[str] = None
    includedSteps: Optional[List[IncludedStep]] = None
    referrer: Optional[str] = None
    execution: Optional[Any] = None
    transactionRequest: Optional[Any] = None


QuoteResponse = Step


class Route(LifiModel):
    id: str
    fromChainId: StrictInt
    toChainId: StrictInt
    fromToken: Token
    toToken: Token
    fromAmount: str
    fromAmountUSD: Optional[str] = None
    toAmount: str
    toAmountMin: str
    toAmountUSD: Optional[str] = None
    gasCostUSD: Optional[str] = None
    steps: List[Step]
    fromAddress: Optional[str] = None
    toAddress: Optional[str] = None
    containsSwitchChain: Optional[StrictBool] = None


class AdvancedRoutesResponse(LifiModel):
    routes: List[Route]
    unavailableRoutes: Optional[Union[List[Any], Dict[str, Any]]] = None


class SupportedChainPair(LifiModel):
    fromChainId: ChainId
    toChainId: ChainId


class Bridge(LifiModel):
    key: str
    name: str
    logoURI: Optional[str] = None
    supportedChains: Optional[List[SupportedChainPair]] = None


class Exchange(LifiModel):
    key: str
    name: str
    logoURI: Optional[str] = None
    supportedChains: Optional[List[ChainId]] = None


class ToolsResponse(LifiModel):
    bridges: Optional[List[Bridge]] = None
    exchanges: Optional[List[Exchange]] = None


class ToolError(LifiModel):
    errorType: Optional[str] = None
    code: Optional[str] = None
    action: Optional[Action] = None
    tool: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class ToolErrorsByKey:
    """`errors` delivered as an object keyed by tool (or any server-chosen key)."""
    entries: Tuple[Tuple[str, ToolError], ...]

    def items(self) -> Iterator[Tuple[Union[str, int], ToolError]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class ToolErrorsByIndex:
    """`errors` delivered as a plain array."""
    entries: Tuple[ToolError, ...]

    def items(self) -> Iterator[Tuple[Union[str, int], ToolError]]:
        return iter(enumerate(self.entries))

    def __len__(self) -> int:
        return len(self.entries)


ToolErrors = Union[ToolErrorsByKey, ToolErrorsByIndex]


class ErrorResponse(LifiModel):
    _nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"errors"})

    message: str
    errorCode: Optional[str] = None
    statusCode: Optional[StrictInt] = None
    errors: Optional[Union[Dict[str, ToolError], List[ToolError]]] = None

    @property
    def tool_errors(self) -> Optional[ToolErrors]:
        """Uniform view over `errors` regardless of the shape the server picked."""
        if self.errors is None:
            return None
        if isinstance(self.errors, list):
            return ToolErrorsByIndex(entries=tuple(self.errors))
        return ToolErrorsByKey(entries=tuple(self.errors.items()))


_MODELS_BY_KIND: Dict[SchemaKind, Type[LifiModel]] = {
    SchemaKind.QUOTE: Step,
    SchemaKind.ADVANCED_ROUTES: AdvancedRoutesResponse,
    SchemaKind.TOOLS: ToolsResponse,
    SchemaKind.TOKEN: SingleTokenResponse,
    SchemaKind.ERROR: ErrorResponse,
}


def model_for(kind: Union[SchemaKind, str]) -> Type[LifiModel]:
    return _MODELS_BY_KIND[SchemaKind(kind)]


def _issues_from_error(error: ValidationError) -> Tuple[ValidationIssue, ...]:
    issues: List[ValidationIssue] = []
    for detail in error.errors():
        path = ".".join(str(part) for part in detail.get("loc", ()))
        issues.append(ValidationIssue(path=path, message=str(detail.get("msg", "invalid value"))))
    return tuple(issues)


def validate_payload(kind: Union[SchemaKind, str], payload: object) -> ValidationResult:
    """
    Validate a decoded JSON document against the model registered for `kind`.

    Returns:
        A `ValidationResult` holding either the typed model or every violated path.
        Malformed input never raises; an unknown `kind` does (programming error).
    """
    schema_kind = SchemaKind(kind)
    model = _MODELS_BY_KIND[schema_kind]
    try:
        value = model.model_validate(payload)
    except ValidationError as exc:
        issues = _issues_from_error(exc)
        log.debug("[SCHEMA][%s] %d issue(s): %s", schema_kind.value.upper(), len(issues), "; ".join(map(str, issues)))
        return ValidationResult(kind=schema_kind, issues=issues)
    return ValidationResult(kind=schema_kind, value=value)
