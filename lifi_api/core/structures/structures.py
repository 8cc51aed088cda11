from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel


class OutcomeCategory(str, Enum):
    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"


class AddressFamily(str, Enum):
    EVM = "evm"
    BASE58 = "base58"
    UNKNOWN = "unknown"


class SchemaKind(str, Enum):
    """Response resources the schema layer knows how to validate."""
    QUOTE = "quote"
    ADVANCED_ROUTES = "advanced_routes"
    TOOLS = "tools"
    TOKEN = "token"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationIssue:
    """One violated location inside a JSON document, e.g. path='action.fromToken.decimals'."""
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    """Either a typed model (ok) or the list of issues that prevented it."""
    kind: SchemaKind
    value: Optional[BaseModel] = None
    issues: Tuple[ValidationIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.issues


@dataclass(frozen=True)
class Outcome:
    """Classification of a single HTTP response."""
    status: int
    category: OutcomeCategory
    body: Optional[Any] = None
    validated: Optional[BaseModel] = None

    @property
    def is_rate_limited(self) -> bool:
        return self.category is OutcomeCategory.RATE_LIMITED


@dataclass(frozen=True)
class TimedResponse:
    """Status and wall-clock latency of one request issued during a fan-out."""
    status: int
    elapsed_ms: float
    label: str = ""


@dataclass
class LatencySummary:
    """Order-independent aggregate over a burst of concurrent requests."""
    label: str
    total_requests: int
    total_time_ms: float
    success_count: int = 0
    server_error_count: int = 0
    rate_limited_count: int = 0
    success_latencies_ms: List[float] = field(default_factory=list)
    percentile_ms: Optional[float] = None
    mean_ms: Optional[float] = None
    share_under_threshold: Optional[float] = None
