from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from lifi_api.core.structures.structures import ValidationIssue


class LifiApiError(Exception):
    """Base class for verification failures raised by this package."""


class UnexpectedStatusError(LifiApiError):
    def __init__(self, status: int, expected_statuses: Iterable[int]) -> None:
        self.status = status
        self.expected_statuses: Tuple[int, ...] = tuple(expected_statuses)
        expected = ", ".join(str(code) for code in self.expected_statuses)
        super().__init__(f"Unexpected status code: {status}. Expected one of: {expected}")


class SchemaViolationError(LifiApiError):
    def __init__(self, kind: str, issues: Sequence[ValidationIssue], status: int | None = None) -> None:
        self.kind = kind
        self.issues: Tuple[ValidationIssue, ...] = tuple(issues)
        self.status = status
        details = "; ".join(str(issue) for issue in self.issues) or "no details"
        prefix = f"status={status} " if status is not None else ""
        super().__init__(f"{prefix}body does not match '{kind}' schema: {details}")


class UnparseableBodyError(LifiApiError):
    def __init__(self, status: int, snippet: str) -> None:
        self.status = status
        self.snippet = snippet
        super().__init__(f"status={status} body is not valid JSON: {snippet!r}")
