"""
Classify LI.FI HTTP responses and validate their bodies where the category requires it.

    SUCCESS       2xx in the expected set  -> body validated against the caller's schema kind
    CLIENT_ERROR  400/404/422              -> body validated as ErrorResponse, non-empty message
    SERVER_ERROR  5xx                      -> fatal unless the caller expects it; body kept unvalidated
    RATE_LIMITED  429                      -> always accepted, body never read
    OTHER         anything else expected   -> body kept unvalidated

Expected status sets are always passed by the caller. See
`lifi_api.core.utils.status_utils` for named sets.
"""
from __future__ import annotations

from typing import Any, Collection, Optional, Union, cast

import httpx

from lifi_api.core.exceptions import SchemaViolationError, UnexpectedStatusError, UnparseableBodyError
from lifi_api.core.structures.structures import Outcome, OutcomeCategory, SchemaKind, ValidationIssue
from lifi_api.core.utils.status_utils import category_for_status
from lifi_api.integrations.lifi.lifi_helpers import _body_snippet
from lifi_api.integrations.lifi.lifi_schemas import ErrorResponse, validate_payload
from lifi_api.logging.logger import get_logger

log = get_logger(__name__)

_NOT_JSON = object()


def _read_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return _NOT_JSON


def _require_json(response: httpx.Response) -> Any:
    payload = _read_json(response)
    if payload is _NOT_JSON:
        raise UnparseableBodyError(response.status_code, _body_snippet(response))
    return payload


def _describe_request(response: httpx.Response) -> str:
    try:
        request = response.request
    except RuntimeError:
        return "<detached response>"
    return f"{request.method} {request.url.path}"


def _rate_limited(response: httpx.Response) -> Outcome:
    log.info("[CLASSIFY][RATE_LIMITED] %s -> 429, skipping body validation.", _describe_request(response))
    return Outcome(status=response.status_code, category=OutcomeCategory.RATE_LIMITED)


def _ensure_expected(status: int, expected_statuses: Collection[int]) -> None:
    if status not in expected_statuses:
        log.warning("[CLASSIFY][UNEXPECTED] status=%d expected=%s", status, sorted(expected_statuses))
        raise UnexpectedStatusError(status, sorted(expected_statuses))


def _validate_error_body(status: int, payload: Any) -> ErrorResponse:
    result = validate_payload(SchemaKind.ERROR, payload)
    if not result.ok:
        raise SchemaViolationError(SchemaKind.ERROR.value, result.issues, status=status)
    error = cast(ErrorResponse, result.value)
    if not error.message.strip():
        raise SchemaViolationError(
            SchemaKind.ERROR.value,
            [ValidationIssue(path="message", message="must be a non-empty string")],
            status=status,
        )
    return error


def classify(
        response: httpx.Response,
        expected_statuses: Collection[int],
        schema_kind: Optional[Union[SchemaKind, str]] = None,
) -> Outcome:
    """
    Decide the outcome category of `response` and validate its body accordingly.

    Args:
        response: The raw response; its body is decoded only when the category needs it.
        expected_statuses: Statuses the scenario accepts. 429 is accepted regardless.
        schema_kind: Schema applied to SUCCESS bodies. None means success bodies
            are parsed but not validated.

    Raises:
        UnexpectedStatusError: status is neither expected nor 429.
        UnparseableBodyError: a body that must be validated is not JSON.
        SchemaViolationError: a body does not match its schema, or an error body
            carries an empty message.
    """
    status = response.status_code
    category = category_for_status(status)

    if category is OutcomeCategory.RATE_LIMITED:
        return _rate_limited(response)

    _ensure_expected(status, expected_statuses)

    if category is OutcomeCategory.SUCCESS:
        payload = _require_json(response)
        if schema_kind is None:
            return Outcome(status=status, category=category, body=payload)
        result = validate_payload(schema_kind, payload)
        if not result.ok:
            raise SchemaViolationError(SchemaKind(schema_kind).value, result.issues, status=status)
        log.debug("[CLASSIFY][SUCCESS] status=%d schema=%s", status, SchemaKind(schema_kind).value)
        return Outcome(status=status, category=category, body=payload, validated=result.value)

    if category is OutcomeCategory.CLIENT_ERROR:
        payload = _require_json(response)
        error = _validate_error_body(status, payload)
        log.debug("[CLASSIFY][CLIENT_ERROR] status=%d message=%s", status, error.message)
        return Outcome(status=status, category=category, body=payload, validated=error)

    payload = _read_json(response)
    body = _body_snippet(response) if payload is _NOT_JSON else payload
    if category is OutcomeCategory.SERVER_ERROR:
        log.warning("[CLASSIFY][SERVER_ERROR] status=%d accepted by caller, body=%s", status, _body_snippet(response))
    return Outcome(status=status, category=category, body=body)


def handle_rate_limit(response: httpx.Response, expected_statuses: Collection[int]) -> Outcome:
    """
    Accept 429 without reading the body; otherwise require an expected status and,
    for non-success statuses, a valid error body.
    """
    status = response.status_code
    if status == 429:
        return _rate_limited(response)
    _ensure_expected(status, expected_statuses)
    payload = _require_json(response)
    if 200 <= status < 300:
        return Outcome(status=status, category=OutcomeCategory.SUCCESS, body=payload)
    error = _validate_error_body(status, payload)
    return Outcome(status=status, category=category_for_status(status), body=payload, validated=error)


def validate_error_response(response: httpx.Response, expected_statuses: Collection[int]) -> Outcome:
    """Require an expected error status and a valid ErrorResponse body (429 short-circuits)."""
    status = response.status_code
    if status == 429:
        return _rate_limited(response)
    _ensure_expected(status, expected_statuses)
    payload = _require_json(response)
    error = _validate_error_body(status, payload)
    return Outcome(status=status, category=category_for_status(status), body=payload, validated=error)
