from typing import Tuple

from lifi_api.core.structures.structures import OutcomeCategory

RATE_LIMIT_STATUS: int = 429
SUCCESS_STATUS: Tuple[int, ...] = (200,)
CLIENT_ERROR_STATUS: Tuple[int, ...] = (400, 404, 422)
SERVER_ERROR_STATUS: Tuple[int, ...] = (500, 502, 503, 504)

# Named expectation sets. Call sites pass one of these (or their own) explicitly.
DEFAULT_LOOKUP_STATUSES: Tuple[int, ...] = (200, 404, 429)
DEFAULT_ERROR_STATUSES: Tuple[int, ...] = CLIENT_ERROR_STATUS
LOOKUP_OR_CLIENT_ERROR_STATUSES: Tuple[int, ...] = (200, 400, 404, 422, 429)
INVALID_INPUT_STATUSES: Tuple[int, ...] = (400, 422, 429)


def is_rate_limited(status: int) -> bool:
    return status == RATE_LIMIT_STATUS


def is_success(status: int) -> bool:
    return status in SUCCESS_STATUS


def is_client_error(status: int) -> bool:
    return status in CLIENT_ERROR_STATUS


def is_server_error(status: int) -> bool:
    """Any 5xx, not only the well-known gateway codes."""
    return 500 <= status < 600


def category_for_status(status: int) -> OutcomeCategory:
    """Map a raw status code to its outcome category, independent of expectations."""
    if is_rate_limited(status):
        return OutcomeCategory.RATE_LIMITED
    if 200 <= status < 300:
        return OutcomeCategory.SUCCESS
    if is_client_error(status):
        return OutcomeCategory.CLIENT_ERROR
    if is_server_error(status):
        return OutcomeCategory.SERVER_ERROR
    return OutcomeCategory.OTHER
