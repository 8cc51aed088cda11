from typing import Dict, Optional

import httpx

from lifi_api.configuration.config import settings
from lifi_api.logging.logger import get_logger

log = get_logger(__name__)

API_KEY_HEADER: str = "x-lifi-api-key"


def _build_lifi_headers(api_key: Optional[str] = None) -> Dict[str, str]:
    """
    Construct LI.FI HTTP headers, optionally including an API key.

    An explicit `api_key` wins over `settings.LIFI_API_KEY`; blank keys are not sent.
    """
    headers: Dict[str, str] = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    key = api_key if api_key is not None else settings.LIFI_API_KEY
    if isinstance(key, str) and key.strip():
        headers[API_KEY_HEADER] = key.strip()
    return headers


def _normalize_base_url(base_url: Optional[str] = None) -> str:
    resolved = str(base_url if base_url is not None else settings.LIFI_BASE_URL).strip().rstrip("/")
    if not resolved:
        raise ValueError("LIFI_BASE_URL must be configured.")
    return resolved


def _build_timeout(timeout_seconds: Optional[float] = None) -> httpx.Timeout:
    """Per-call transport timeout; connect is capped so a dead host fails fast."""
    total = float(timeout_seconds if timeout_seconds is not None else settings.API_TIMEOUT_SECONDS)
    return httpx.Timeout(total, connect=min(total, 10.0))


def _log_transport_error(method: str, url: str, exc: httpx.RequestError) -> None:
    log.warning("[LI.FI][HTTP][TRANSPORT] %s %s failed: %s", method, url, str(exc) or type(exc).__name__)


def _body_snippet(response: httpx.Response, limit: int = 200) -> str:
    """Short, single-line excerpt of a response body for log lines and error messages."""
    text = response.text or ""
    text = " ".join(text.split())
    return text if len(text) <= limit else text[:limit] + "…"
