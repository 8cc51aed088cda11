from __future__ import annotations

import os


def _as_bool(value: str | None, default: bool = False) -> bool:
    """Parse a truthy/falsey string into a boolean."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


class Settings:
    # LI.FI API
    LIFI_BASE_URL: str = os.getenv("LIFI_BASE_URL", "https://li.quest/v1")
    LIFI_API_KEY: str = os.getenv("LIFI_API_KEY", "")
    API_TIMEOUT: int = int(os.getenv("API_TIMEOUT", "30000"))

    # Live scenarios hit the real endpoint; off unless explicitly enabled
    LIFI_LIVE_TESTS: bool = _as_bool(os.getenv("LIFI_LIVE_TESTS"), False)

    # Performance probes
    PERF_QUOTE_CONCURRENCY: int = int(os.getenv("PERF_QUOTE_CONCURRENCY", "15"))
    PERF_QUOTE_MAX_MS: float = float(os.getenv("PERF_QUOTE_MAX_MS", "2000"))
    PERF_ROUTES_CONCURRENCY: int = int(os.getenv("PERF_ROUTES_CONCURRENCY", "20"))
    PERF_ROUTES_MAX_MS: float = float(os.getenv("PERF_ROUTES_MAX_MS", "3000"))
    PERF_MIXED_CONCURRENCY: int = int(os.getenv("PERF_MIXED_CONCURRENCY", "10"))
    PERF_TARGET_PERCENTILE: float = float(os.getenv("PERF_TARGET_PERCENTILE", "0.95"))

    # Debug / logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    LOG_LEVEL_LIFI_API: str = os.getenv("LOG_LEVEL_LIFI_API", "INFO").upper()
    LOG_LEVEL_LIB_HTTPX: str = os.getenv("LOG_LEVEL_LIB_HTTPX", "WARNING").upper()
    LOG_LEVEL_LIB_HTTPCORE: str = os.getenv("LOG_LEVEL_LIB_HTTPCORE", "WARNING").upper()
    LOG_LEVEL_LIB_ASYNCIO: str = os.getenv("LOG_LEVEL_LIB_ASYNCIO", "WARNING").upper()
    NO_COLOR: bool = _as_bool(os.getenv("NO_COLOR"), False)

    @property
    def API_TIMEOUT_SECONDS(self) -> float:
        """Transport timeout in seconds (API_TIMEOUT is expressed in milliseconds)."""
        return max(1, self.API_TIMEOUT) / 1000.0


settings = Settings()
