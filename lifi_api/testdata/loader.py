from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from lifi_api.integrations.lifi.lifi_structures import BoundaryValue, LifiTestData, TokenPair
from lifi_api.logging.logger import get_logger

log = get_logger(__name__)

TOKENS_FILE: Path = Path(__file__).resolve().parent / "tokens.json"


@lru_cache(maxsize=None)
def load_test_data(path: Path = TOKENS_FILE) -> LifiTestData:
    """Load token pairs, invalid inputs and boundary amounts shipped with the package."""
    with path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)

    data = LifiTestData(
        tokenPairs=[TokenPair(**item) for item in raw.get("tokenPairs", [])],
        invalidTokens=[TokenPair(**item) for item in raw.get("invalidTokens", [])],
        boundaryValues=[BoundaryValue(**item) for item in raw.get("boundaryValues", [])],
    )
    log.debug(
        "[TESTDATA][LOAD] pairs=%d invalid=%d boundaries=%d from %s",
        len(data.tokenPairs),
        len(data.invalidTokens),
        len(data.boundaryValues),
        path,
    )
    return data
