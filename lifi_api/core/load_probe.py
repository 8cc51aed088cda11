from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Iterable, List, Sequence, Tuple

import httpx

from lifi_api.core.structures.structures import LatencySummary, TimedResponse
from lifi_api.core.utils.math_utils import _mean, _percentile, _share_below
from lifi_api.core.utils.status_utils import is_rate_limited, is_server_error
from lifi_api.logging.logger import get_logger

log = get_logger(__name__)

RequestFactory = Callable[[], Awaitable[httpx.Response]]


async def _timed_call(label: str, factory: RequestFactory) -> TimedResponse:
    started = time.perf_counter()
    response = await factory()
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    return TimedResponse(status=response.status_code, elapsed_ms=elapsed_ms, label=label)


async def fan_out(calls: Sequence[Tuple[str, RequestFactory]]) -> Tuple[List[TimedResponse], float]:
    """
    Dispatch every call at once and wait for all of them (fork-join).

    Transport errors are not swallowed: the first one propagates once gathered.

    Returns:
        The timed results in dispatch order and the wall-clock time of the burst in ms.
    """
    if not calls:
        return [], 0.0
    started = time.perf_counter()
    results = await asyncio.gather(*(_timed_call(label, factory) for label, factory in calls))
    total_ms = (time.perf_counter() - started) * 1000.0
    log.debug("[PERF][FANOUT] dispatched=%d total_ms=%.0f", len(calls), total_ms)
    return list(results), total_ms


def summarize(
        label: str,
        results: Iterable[TimedResponse],
        total_time_ms: float,
        *,
        threshold_ms: float,
        target_percentile: float,
) -> LatencySummary:
    """
    Aggregate a burst. Latencies are taken from 2xx responses only and sorted
    before the percentile is computed, so dispatch order is irrelevant.
    """
    items = list(results)
    summary = LatencySummary(label=label, total_requests=len(items), total_time_ms=total_time_ms)
    for item in items:
        if 200 <= item.status < 300:
            summary.success_count += 1
            summary.success_latencies_ms.append(item.elapsed_ms)
        elif is_server_error(item.status):
            summary.server_error_count += 1
        elif is_rate_limited(item.status):
            summary.rate_limited_count += 1

    summary.success_latencies_ms.sort()
    summary.percentile_ms = _percentile(summary.success_latencies_ms, target_percentile)
    summary.mean_ms = _mean(summary.success_latencies_ms)
    summary.share_under_threshold = _share_below(summary.success_latencies_ms, threshold_ms)

    log.info(
        "[PERF][SUMMARY] label=%s total_ms=%.0f success=%d/%d 5xx=%d 429=%d p%d_ms=%s mean_ms=%s",
        label,
        total_time_ms,
        summary.success_count,
        summary.total_requests,
        summary.server_error_count,
        summary.rate_limited_count,
        int(round(target_percentile * 100)),
        "NA" if summary.percentile_ms is None else f"{summary.percentile_ms:.0f}",
        "NA" if summary.mean_ms is None else f"{summary.mean_ms:.0f}",
    )
    return summary


async def probe(
        label: str,
        factory: RequestFactory,
        *,
        concurrency: int,
        threshold_ms: float,
        target_percentile: float,
) -> LatencySummary:
    """Fire `concurrency` identical requests concurrently and summarize them."""
    if concurrency <= 0:
        raise ValueError("concurrency must be greater than zero.")
    results, total_ms = await fan_out([(label, factory) for _ in range(concurrency)])
    return summarize(label, results, total_ms, threshold_ms=threshold_ms, target_percentile=target_percentile)
