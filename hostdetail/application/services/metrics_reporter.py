"""Periodic service metrics.

Logs a `periodic_metrics` record at a fixed interval: peak resident memory,
user-agent tally aggregates, process uptime and cache readiness. Started
and stopped by the application lifespan.
"""

import asyncio
import resource
import sys
import time
from collections.abc import Callable
from typing import Any

from hostdetail.application.services.user_agent_tally import UserAgentTally
from hostdetail.domain.protocols.cache_protocol import CacheProtocol
from hostdetail.domain.protocols.logger_protocol import LoggerProtocol


def peak_rss_bytes() -> int:
    """Peak resident set size of this process in bytes."""
    usage = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS bytes
    return usage if sys.platform == "darwin" else usage * 1024


class MetricsReporter:
    """Background task logging service metrics every `interval` seconds.

    Args:
        tally: User-agent tally to summarize.
        cache: Cache whose readiness is reported.
        logger: Structured logger.
        interval: Seconds between two records.
        clock: Monotonic clock used for uptime (injectable for tests).
    """

    def __init__(
        self,
        *,
        tally: UserAgentTally,
        cache: CacheProtocol,
        logger: LoggerProtocol,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._tally = tally
        self._cache = cache
        self._logger = logger
        self._interval = interval
        self._clock = clock
        self._started_at = clock()
        self._task: asyncio.Task[None] | None = None

    def collect(self) -> dict[str, Any]:
        """Take one metrics sample."""
        stats = self._tally.stats()
        return {
            "memory": {"peak_rss_bytes": peak_rss_bytes()},
            "user_agents": {
                "unique": stats.unique,
                "total_requests": stats.total,
                "evicted": stats.evicted,
            },
            "uptime_seconds": round(self._clock() - self._started_at, 3),
            "cache_ready": self._cache.is_ready,
        }

    def start(self) -> None:
        """Start the reporting loop (no-op when already running)."""
        if self._task is not None and not self._task.done():
            self._logger.warning("metrics_reporter_already_running")
            return
        self._task = asyncio.create_task(self._report_loop())

    async def stop(self) -> None:
        """Cancel the reporting loop and wait for it to finish."""
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            self._logger.debug("metrics_reporter_stopped")
        self._task = None

    async def _report_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._logger.info("periodic_metrics", metrics=self.collect())
