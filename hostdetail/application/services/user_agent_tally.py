"""Process-wide user-agent occurrence counter.

Counts requests per exact user-agent string to observe client diversity.
Bounded: once max_entries distinct agents are tracked, the
least-recently-seen agent is evicted to make room for a new one.
"""

import threading
from collections import OrderedDict
from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class TallyUpdate:
    """Result of recording one request.

    Attributes:
        count: Occurrences of this user agent after the increment.
        is_new: Whether the agent was not being tracked before.
    """

    count: int
    is_new: bool


@dataclass(frozen=True, slots=True, kw_only=True)
class TallyStats:
    """Aggregate view of the tally.

    Attributes:
        unique: Number of distinct user agents tracked.
        total: Sum of all tracked occurrence counts.
        evicted: Distinct agents dropped by LRU eviction so far.
    """

    unique: int
    total: int
    evicted: int


class UserAgentTally:
    """LRU-bounded user-agent counter.

    Increment-or-insert happens under a lock so no update is lost when
    the service runs with threaded workers; under asyncio alone it never
    contends.

    Args:
        max_entries: Maximum number of distinct user agents kept.
    """

    def __init__(self, max_entries: int) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be greater than 0")
        self._max_entries = max_entries
        self._counts: OrderedDict[str, int] = OrderedDict()
        self._lock = threading.Lock()
        self._evicted = 0

    def record(self, user_agent: str | None) -> TallyUpdate:
        """Count one request from the given user agent.

        Args:
            user_agent: Exact User-Agent header value (None counts as "").

        Returns:
            TallyUpdate with the new count.
        """
        key = user_agent or ""
        with self._lock:
            is_new = key not in self._counts
            if is_new and len(self._counts) >= self._max_entries:
                self._counts.popitem(last=False)
                self._evicted += 1
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count
            self._counts.move_to_end(key)
        return TallyUpdate(count=count, is_new=is_new)

    def snapshot(self) -> dict[str, int]:
        """Return a copy of the current counts."""
        with self._lock:
            return dict(self._counts)

    def stats(self) -> TallyStats:
        """Return unique/total aggregates."""
        with self._lock:
            return TallyStats(
                unique=len(self._counts),
                total=sum(self._counts.values()),
                evicted=self._evicted,
            )
