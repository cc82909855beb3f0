"""
Rate Limiter Service

In-memory rate limiting with sliding window algorithm.

Each limiter owns its own store of request timestamps, keyed by client
identifier. State lives for the lifetime of the process and is not shared
between processes, so a horizontally scaled deployment enforces each
policy per instance.
"""

import logging
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)


def current_time_ms() -> int:
    """Wall clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class RateLimitPolicy:
    """
    Window length and request cap for one endpoint category.

    Attributes:
        window_ms: Sliding window length in milliseconds
        max_requests: Requests admitted per identifier within the window
    """

    window_ms: int
    max_requests: int

    def __post_init__(self):
        if self.window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {self.window_ms}")
        if self.max_requests < 1:
            raise ValueError(f"max_requests must be at least 1, got {self.max_requests}")


RATE_LIMITS: Mapping[str, RateLimitPolicy] = MappingProxyType(
    {
        "leave_creation": RateLimitPolicy(window_ms=10 * 1000, max_requests=10),
        "leave_approval": RateLimitPolicy(window_ms=60 * 1000, max_requests=30),
        "read_operations": RateLimitPolicy(window_ms=60 * 1000, max_requests=100),
        "document_upload": RateLimitPolicy(window_ms=60 * 60 * 1000, max_requests=50),
        "admin_operations": RateLimitPolicy(window_ms=60 * 1000, max_requests=200),
    }
)


def max_window_ms(policies: Iterable[RateLimitPolicy] = RATE_LIMITS.values()) -> int:
    """Longest window across the given policies, used as the sweep horizon."""
    return max(policy.window_ms for policy in policies)


@dataclass(frozen=True)
class CheckResult:
    """
    Outcome of a single rate limit check.

    Attributes:
        allowed: Whether the request is admitted
        limit: The policy's request cap
        remaining: Quota left after this request (0 when denied)
        reset_time: Epoch milliseconds at which the oldest counted request leaves the window
    """

    allowed: bool
    limit: int
    remaining: int
    reset_time: int


@dataclass(frozen=True)
class CheckOutcome:
    """Either a CheckResult or the error that prevented one."""

    result: Optional[CheckResult] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None


@dataclass
class RequestRecord:
    """Chronologically ordered request timestamps for one identifier."""

    timestamps: List[int] = field(default_factory=list)
    last_cleanup: int = 0


class RateLimitStore:
    """
    Mapping of identifier -> RequestRecord.

    Identifiers are created lazily on first check and only removed by sweep().
    """

    def __init__(self):
        self._records: Dict[str, RequestRecord] = {}

    def get_or_create(self, identifier: str, now: int) -> RequestRecord:
        record = self._records.get(identifier)
        if record is None:
            record = RequestRecord(timestamps=[], last_cleanup=now)
            self._records[identifier] = record
        return record

    def sweep(self, horizon_ms: int, now: int) -> int:
        """
        Drop timestamps older than the horizon and evict empty records.

        Args:
            horizon_ms: Retention horizon (the longest configured window)
            now: Current epoch milliseconds

        Returns:
            int: Number of identifiers removed
        """
        cutoff = now - horizon_ms
        evicted = []

        for identifier, record in self._records.items():
            record.timestamps = [ts for ts in record.timestamps if ts > cutoff]
            record.last_cleanup = now
            if not record.timestamps:
                evicted.append(identifier)

        for identifier in evicted:
            del self._records[identifier]

        return len(evicted)

    def timestamps(self, identifier: str) -> List[int]:
        record = self._records.get(identifier)
        return list(record.timestamps) if record else []

    def clear(self) -> None:
        self._records.clear()

    @property
    def size(self) -> int:
        return len(self._records)


class RateLimiter:
    """
    Sliding window rate limiter.

    Counts the requests an identifier made inside the policy's window
    ending at "now". Denied requests are not recorded and therefore do
    not consume quota.
    """

    def __init__(
        self,
        store: Optional[RateLimitStore] = None,
        clock: Callable[[], int] = current_time_ms,
    ):
        """
        Initialize rate limiter.

        Args:
            store: Backing store (a fresh one is created when omitted)
            clock: Callable returning the current time in epoch milliseconds
        """
        self.store = store if store is not None else RateLimitStore()
        self.clock = clock

    def check(self, identifier: str, policy: RateLimitPolicy) -> CheckResult:
        """
        Decide whether to admit one request for identifier under policy.

        Uses sliding window algorithm:
        1. Remove requests that fell out of this policy's window
        2. Compare the remaining count to the cap
        3. Record the request only if it is admitted

        Args:
            identifier: Client key, "user:<id>" or "ip:<address>"
            policy: Window and cap to enforce

        Returns:
            CheckResult: Admission decision with remaining quota and reset time
        """
        now = self.clock()
        cutoff = now - policy.window_ms

        record = self.store.get_or_create(identifier, now)
        record.timestamps = [ts for ts in record.timestamps if ts > cutoff]
        record.last_cleanup = now

        count = len(record.timestamps)
        if record.timestamps:
            reset_time = record.timestamps[0] + policy.window_ms
        else:
            reset_time = now + policy.window_ms

        if count < policy.max_requests:
            record.timestamps.append(now)
            return CheckResult(
                allowed=True,
                limit=policy.max_requests,
                remaining=policy.max_requests - count - 1,
                reset_time=reset_time,
            )

        return CheckResult(
            allowed=False,
            limit=policy.max_requests,
            remaining=0,
            reset_time=reset_time,
        )

    def try_check(self, identifier: str, policy: RateLimitPolicy) -> CheckOutcome:
        """Run check() and capture any failure instead of raising it."""
        try:
            return CheckOutcome(result=self.check(identifier, policy))
        except Exception as e:
            return CheckOutcome(error=e)

    def sweep(self, horizon_ms: int) -> int:
        """Evict expired timestamps across all identifiers."""
        return self.store.sweep(horizon_ms, self.clock())
