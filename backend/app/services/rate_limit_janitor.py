"""
Rate Limit Janitor

Periodically evicts expired request timestamps from a RateLimiter's store.
Uses APScheduler for the interval job so eviction happens even for
identifiers that never send another request.
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .rate_limiter import RateLimiter, max_window_ms

logger = logging.getLogger(__name__)

JOB_ID = "rate_limit_sweep"

# Sweep every 60 seconds unless configured otherwise
DEFAULT_INTERVAL_SECONDS = 60


class RateLimitJanitor:
    """
    Owns the scheduler that sweeps one limiter's store.

    The retention horizon is the longest window across all configured
    policies, so a sweep never drops a timestamp some policy still counts.
    """

    def __init__(
        self,
        limiter: RateLimiter,
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
        horizon_ms: Optional[int] = None,
    ):
        """
        Args:
            limiter: Limiter whose store gets swept
            interval_seconds: Seconds between sweeps
            horizon_ms: Retention horizon (defaults to the longest policy window)
        """
        self.limiter = limiter
        self.interval_seconds = interval_seconds
        self.horizon_ms = horizon_ms if horizon_ms is not None else max_window_ms()
        self._scheduler: Optional[AsyncIOScheduler] = None

    def sweep(self) -> int:
        """
        Run one eviction pass.

        Never raises: a failing sweep is logged and reported as zero evictions.

        Returns:
            int: Number of identifiers evicted
        """
        try:
            evicted = self.limiter.sweep(self.horizon_ms)
        except Exception:
            logger.exception("Rate limit sweep failed")
            return 0

        if evicted:
            logger.debug(
                f"Rate limit sweep evicted {evicted} identifiers, "
                f"{self.limiter.store.size} remain"
            )
        return evicted

    async def _run_sweep(self) -> None:
        # Coroutine job: executes on the event loop, never alongside a request handler
        self.sweep()

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """
        Start the sweep job.

        Safe to call multiple times - will not add duplicate jobs.
        Must be called while an asyncio event loop is running.
        """
        if self.running:
            logger.debug("Rate limit janitor already running")
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self._run_sweep,
            "interval",
            seconds=self.interval_seconds,
            id=JOB_ID,
            name="Sweep expired rate limit records",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            f"Rate limit janitor started: every {self.interval_seconds}s, "
            f"horizon {self.horizon_ms}ms"
        )

    def stop(self) -> None:
        """Stop the sweep job."""
        if self.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Rate limit janitor stopped")
        self._scheduler = None

    def status(self) -> dict:
        """
        Get janitor status for health checks.

        Returns:
            dict: Running state, next run time, interval, horizon and store size
        """
        job = self._scheduler.get_job(JOB_ID) if self._scheduler else None
        return {
            "running": self.running,
            "job_scheduled": job is not None,
            "next_run": str(job.next_run_time) if job else None,
            "interval_seconds": self.interval_seconds,
            "horizon_ms": self.horizon_ms,
            "tracked_identifiers": self.limiter.store.size,
        }
