"""
Fixed-window request rate governor.

Each caller key gets a counter and a reset time. The first request after the
reset time opens a new window with a count of 1; requests past max_requests
inside a window are rejected with the seconds left until the reset. Expired
windows are removed by a periodic background sweep.

State is per-process. All access happens on one event loop, so the
read-modify-write in check() cannot interleave.
"""
import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class RateWindow:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateDecision:
    admitted: bool
    remaining: int
    retry_after: float = 0.0

    @property
    def retry_after_seconds(self) -> int:
        """Retry-After header value: seconds until reset, rounded up."""
        return max(0, math.ceil(self.retry_after))


class RateGovernor:
    """Fixed-window limiter keyed by caller identity."""

    def __init__(
        self,
        name: str,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.name = name
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, RateWindow] = {}
        self._sweeper: Optional[asyncio.Task] = None
        self._logger = logging.getLogger(f"{__name__}.{name}")

    def check(self, key: str) -> RateDecision:
        """Count one request for key and decide whether to admit it."""
        now = self._clock()
        window = self._windows.get(key)

        if window is None or now >= window.reset_at:
            self._windows[key] = RateWindow(count=1, reset_at=now + self.window_seconds)
            return RateDecision(admitted=True, remaining=self.max_requests - 1)

        if window.count >= self.max_requests:
            retry_after = window.reset_at - now
            self._logger.warning(
                f"[RATE] [{self.name}] Rejected {key}: {window.count}/{self.max_requests}, "
                f"retry in {retry_after:.1f}s"
            )
            return RateDecision(admitted=False, remaining=0, retry_after=retry_after)

        window.count += 1
        return RateDecision(admitted=True, remaining=self.max_requests - window.count)

    def sweep(self) -> int:
        """Drop expired windows. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in expired:
            del self._windows[key]
        if expired:
            self._logger.debug(f"[RATE] [{self.name}] Swept {len(expired)} expired windows")
        return len(expired)

    @property
    def tracked_keys(self) -> int:
        return len(self._windows)

    @property
    def is_sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    async def _sweep_loop(self, interval: float):
        while True:
            try:
                await asyncio.sleep(interval)
                self.sweep()
            except asyncio.CancelledError:
                self._logger.debug(f"[RATE] [{self.name}] Sweeper cancelled")
                break
            except Exception as e:
                self._logger.error(f"[RATE] [{self.name}] Sweep failed: {e}", exc_info=True)

    def start_sweeper(self, interval: float = 60.0):
        """Start the periodic sweep on the running event loop."""
        if self.is_sweeping:
            self._logger.warning(f"[RATE] [{self.name}] Sweeper already running")
            return
        self._sweeper = asyncio.create_task(
            self._sweep_loop(interval), name=f"rate_sweeper_{self.name}"
        )

    async def stop_sweeper(self, timeout: float = 5.0):
        if self._sweeper is None:
            return
        if not self._sweeper.done():
            self._sweeper.cancel()
            await asyncio.wait([self._sweeper], timeout=timeout)
        self._sweeper = None
