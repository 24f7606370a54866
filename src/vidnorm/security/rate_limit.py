"""Per-client sliding-window request ceiling."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque

from fastapi import Request

from ..exceptions import RateLimitedError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SlidingWindowRateLimiter:
    """Allows ``max_requests`` per key within any ``window_seconds`` span."""

    max_requests: int
    window_seconds: float
    clock: Callable[[], float] = time.monotonic
    _hits: dict[str, Deque[float]] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _last_sweep: float = field(default=float("-inf"), init=False, repr=False)

    def check(self, key: str) -> None:
        now = self.clock()
        with self._lock:
            hits = self._hits.get(key)
            if hits is not None:
                self._prune(hits, now)
            if hits and len(hits) >= self.max_requests:
                retry_after = max(1, math.ceil(hits[0] + self.window_seconds - now))
                raise RateLimitedError(retry_after)
            if hits is None:
                hits = self._hits[key] = deque()
            hits.append(now)
            self._sweep(now)

    def remaining(self, key: str) -> int:
        now = self.clock()
        with self._lock:
            hits = self._hits.get(key)
            if hits is None:
                return self.max_requests
            self._prune(hits, now)
            if not hits:
                del self._hits[key]
                return self.max_requests
            return max(0, self.max_requests - len(hits))

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def _prune(self, hits: Deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        # Drops keys whose last hit left the window; runs at most once per window.
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        cutoff = now - self.window_seconds
        expired = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in expired:
            del self._hits[key]


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def get_rate_limiter(request: Request) -> SlidingWindowRateLimiter:
    try:
        return request.app.state.rate_limiter  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("SlidingWindowRateLimiter is not configured") from exc


async def enforce_rate_limit(request: Request) -> None:
    limiter = get_rate_limiter(request)
    key = client_key(request)
    try:
        limiter.check(key)
    except RateLimitedError:
        logger.warning(
            "rate_limit.exceeded",
            extra={"client_ip": key, "path": request.url.path},
        )
        raise
