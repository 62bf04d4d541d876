"""Primary rate-limit tracking from GitHub response headers."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Remember the last seen quota and pause before it runs out.

    ``update`` is fed every response; ``wait_if_needed`` is awaited before
    every request and sleeps until the reset time once the remaining quota
    drops to ``threshold`` or below.
    """

    def __init__(self, threshold: int = 10) -> None:
        self.threshold = threshold
        self._remaining: int | None = None
        self._reset_at: float | None = None

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            try:
                self._remaining = int(remaining)
            except ValueError:
                logger.debug("Ignoring malformed X-RateLimit-Remaining: %r", remaining)
        if reset is not None:
            try:
                self._reset_at = float(reset)
            except ValueError:
                logger.debug("Ignoring malformed X-RateLimit-Reset: %r", reset)

    async def wait_if_needed(self) -> None:
        if self._remaining is None or self._reset_at is None:
            return
        if self._remaining > self.threshold:
            return
        wait = max(0.0, self._reset_at - time.time()) + 1
        logger.warning(
            "Rate limit nearly exhausted (%d remaining), sleeping %.0fs until reset",
            self._remaining,
            wait,
        )
        await asyncio.sleep(wait)
        self._remaining = None


def retry_after_seconds(response: httpx.Response) -> float | None:
    """Seconds to wait when ``response`` is a primary or secondary rate-limit rejection."""
    if response.status_code not in (403, 429):
        return None
    retry_after = response.headers.get("Retry-After")
    if retry_after is not None:
        try:
            return max(0.0, float(retry_after))
        except ValueError:
            return 60.0
    if response.headers.get("X-RateLimit-Remaining") == "0":
        reset = response.headers.get("X-RateLimit-Reset")
        try:
            return max(0.0, float(reset) - time.time()) + 1 if reset else 60.0
        except ValueError:
            return 60.0
    return None
