"""Interpret GitHub throttling responses and sleep before a retry.

The server sets no request budget of its own; it only reacts to the host:
- 429 with Retry-After: wait that many seconds.
- 403 with X-RateLimit-Remaining == 0: wait until X-RateLimit-Reset.
Every wait is capped at `max_sleep_seconds`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Mapping, Optional

import httpx

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, *, max_sleep_seconds: int = 60) -> None:
        self._max_sleep_seconds = max(0, int(max_sleep_seconds))

    def retry_delay(self, response: httpx.Response) -> Optional[int]:
        """Seconds to wait before retrying `response`, or None if it isn't throttled."""
        if response.status_code == 429:
            return _int_header(response.headers, "Retry-After")

        if response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
            reset = _int_header(response.headers, "X-RateLimit-Reset")
            if reset is not None:
                return max(0, reset - int(time.time())) + 1

        return None

    async def maybe_sleep_and_retry(self, response: httpx.Response) -> bool:
        # True when the caller should send the request again
        delay = self.retry_delay(response)
        if delay is None:
            return False

        bounded = min(delay, self._max_sleep_seconds)
        logger.info("GitHub throttled request (%s), retrying in %ss", response.status_code, bounded)
        await asyncio.sleep(bounded)
        return True


def _int_header(headers: Mapping[str, str], name: str) -> Optional[int]:
    value = (headers.get(name) or "").strip()
    if not value.isdigit():
        return None
    return int(value)
