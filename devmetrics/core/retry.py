# devmetrics/core/retry.py
from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx

from .errors import RateLimitError, parse_retry_after

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 2.0
DEFAULT_RETRY_AFTER = 2.0


def is_rate_limited(exc: BaseException) -> bool:
    if isinstance(exc, RateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code == 429
    return getattr(exc, "status", None) == 429


def retry_after_seconds(exc: BaseException, default: float = DEFAULT_RETRY_AFTER) -> float:
    """Server hint carried by a 429 failure, or `default` when absent or garbage."""
    hint: Optional[float] = None
    if isinstance(exc, httpx.HTTPStatusError):
        hint = parse_retry_after(exc.response.headers.get("retry-after"))
    else:
        raw: Any = getattr(exc, "retry_after_seconds", None)
        if isinstance(raw, (int, float)) and not isinstance(raw, bool) and math.isfinite(raw) and raw >= 0:
            hint = float(raw)
        elif isinstance(raw, str):
            hint = parse_retry_after(raw)
    return default if hint is None else hint


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    *,
    base_delay: float = DEFAULT_BASE_DELAY,
    default_retry_after: float = DEFAULT_RETRY_AFTER,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """
    Run `operation`, retrying only when it is rate limited (HTTP 429).

    Between attempts waits max(server hint, (attempt + 1) * base_delay).
    Anything that is not a 429 (timeouts included) is raised on the spot.
    At most `max_retries + 1` calls are made; when they are all throttled
    the last 429 error is raised.
    """
    last_exc: Optional[BaseException] = None
    for attempt in range(max_retries + 1):
        try:
            return await operation()
        except Exception as e:
            if not is_rate_limited(e):
                raise
            last_exc = e
            if attempt == max_retries:
                break
            wait = max(retry_after_seconds(e, default_retry_after), (attempt + 1) * base_delay)
            log.info("rate limited (429), waiting %.1fs before retry %d/%d", wait, attempt + 1, max_retries)
            await sleep(wait)
    assert last_exc is not None
    raise last_exc
