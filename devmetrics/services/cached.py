# devmetrics/services/cached.py
from __future__ import annotations

import json
import logging
import time
from typing import Any, Awaitable, Callable, Optional, Tuple

from ..core.cache import TTLCache
from ..core.singleflight import SingleFlight

log = logging.getLogger(__name__)

_MISS = object()


def _jsonable(params: Any) -> Any:
    if hasattr(params, "model_dump"):
        return params.model_dump()
    return params


def make_cache_key(namespace: str, params: Any = None) -> str:
    """`<namespace>:<compact JSON of params, keys sorted>`."""
    body = json.dumps(_jsonable(params), sort_keys=True, separators=(",", ":"), default=str)
    return f"{namespace}:{body}"


async def cached_call(
    cache: TTLCache,
    key: str,
    fetch: Callable[[], Awaitable[Any]],
    ttl: Optional[float] = None,
    flights: Optional[SingleFlight] = None,
) -> Tuple[Any, bool]:
    """
    Memoize an expensive remote call: serve from cache, else fetch and store.

    Returns (value, hit). With `flights`, concurrent misses on the same key
    share one fetch. A failed fetch stores nothing and propagates.
    """
    value = cache.get(key, _MISS)
    if value is not _MISS:
        return value, True

    started = time.monotonic()
    if flights is not None:
        value = await flights.do(key, fetch)
    else:
        value = await fetch()
    cache.set(key, value, ttl)
    log.info("%s fetched in %.1fs", key, time.monotonic() - started)
    return value, False
