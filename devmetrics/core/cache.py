from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

log = logging.getLogger(__name__)


class TTLCache:
    """
    Process-local cache with a per-entry TTL.

    Entries are (expires_at, value) pairs. Reads drop stale entries lazily;
    `sweep()` drops everything that expired so keys nobody reads again do
    not pile up. The table is lock-guarded because sync FastAPI handlers run
    on a thread pool.
    """
    def __init__(
        self,
        default_ttl: float = 60.0,
        max_items: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._ttl = default_ttl
        self._max = max_items
        self._clock = clock
        self._store: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return default
            exp, val = item
            if self._clock() >= exp:
                del self._store[key]
                return default
            return val

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self._ttl if ttl is None else ttl
        with self._lock:
            if self._max and key not in self._store and len(self._store) >= self._max:
                # drop whichever entry expires first
                soonest = min(self._store.items(), key=lambda p: p[1][0])[0]
                self._store.pop(soonest, None)
            self._store[key] = (self._clock() + ttl, value)

    def clear(self, key: Optional[str] = None) -> None:
        with self._lock:
            if key is None:
                self._store.clear()
            else:
                self._store.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [k for k in self._store if k.startswith(prefix)]
            for k in doomed:
                del self._store[k]
        return len(doomed)

    def sweep(self) -> int:
        """Remove every expired entry. Returns how many were dropped."""
        now = self._clock()
        with self._lock:
            doomed = [k for k, (exp, _) in self._store.items() if exp <= now]
            for k in doomed:
                del self._store[k]
        return len(doomed)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._store)

    def __len__(self) -> int:
        return len(self._store)


class CacheSweeper:
    """Runs `cache.sweep()` on a fixed interval inside the event loop."""
    def __init__(self, cache: TTLCache, interval: float = 60.0):
        self.cache = cache
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            removed = self.cache.sweep()
            if removed:
                log.debug("cache sweep removed %d expired entries (%d left)", removed, len(self.cache))
