from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict


class SingleFlight:
    """
    At most one in-flight call per key.

    Callers arriving while a call for the same key is still running share
    its result (or its exception). The slot is freed as soon as the call
    settles, so the next caller starts fresh work.
    """
    def __init__(self) -> None:
        self._inflight: Dict[str, asyncio.Future] = {}

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        fut = self._inflight.get(key)
        if fut is None:
            fut = asyncio.ensure_future(fn())
            self._inflight[key] = fut
            fut.add_done_callback(lambda f, k=key: self._forget(k, f))
        # shield: one impatient caller must not cancel everyone else's fetch
        return await asyncio.shield(fut)

    def _forget(self, key: str, fut: asyncio.Future) -> None:
        if self._inflight.get(key) is fut:
            del self._inflight[key]
        if not fut.cancelled():
            # mark as retrieved when every waiter went away
            fut.exception()

    def __contains__(self, key: object) -> bool:
        return key in self._inflight

    def __len__(self) -> int:
        return len(self._inflight)
