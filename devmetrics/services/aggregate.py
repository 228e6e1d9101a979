# devmetrics/services/aggregate.py
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Dict, Mapping, Optional

from ..core.errors import soft_error

log = logging.getLogger(__name__)

TIMESTAMP_KEY = "timestamp"


async def _bounded(name: str, aw: Awaitable[Any], timeout: Optional[float]) -> Any:
    if timeout is None:
        return await aw
    try:
        return await asyncio.wait_for(aw, timeout)
    except asyncio.TimeoutError:
        raise TimeoutError(f"{name} timed out after {timeout:g}s") from None


async def gather_sections(
    sections: Mapping[str, Awaitable[Any]],
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Run every section concurrently; a failing one becomes {"error": msg}
    and never takes the others down. Adds an ISO `timestamp`, so that name
    is reserved and rejected as a section name.
    """
    if TIMESTAMP_KEY in sections:
        for aw in sections.values():
            if asyncio.iscoroutine(aw):
                aw.close()
        raise ValueError(f"'{TIMESTAMP_KEY}' is reserved and cannot be a section name")
    names = list(sections)
    results = await asyncio.gather(
        *(_bounded(n, sections[n], timeout) for n in names),
        return_exceptions=True,
    )
    out: Dict[str, Any] = {}
    for name, res in zip(names, results):
        if isinstance(res, asyncio.CancelledError):
            raise res
        if isinstance(res, Exception):
            log.warning("section %s failed: %s", name, res)
            out[name] = soft_error(res)
        else:
            out[name] = res
    out[TIMESTAMP_KEY] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return out
