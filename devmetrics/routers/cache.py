# devmetrics/routers/cache.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.cache import TTLCache
from ..deps import get_cache
from ..schemas.common import CacheCleared, CacheStats

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cache", tags=["cache"])


@router.get("", response_model=CacheStats, summary="Keys currently held in the response cache")
def cache_stats(cache: TTLCache = Depends(get_cache)):
    keys = sorted(cache.keys())
    return CacheStats(size=len(keys), keys=keys)


@router.delete(
    "",
    response_model=CacheCleared,
    summary="Drop cached responses",
    description="No parameters clears everything; `key` drops one entry; `prefix` drops a namespace.",
)
def cache_clear(
    key: Optional[str] = Query(None, description="Exact cache key"),
    prefix: Optional[str] = Query(None, description="Key prefix, e.g. 'stats:'"),
    cache: TTLCache = Depends(get_cache),
):
    if key is not None and prefix is not None:
        raise HTTPException(status_code=422, detail="Provide key OR prefix, not both.")

    before = len(cache)
    if prefix is not None:
        cleared = cache.delete_prefix(prefix)
    else:
        cache.clear(key)
        cleared = before - len(cache)
    log.info("cache cleared %d entries (key=%s prefix=%s)", cleared, key, prefix)
    return CacheCleared(cleared=cleared, size=len(cache))
