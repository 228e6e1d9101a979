import asyncio

import pytest

from devmetrics.core.cache import TTLCache
from devmetrics.core.singleflight import SingleFlight
from devmetrics.schemas.common import DateRange
from devmetrics.services.aggregate import gather_sections
from devmetrics.services.cached import cached_call, make_cache_key


def test_cache_key_is_stable_and_compact():
    assert make_cache_key("stats") == "stats:null"
    assert make_cache_key("stats", {"end": None, "start": "2024-01-01"}) == 'stats:{"end":null,"start":"2024-01-01"}'
    assert make_cache_key("stats", {"b": 1, "a": 2}) == make_cache_key("stats", {"a": 2, "b": 1})
    assert make_cache_key("stats", DateRange(start="2024-01-01")) == 'stats:{"end":null,"start":"2024-01-01"}'


@pytest.mark.asyncio
async def test_cached_call_miss_then_hit():
    cache = TTLCache()
    calls = 0

    async def fetch():
        nonlocal calls
        calls += 1
        return []  # empty result is still a result

    assert await cached_call(cache, "gitlab:mrs", fetch, ttl=120) == ([], False)
    assert await cached_call(cache, "gitlab:mrs", fetch, ttl=120) == ([], True)
    assert calls == 1


@pytest.mark.asyncio
async def test_cached_call_does_not_store_failures():
    cache = TTLCache()

    async def fetch():
        raise RuntimeError("jira down")

    with pytest.raises(RuntimeError):
        await cached_call(cache, "jira:sprints", fetch)
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_cached_call_with_flights_dedupes_concurrent_misses():
    cache = TTLCache()
    flights = SingleFlight()
    calls = 0

    async def fetch():
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return {"clicks": 10}

    results = await asyncio.gather(*(cached_call(cache, "adobe:clicks", fetch, flights=flights) for _ in range(4)))
    assert calls == 1
    assert [v for v, _ in results] == [{"clicks": 10}] * 4
    assert cache.get("adobe:clicks") == {"clicks": 10}


@pytest.mark.asyncio
async def test_gather_sections_partial_failure():
    async def github():
        return {"prs": 3}

    async def gitlab():
        raise RuntimeError("GitLab authentication failed. Check credentials.")

    async def jira():
        return {"issues": 0}

    out = await gather_sections({"github": github(), "gitlab": gitlab(), "jira": jira()})
    assert out["github"] == {"prs": 3}
    assert out["gitlab"] == {"error": "GitLab authentication failed. Check credentials."}
    assert out["jira"] == {"issues": 0}
    assert out["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_gather_sections_timeout_is_a_soft_error():
    async def slow():
        await asyncio.sleep(5)

    async def quick():
        return 1

    out = await gather_sections({"adobe": slow(), "github": quick()}, timeout=0.01)
    assert out["github"] == 1
    assert out["adobe"] == {"error": "adobe timed out after 0.01s"}


@pytest.mark.asyncio
async def test_gather_sections_rejects_reserved_timestamp_name():
    async def jira():
        return {"issues": 1}

    with pytest.raises(ValueError, match="reserved"):
        await gather_sections({"jira": jira(), "timestamp": jira()})
