# devmetrics/deps.py
from fastapi import Request

from devmetrics.core.cache import TTLCache
from devmetrics.core.singleflight import SingleFlight


def get_cache(request: Request) -> TTLCache:
    """The process-wide cache built at startup (tests swap in their own on app.state)."""
    return request.app.state.cache


def get_flights(request: Request) -> SingleFlight:
    """Process-wide in-flight map; pass it to cached_call so concurrent misses share a fetch."""
    return request.app.state.flights
