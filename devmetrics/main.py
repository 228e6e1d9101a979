# devmetrics/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .core.cache import CacheSweeper, TTLCache
from .core.config import get_settings
from .core.logging import configure_logging
from .core.singleflight import SingleFlight
from .routers import cache, health

settings = get_settings()
configure_logging(settings.log_level)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    sweeper = CacheSweeper(app.state.cache, interval=settings.cache_sweep_interval_seconds)
    sweeper.start()
    log.info("cache sweeper running every %gs", settings.cache_sweep_interval_seconds)
    try:
        yield
    finally:
        await sweeper.stop()


app = FastAPI(title="Engineering Metrics API", version="0.1.0", lifespan=lifespan)

# one shared instance each per process, handed out by deps.get_cache / deps.get_flights
app.state.cache = TTLCache(
    default_ttl=settings.cache_default_ttl_seconds,
    max_items=settings.cache_max_items,
)
app.state.flights = SingleFlight()

# Routers
app.include_router(health.router)
app.include_router(cache.router)

@app.get("/")
def root():
    return {"service": "devmetrics-api"}
