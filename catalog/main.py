import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog import __version__
from catalog.cache import cache
from catalog.config import settings
from catalog.counters import view_counter
from catalog.exceptions import NotFoundError
from catalog.middleware import TimingMiddleware
from catalog.routers import articles, statistics, users

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        await cache.connect()
    except Exception as exc:
        logger.warning("Starting without Redis: %s", exc)
    yield
    # Shutdown: land queued view increments before the loop goes away
    await view_counter.stop()
    await cache.disconnect()

app = FastAPI(
    title="Article Catalog API",
    description="Article listings, overviews and engagement counters",
    version=__version__,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(articles.router)
app.include_router(statistics.router)
app.include_router(users.router)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.detail})


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "version": __version__,
        "cache": cache.stats,
        "view_counter": view_counter.stats,
    }
