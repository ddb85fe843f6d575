import json
import logging

import redis.asyncio as redis

from catalog.config import settings

logger = logging.getLogger(__name__)

SERIES_KEY_PREFIX = "articles:series:"


class SeriesCache:
    """
    Redis store for series overviews ({"total", "original"} per tag).

    Fails open: with no connection, or on a Redis error, lookups miss and
    stores are skipped, so the overview is recomputed from the database.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits = 0
        self._misses = 0

    async def connect(self) -> None:
        self._redis = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", settings.REDIS_URL)
        except Exception as exc:  # pragma: no cover
            logger.warning("Redis ping failed, series cache disabled: %s", exc)

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    @staticmethod
    def series_key(series: str) -> str:
        return f"{SERIES_KEY_PREFIX}{series}"

    async def get_series(self, series: str) -> dict | None:
        data = None
        if self._redis:
            try:
                data = await self._redis.get(self.series_key(series))
            except Exception as exc:
                logger.debug("Series cache read failed for %r: %s", series, exc)
        if data is None:
            self._misses += 1
            return None
        self._hits += 1
        return json.loads(data)

    async def set_series(self, series: str, overview: dict) -> None:
        if not self._redis:
            return
        try:
            await self._redis.set(
                self.series_key(series),
                json.dumps(overview),
                ex=settings.CACHE_TTL_SERIES,
            )
        except Exception as exc:
            logger.debug("Series cache write failed for %r: %s", series, exc)

    async def invalidate_series(self) -> None:
        """Drop every series overview; any article write can change each count."""
        if not self._redis:
            return
        try:
            keys = [key async for key in self._redis.scan_iter(match=f"{SERIES_KEY_PREFIX}*")]
            if keys:
                await self._redis.delete(*keys)
                logger.debug("Invalidated %d series overview(s)", len(keys))
        except Exception as exc:
            logger.warning("Series cache invalidation failed: %s", exc)

    @property
    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


# Module-level singleton shared across all request handlers.
cache = SeriesCache()
