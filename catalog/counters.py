"""
Deferred view counter.

Single-article reads must not wait for their view increment.  Instead of
firing an unawaited UPDATE, reads enqueue the statistics id here and a
worker task applies ``view = view + 1`` in its own session, retrying
transient failures with exponential backoff.

Consistency contract: increments are eventually applied (at-least-once
within the process lifetime).  A read therefore reports a view count one
lower than the counter holds once its own increment lands.  Increments
still queued when the process dies are lost; increments that exhaust
their retries, or arrive while ``max_pending`` are already queued, are
logged and counted in ``stats["dropped"]``.
"""
import asyncio
import contextlib
import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from catalog.config import settings
from catalog.database import async_session
from catalog.models import ArticleStatistics

logger = logging.getLogger(__name__)


class ViewCounter:
    def __init__(
        self,
        session_factory,
        max_attempts: int = 3,
        retry_delay: float = 0.2,
        max_pending: int = 10000,
    ) -> None:
        # Tests swap this for the test session factory.
        self.session_factory = session_factory
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.max_pending = max_pending
        self._queue: asyncio.Queue[int] | None = None
        self._worker: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._applied = 0
        self._dropped = 0

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def schedule(self, statistics_id: int) -> None:
        """Queue one view increment and return immediately."""
        try:
            self._ensure_worker().put_nowait(statistics_id)
        except asyncio.QueueFull:
            self._dropped += 1
            logger.warning(
                "View increment queue full (%d pending), dropping increment for statistics %s",
                self.max_pending, statistics_id,
            )

    def _ensure_worker(self) -> asyncio.Queue:
        loop = asyncio.get_running_loop()
        if self._loop is not loop or self._worker is None or self._worker.done():
            # A queue belongs to one event loop; start over on a new loop.
            if self._loop is not loop or self._queue is None:
                self._queue = asyncio.Queue(maxsize=self.max_pending)
            self._loop = loop
            self._worker = loop.create_task(self._run(self._queue))
        return self._queue

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------

    async def _run(self, queue: asyncio.Queue) -> None:
        while True:
            statistics_id = await queue.get()
            try:
                await self._apply(statistics_id)
            except Exception:
                self._dropped += 1
                logger.exception("Unexpected error applying view increment for statistics %s", statistics_id)
            finally:
                queue.task_done()

    async def _apply(self, statistics_id: int) -> None:
        for attempt in range(1, self.max_attempts + 1):
            try:
                async with self.session_factory() as session:
                    await session.execute(
                        update(ArticleStatistics)
                        .where(ArticleStatistics.id == statistics_id)
                        .values(view=ArticleStatistics.view + 1)
                    )
                    await session.commit()
            # asyncpg surfaces a refused connection as a bare OSError.
            except (SQLAlchemyError, OSError) as exc:
                if attempt == self.max_attempts:
                    self._dropped += 1
                    logger.error(
                        "Dropping view increment for statistics %s after %d attempts: %s",
                        statistics_id, attempt, exc,
                    )
                    return
                delay = self.retry_delay * (2 ** (attempt - 1))
                logger.warning(
                    "View increment for statistics %s failed (attempt %d/%d), retrying in %.2fs: %s",
                    statistics_id, attempt, self.max_attempts, delay, exc,
                )
                await asyncio.sleep(delay)
            else:
                self._applied += 1
                return

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def drain(self) -> None:
        """Wait until every queued increment has been applied or dropped."""
        if self._queue is None or self._loop is not asyncio.get_running_loop():
            return
        if self._worker is None or self._worker.done():
            return
        await self._queue.join()

    async def stop(self) -> None:
        """Drain pending increments, then cancel the worker."""
        await self.drain()
        worker, self._worker = self._worker, None
        if worker is not None and not worker.done() and self._loop is asyncio.get_running_loop():
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker
        self._queue = None
        self._loop = None

    @property
    def stats(self) -> dict:
        return {
            "pending": self._queue.qsize() if self._queue is not None else 0,
            "applied": self._applied,
            "dropped": self._dropped,
        }


# Module-level singleton shared across all request handlers.
view_counter = ViewCounter(
    async_session,
    max_attempts=settings.VIEW_INCREMENT_MAX_ATTEMPTS,
    retry_delay=settings.VIEW_INCREMENT_RETRY_DELAY,
    max_pending=settings.VIEW_INCREMENT_QUEUE_SIZE,
)
