"""
Statistics service: engagement counters owned by each article.

``view`` is advanced by ``catalog.counters.view_counter`` on reads.
``enjoy`` and ``stored`` are advanced here by explicit accumulation
calls.  Accumulation is a single ``UPDATE ... SET enjoy = enjoy + :delta``
so concurrent calls on the same record add up instead of overwriting
each other.
"""
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.exceptions import NotFoundError
from catalog.models import ArticleStatistics
from catalog.schemas import StatisticsAccumulate
from catalog.services.overview import statistics_to_dict

logger = logging.getLogger(__name__)

ACCUMULATED_FIELDS = ("enjoy", "stored")


async def _load(db: AsyncSession, statistics_id: int) -> ArticleStatistics:
    result = await db.execute(
        select(ArticleStatistics)
        .where(ArticleStatistics.id == statistics_id)
        .execution_options(populate_existing=True)
    )
    statistics = result.scalar_one_or_none()
    if statistics is None:
        raise NotFoundError("ArticleStatistics", statistics_id)
    return statistics


async def get_statistics(db: AsyncSession, statistics_id: int) -> dict:
    """Raises NotFoundError when the record does not exist."""
    return statistics_to_dict(await _load(db, statistics_id))


async def accumulate_statistics(
    db: AsyncSession, statistics_id: int, deltas: StatisticsAccumulate
) -> dict:
    """
    Add each provided delta to its counter and return the updated record.

    Counters without a delta are left unchanged.  Raises NotFoundError
    when the record does not exist.
    """
    values = {}
    for field in ACCUMULATED_FIELDS:
        delta = getattr(deltas, field)
        if delta is not None:
            values[field] = getattr(ArticleStatistics, field) + delta
    if values:
        result = await db.execute(
            update(ArticleStatistics)
            .where(ArticleStatistics.id == statistics_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("ArticleStatistics", statistics_id)
        logger.debug("Accumulated statistics id=%s fields=%s", statistics_id, sorted(values))

    return statistics_to_dict(await _load(db, statistics_id))
