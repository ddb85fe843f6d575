"""
Article service: business logic for the Article aggregate.

Design notes
------------
- Listings run a fixed pipeline: the query planner fetches one page of
  visible articles, the predicate filters narrow that page in memory, and
  the result is optionally projected to overviews and ranked by a
  statistics field.  Filtering after pagination means a page can come
  back shorter than ``limit``.
- Single reads schedule their view increment on the deferred
  ``view_counter`` and return the snapshot taken before it, so the
  reported view count trails the stored one by one.
- ``statistics`` and ``user`` are loaded with ``selectinload``; every
  relationship is ``lazy="noload"`` so nothing is fetched implicitly.
- Only the series overview is cached.  Listings and detail reads carry
  live counters and always hit the database.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
- Writes invalidate the series cache only after their transaction
  commits, so a concurrent read cannot re-cache pre-write counts.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from catalog import categories
from catalog.cache import cache
from catalog.config import settings
from catalog.counters import view_counter
from catalog.database import on_commit
from catalog.exceptions import NotFoundError
from catalog.models import Article, ArticleStatistics
from catalog.schemas import ArticleCreate, ArticleSearch, ArticleUpdate
from catalog.services.filters import apply_filters
from catalog.services.overview import project_overview, statistics_to_dict
from catalog.services.query_planner import build_list_query, visibility_clause
from catalog.services.ranking import rank_by

logger = logging.getLogger(__name__)


def now_formatted() -> str:
    """Current time rendered with the configured date format."""
    return datetime.now(timezone.utc).strftime(settings.DATE_FORMAT)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _article_to_dict(article: Article) -> dict:
    """Serialise an Article ORM instance to a plain dict."""
    return {
        "id": article.id,
        "title": article.title,
        "subtitle": article.subtitle,
        "author": article.author,
        "content": article.content,
        "category": categories.decode(article.category),
        "thumbnail": article.thumbnail,
        "is_published": article.is_published,
        "is_original": article.is_original,
        "created_at": article.created_at,
        "updated_at": article.updated_at,
        "user_id": article.user_id,
        "statistics": statistics_to_dict(article.statistics),
    }


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def list_articles(db: AsyncSession, criteria: ArticleSearch) -> list[dict]:
    """
    Return the visible articles matching *criteria*, newest first unless
    a rank key reorders them.

    Items are overview dicts when ``criteria.is_overview`` is set and full
    article dicts otherwise.
    """
    stmt = build_list_query(
        criteria,
        default_limit=settings.DEFAULT_LIST_LIMIT,
        max_limit=settings.MAX_LIST_LIMIT,
    )
    result = await db.execute(stmt)
    page = result.scalars().all()

    matched = apply_filters(page, criteria)
    project = project_overview if criteria.is_overview else _article_to_dict
    items = [project(article) for article in matched]
    return list(rank_by(items, criteria.rank))


async def get_series_overview(db: AsyncSession, series: str) -> dict:
    """
    Count the published articles tagged *series* and how many of them
    are original content.
    """
    cached = await cache.get_series(series)
    if cached is not None:
        return cached

    result = await db.execute(select(Article).where(visibility_clause(all_state=False)))
    tagged = [a for a in result.scalars().all() if series in categories.decode(a.category)]
    overview = {
        "total": len(tagged),
        "original": sum(1 for a in tagged if a.is_original),
    }
    await cache.set_series(series, overview)
    return overview


async def get_article(db: AsyncSession, article_id: int) -> dict:
    """
    Return the full dict for *article_id* and schedule a view increment.

    The increment is queued, not awaited: the returned ``statistics.view``
    is the value read before this call's own increment.

    Raises NotFoundError when no live article has that id.
    """
    q = (
        select(Article)
        .where(Article.id == article_id, Article.is_deleted.is_(False))
        .options(selectinload(Article.statistics), selectinload(Article.user))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    article = result.scalar_one_or_none()
    if article is None:
        raise NotFoundError("Article", article_id)

    data = _article_to_dict(article)
    view_counter.schedule(article.statistics_id)
    return data


async def create_article(db: AsyncSession, data: ArticleCreate) -> int:
    """
    Persist a new article together with its zeroed statistics record and
    return the new id.
    """
    article = Article(
        title=data.title.strip(),
        subtitle=data.subtitle.strip(),
        author=data.author.strip(),
        content=data.content,
        category=categories.normalize(data.category),
        thumbnail=data.thumbnail,
        is_published=data.is_published,
        is_original=data.is_original,
        user_id=data.user_id,
        created_at=now_formatted(),
        statistics=ArticleStatistics(view=0, enjoy=0, stored=0),
    )
    db.add(article)
    await db.flush()

    on_commit(db, cache.invalidate_series)
    logger.info("Created article id=%s title=%r", article.id, article.title)
    return article.id


async def update_article(db: AsyncSession, article_id: int, data: ArticleUpdate) -> bool:
    """
    Apply the fields present in *data* and stamp ``updated_at``.

    Returns whether a row was affected.
    """
    values = data.model_dump(exclude_unset=True, exclude_none=True)
    values["updated_at"] = now_formatted()

    result = await db.execute(
        update(Article).where(Article.id == article_id).values(**values)
    )
    affected = result.rowcount > 0
    if affected:
        on_commit(db, cache.invalidate_series)
        logger.info("Updated article id=%s fields=%s", article_id, sorted(values))
    return affected


async def delete_article(db: AsyncSession, article_id: int) -> bool:
    """
    Soft-delete *article_id*; the row stays in storage.

    Returns whether a row was affected.
    """
    result = await db.execute(
        update(Article).where(Article.id == article_id).values(is_deleted=True)
    )
    affected = result.rowcount > 0
    if affected:
        on_commit(db, cache.invalidate_series)
        logger.info("Soft-deleted article id=%s", article_id)
    return affected
