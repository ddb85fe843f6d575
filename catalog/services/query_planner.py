"""
Turns listing criteria into the storage-level SELECT.

Only pagination, ordering and visibility are pushed down to the database.
Author/title/requester/category predicates run afterwards in
``catalog.services.filters`` on the fetched page, so a page can hold
fewer than ``limit`` matches even when more exist further on.
"""
from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from catalog.models import Article
from catalog.schemas import ArticleSearch


def resolve_limit(requested: int | None, default_limit: int, max_limit: int) -> int:
    """Return the page size to use, falling back to *default_limit* and capped at *max_limit*."""
    limit = requested or default_limit
    return max(1, min(limit, max_limit))


def visibility_clause(all_state: bool = False):
    """Soft-deleted rows are never listed; drafts only with *all_state*."""
    clause = Article.is_deleted.is_(False)
    if not all_state:
        clause = clause & Article.is_published.is_(True)
    return clause


def build_list_query(
    criteria: ArticleSearch,
    default_limit: int,
    max_limit: int,
) -> Select:
    return (
        select(Article)
        .where(visibility_clause(criteria.all_state))
        .options(selectinload(Article.statistics), selectinload(Article.user))
        .order_by(Article.created_at.desc(), Article.id.desc())
        .offset(criteria.offset)
        .limit(resolve_limit(criteria.limit, default_limit, max_limit))
        # Counters change outside this session; always reflect storage.
        .execution_options(populate_existing=True)
    )
