from fastapi import Query

from catalog.config import settings
from catalog.schemas import ArticleSearch, RankKey


class SearchParams:
    """
    Reusable FastAPI dependency that parses listing query parameters.

    Usage in a router::

        @router.get("/articles")
        async def list_articles(params: SearchParams = Depends()):
            ...

    Every filter is optional; an omitted parameter does not constrain the
    result.  ``category`` may be repeated (``?category=go&category=rust``).
    ``limit`` is clamped to ``settings.MAX_LIST_LIMIT`` by the query planner,
    and defaults to ``settings.DEFAULT_LIST_LIMIT`` when omitted.
    """

    def __init__(
        self,
        offset: int = Query(0, ge=0, description="Number of articles to skip."),
        limit: int | None = Query(
            None,
            ge=1,
            description=f"Page size (default {settings.DEFAULT_LIST_LIMIT}).",
        ),
        author: str | None = Query(None, description="Case-sensitive author substring."),
        title: str | None = Query(None, description="Case-sensitive title substring."),
        category: list[str] | None = Query(
            None, description="Keep articles sharing at least one of these tags."
        ),
        user_id: int | None = Query(None, description="Owning user id."),
        is_overview: bool = Query(False, description="Return overview projections."),
        rank: RankKey | None = Query(None, description="Statistics field to rank by."),
        all_state: bool = Query(False, description="Include unpublished drafts."),
    ) -> None:
        self.criteria = ArticleSearch(
            offset=offset,
            limit=limit,
            author=author,
            title=title,
            category=category,
            user_id=user_id,
            is_overview=is_overview,
            rank=rank,
            all_state=all_state,
        )
