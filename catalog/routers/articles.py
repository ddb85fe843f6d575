from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from catalog.config import settings
from catalog.database import get_db
from catalog.dependencies import SearchParams
from catalog.schemas import ArticleCreate, ArticleCreated, ArticleUpdate, SeriesOverview
from catalog.services import article_service

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])


def mutation_result(affected: bool, key: str):
    if settings.MUTATION_RESULT_SHAPE == "bool":
        return affected
    return {key: affected}


@router.get("")
async def list_articles(params: SearchParams = Depends(), db: AsyncSession = Depends(get_db)):
    return await article_service.list_articles(db, params.criteria)

@router.get("/series", response_model=SeriesOverview)
async def get_series_overview(series: str, db: AsyncSession = Depends(get_db)):
    return await article_service.get_series_overview(db, series)

@router.get("/{article_id}")
async def get_article(article_id: int, db: AsyncSession = Depends(get_db)):
    return await article_service.get_article(db, article_id)

@router.post("", status_code=201, response_model=ArticleCreated)
async def create_article(data: ArticleCreate, db: AsyncSession = Depends(get_db)):
    return {"id": await article_service.create_article(db, data)}

@router.put("/{article_id}")
async def update_article(article_id: int, data: ArticleUpdate, db: AsyncSession = Depends(get_db)):
    updated = await article_service.update_article(db, article_id, data)
    return mutation_result(updated, "is_updated")

@router.delete("/{article_id}")
async def delete_article(article_id: int, db: AsyncSession = Depends(get_db)):
    deleted = await article_service.delete_article(db, article_id)
    return mutation_result(deleted, "is_deleted")
