from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from catalog.database import get_db
from catalog.schemas import StatisticsAccumulate, StatisticsResponse
from catalog.services import statistics_service

router = APIRouter(prefix="/api/v1/statistics", tags=["statistics"])

@router.get("/{statistics_id}", response_model=StatisticsResponse)
async def get_statistics(statistics_id: int, db: AsyncSession = Depends(get_db)):
    return await statistics_service.get_statistics(db, statistics_id)

@router.put("/{statistics_id}", response_model=StatisticsResponse)
async def accumulate_statistics(
    statistics_id: int, data: StatisticsAccumulate, db: AsyncSession = Depends(get_db)
):
    return await statistics_service.accumulate_statistics(db, statistics_id, data)
