from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import get_db
from app.services.plant_service import PlantRepository, SqlPlantRepository
from app.services.scheduling.cache import ScheduleCache
from app.services.scheduling.service import ScheduleService


async def get_plant_repository(db: AsyncSession = Depends(get_db)) -> PlantRepository:
    return SqlPlantRepository(db)


def get_schedule_cache(request: Request) -> ScheduleCache:
    return request.app.state.schedule_cache


async def get_schedule_service(
    plants: Annotated[PlantRepository, Depends(get_plant_repository)],
    cache: Annotated[ScheduleCache, Depends(get_schedule_cache)],
) -> ScheduleService:
    return ScheduleService(plants, cache, max_horizon_days=settings.MAX_SCHEDULE_HORIZON_DAYS)


ScheduleCacheDep = Annotated[ScheduleCache, Depends(get_schedule_cache)]
ScheduleServiceDep = Annotated[ScheduleService, Depends(get_schedule_service)]
