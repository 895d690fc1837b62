from fastapi import APIRouter, HTTPException

from app.core.deps import ScheduleCacheDep, ScheduleServiceDep
from app.core.exceptions import PlantNotFoundError
from app.schemas.schedule import (
    CacheStatsRead,
    NextDueRead,
    NextDueRequest,
    PriorityRead,
    PriorityRequest,
    ScheduleEntry,
    ScheduleRequest,
)

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.post("/generate", response_model=list[ScheduleEntry])
async def generate_schedule(data: ScheduleRequest, service: ScheduleServiceDep):
    try:
        return await service.generate_schedule(data.plant_id, data.horizon_days, data.environment)
    except PlantNotFoundError:
        raise HTTPException(status_code=404, detail="Plant not found")


@router.post("/priority", response_model=PriorityRead)
async def score_priority(data: PriorityRequest, service: ScheduleServiceDep):
    priority = service.score_task_priority(data.task_type, data.due_date, data.environment)
    return PriorityRead(task_type=data.task_type, due_date=data.due_date, priority=priority)


@router.post("/next-due", response_model=NextDueRead)
async def next_due(data: NextDueRequest, service: ScheduleServiceDep):
    try:
        due_date = await service.next_maintenance_date(data.plant_id, data.task_type, data.environment)
    except PlantNotFoundError:
        raise HTTPException(status_code=404, detail="Plant not found")
    return NextDueRead(
        plant_id=data.plant_id,
        task_type=data.task_type,
        due_date=due_date,
        weather_dependent=data.task_type.weather_dependent,
    )


@router.get("/cache/stats", response_model=CacheStatsRead)
async def cache_stats(cache: ScheduleCacheDep):
    return cache.stats()
