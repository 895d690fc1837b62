"""
Schedule service: the entry point the API layer calls.

generate_schedule checks the cache first and only resolves the plant on a
miss, so a cache hit never touches the plant repository.
"""
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.exceptions import PlantNotFoundError
from app.schemas.plant import PlantRead
from app.schemas.schedule import EnvironmentalSnapshot, ScheduleEntry, TaskType
from app.services.plant_service import PlantRepository
from app.services.scheduling.adjuster import adjust_for_weather
from app.services.scheduling.cache import ScheduleCache, ScheduleCacheKey
from app.services.scheduling.calculator import (
    MAX_SCHEDULE_HORIZON_DAYS,
    calculate_schedule,
    clamp_horizon,
)
from app.services.scheduling.intervals import interval_hours
from app.services.scheduling.priority import score_task_priority

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ScheduleService:
    def __init__(
        self,
        plants: PlantRepository,
        cache: ScheduleCache,
        *,
        clock: Callable[[], datetime] = utc_now,
        max_horizon_days: int = MAX_SCHEDULE_HORIZON_DAYS,
    ):
        self.plants = plants
        self.cache = cache
        self.clock = clock
        self.max_horizon_days = max_horizon_days

    async def _resolve_plant(self, plant_id: int) -> PlantRead:
        plant = await self.plants.find_by_id(plant_id)
        if plant is None:
            logger.warning("schedule request for unknown plant %d", plant_id)
            raise PlantNotFoundError(plant_id)
        return plant

    async def generate_schedule(
        self,
        plant_id: int,
        horizon_days: int,
        environment: EnvironmentalSnapshot,
    ) -> list[ScheduleEntry]:
        horizon_days = clamp_horizon(horizon_days, self.max_horizon_days)
        key = ScheduleCacheKey(plant_id, horizon_days, environment.fingerprint())

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("schedule cache hit: plant=%d horizon=%d", plant_id, horizon_days)
            return cached

        logger.debug("schedule cache miss: plant=%d horizon=%d, computing", plant_id, horizon_days)
        plant = await self._resolve_plant(plant_id)
        entries = calculate_schedule(
            plant, horizon_days, environment, self.clock(), self.max_horizon_days
        )
        self.cache.set(key, entries)

        logger.info(
            "generated %d schedule entries for plant %d over %d days", len(entries), plant_id, horizon_days
        )
        return entries

    def score_task_priority(
        self, task_type: TaskType, due_date: datetime, environment: EnvironmentalSnapshot
    ) -> int:
        return score_task_priority(task_type, due_date, environment, self.clock())

    async def next_maintenance_date(
        self,
        plant_id: int,
        task_type: TaskType,
        environment: EnvironmentalSnapshot,
        now: Optional[datetime] = None,
    ) -> datetime:
        """Next due date for a single task, counted from ``now`` and weather-adjusted."""
        plant = await self._resolve_plant(plant_id)
        start = now or self.clock()
        due = start + timedelta(hours=interval_hours(task_type, plant, environment))
        return adjust_for_weather(due, task_type, environment)
