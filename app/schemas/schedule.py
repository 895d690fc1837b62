import hashlib
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field


class TaskType(str, Enum):
    WATERING = "watering"
    FERTILIZING = "fertilizing"
    PRUNING = "pruning"
    HARVESTING = "harvesting"
    PEST_CONTROL = "pest_control"

    @property
    def weather_dependent(self) -> bool:
        return self in WEATHER_DEPENDENT_TASKS


WEATHER_DEPENDENT_TASKS = frozenset({TaskType.WATERING, TaskType.FERTILIZING, TaskType.PRUNING})


class EnvironmentalSnapshot(BaseModel):
    temperature: float = Field(description="°C")
    humidity: float = Field(description="Relative humidity, %")
    rainfall: float = Field(description="Recent accumulation, mm")
    wind_speed: float = Field(description="km/h")

    model_config = {"frozen": True}

    def fingerprint(self) -> str:
        """
        Stable digest of the four readings.

        Values are normalized to floats first, so 25 and 25.0 fingerprint the
        same and -0.0 fingerprints as 0.0.
        """
        raw = "|".join(
            repr(float(v) + 0.0) for v in (self.temperature, self.humidity, self.rainfall, self.wind_speed)
        )
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class ScheduleEntry(BaseModel):
    id: str
    plant_id: int
    task_type: TaskType
    due_date: datetime
    priority: int = Field(ge=1, le=3)
    completed: bool = False
    completed_date: Optional[datetime] = None
    environment: EnvironmentalSnapshot

    model_config = {"frozen": True}

    @computed_field
    @property
    def weather_dependent(self) -> bool:
        return self.task_type.weather_dependent


class ScheduleRequest(BaseModel):
    plant_id: int
    horizon_days: int = Field(description="Days ahead; values above the server maximum are truncated")
    environment: EnvironmentalSnapshot


class PriorityRequest(BaseModel):
    task_type: TaskType
    due_date: datetime
    environment: EnvironmentalSnapshot


class PriorityRead(BaseModel):
    task_type: TaskType
    due_date: datetime
    priority: int


class NextDueRequest(BaseModel):
    plant_id: int
    task_type: TaskType
    environment: EnvironmentalSnapshot


class NextDueRead(BaseModel):
    plant_id: int
    task_type: TaskType
    due_date: datetime
    weather_dependent: bool


class CacheStatsRead(BaseModel):
    size: int
    hits: int
    misses: int
    hit_rate: float
    ttl_seconds: float
    sweeping: bool
