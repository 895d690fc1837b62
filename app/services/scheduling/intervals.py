"""
Maintenance interval policy.

Static base intervals and priority weights per task type, plus the
soil/weather-aware overrides for watering and fertilizing. The tables are
validated at import time so a task type without an entry fails at startup
rather than on some later request.
"""
import math
from collections.abc import Mapping

from app.core.exceptions import ConfigurationError
from app.schemas.plant import PlantRead
from app.schemas.schedule import EnvironmentalSnapshot, TaskType

# ── Task tables ───────────────────────────────────────────────────────────────

TASK_INTERVAL_HOURS: dict[TaskType, int] = {
    TaskType.WATERING: 24,        # daily
    TaskType.FERTILIZING: 168,    # weekly
    TaskType.PRUNING: 336,        # every two weeks
    TaskType.HARVESTING: 168,
    TaskType.PEST_CONTROL: 168,
}

# 1 = low, 2 = medium, 3 = high
TASK_PRIORITIES: dict[TaskType, int] = {
    TaskType.WATERING: 1,
    TaskType.FERTILIZING: 2,
    TaskType.PRUNING: 3,
    TaskType.HARVESTING: 1,
    TaskType.PEST_CONTROL: 2,
}

MIN_PRIORITY = 1
MAX_PRIORITY = 3

# ── Plant-type tables (days) ──────────────────────────────────────────────────

WATERING_FREQUENCY_DAYS: dict[str, int] = {"tomatoes": 3, "lettuce": 2, "carrots": 3}
FERTILIZING_FREQUENCY_DAYS: dict[str, int] = {"tomatoes": 14, "lettuce": 21, "carrots": 30}

GROWTH_STAGE_FERTILIZING_FACTOR: dict[str, float] = {
    "seedling": 1.5,
    "growing": 0.8,
    "mature": 1.2,
    "harvesting": 1.5,
}

HOT_TEMPERATURE_C = 30
COOL_TEMPERATURE_C = 15
DRY_SOIL_MOISTURE = 0.3
WET_SOIL_MOISTURE = 0.7
POOR_SOIL_NUTRIENTS = 0.3
RICH_SOIL_NUTRIENTS = 0.7

_ELIGIBILITY_FLAGS: dict[TaskType, str] = {
    TaskType.WATERING: "needs_watering",
    TaskType.FERTILIZING: "needs_fertilizing",
    TaskType.PRUNING: "needs_pruning",
    TaskType.HARVESTING: "needs_harvesting",
    TaskType.PEST_CONTROL: "needs_pest_control",
}


def validate_task_tables(
    intervals: Mapping[TaskType, int] = TASK_INTERVAL_HOURS,
    priorities: Mapping[TaskType, int] = TASK_PRIORITIES,
) -> None:
    """Raise ConfigurationError unless every TaskType has a usable interval and priority."""
    problems = []
    for task_type in TaskType:
        interval = intervals.get(task_type)
        if interval is None:
            problems.append(f"{task_type.value}: no base interval")
        elif interval <= 0:
            problems.append(f"{task_type.value}: interval must be positive, got {interval}")

        priority = priorities.get(task_type)
        if priority is None:
            problems.append(f"{task_type.value}: no priority")
        elif not MIN_PRIORITY <= priority <= MAX_PRIORITY:
            problems.append(f"{task_type.value}: priority {priority} outside {MIN_PRIORITY}-{MAX_PRIORITY}")

    if problems:
        raise ConfigurationError("Invalid task tables: " + "; ".join(problems))


def base_interval_hours(task_type: TaskType) -> int:
    try:
        return TASK_INTERVAL_HOURS[task_type]
    except KeyError:
        raise ConfigurationError(f"No base interval configured for task type {task_type!r}") from None


def base_priority(task_type: TaskType) -> int:
    try:
        return TASK_PRIORITIES[task_type]
    except KeyError:
        raise ConfigurationError(f"No priority configured for task type {task_type!r}") from None


def is_eligible(plant: PlantRead, task_type: TaskType) -> bool:
    flag = _ELIGIBILITY_FLAGS.get(task_type)
    return bool(getattr(plant, flag)) if flag else True


def _whole_days(days: float) -> int:
    # Half-up rounding, never below one day
    return max(1, math.floor(days + 0.5))


def watering_interval_hours(plant: PlantRead, environment: EnvironmentalSnapshot) -> int:
    """
    Watering interval adjusted for heat, recent rain and soil moisture.

    Base days come from the plant's own override, then its plant type, then
    the flat daily interval.
    """
    days: float = (
        plant.watering_frequency_days
        or WATERING_FREQUENCY_DAYS.get(plant.plant_type)
        or base_interval_hours(TaskType.WATERING) / 24
    )

    if environment.temperature > HOT_TEMPERATURE_C:
        days *= 0.7
    elif environment.temperature < COOL_TEMPERATURE_C:
        days *= 1.3

    if environment.rainfall > 0:
        days += environment.rainfall / 10

    if plant.soil_moisture < DRY_SOIL_MOISTURE:
        days *= 0.8
    elif plant.soil_moisture > WET_SOIL_MOISTURE:
        days *= 1.5

    return _whole_days(days) * 24


def fertilizing_interval_hours(plant: PlantRead) -> int:
    """Fertilizing interval adjusted for growth stage and average soil nutrients."""
    days: float = (
        plant.fertilizing_frequency_days
        or FERTILIZING_FREQUENCY_DAYS.get(plant.plant_type)
        or base_interval_hours(TaskType.FERTILIZING) / 24
    )

    days *= GROWTH_STAGE_FERTILIZING_FACTOR.get(plant.growth_stage, 1.0)

    nutrients = plant.average_soil_nutrients
    if nutrients < POOR_SOIL_NUTRIENTS:
        days *= 0.7
    elif nutrients > RICH_SOIL_NUTRIENTS:
        days *= 1.3

    return _whole_days(days) * 24


def interval_hours(task_type: TaskType, plant: PlantRead, environment: EnvironmentalSnapshot) -> int:
    if task_type == TaskType.WATERING:
        return watering_interval_hours(plant, environment)
    if task_type == TaskType.FERTILIZING:
        return fertilizing_interval_hours(plant)
    return base_interval_hours(task_type)


validate_task_tables()
