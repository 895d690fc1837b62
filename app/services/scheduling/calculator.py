"""
Maintenance schedule calculator.

Pure computation: given a plant, a horizon and an environmental snapshot,
walk each eligible task type forward from ``now`` in steps of its interval,
delaying for weather, until the horizon is passed.
"""
from datetime import datetime, timedelta

from app.schemas.plant import PlantRead
from app.schemas.schedule import EnvironmentalSnapshot, ScheduleEntry, TaskType
from app.services.scheduling.adjuster import adjust_for_weather
from app.services.scheduling.intervals import interval_hours, is_eligible
from app.services.scheduling.priority import score_task_priority

MAX_SCHEDULE_HORIZON_DAYS = 365


def clamp_horizon(horizon_days: int, max_days: int = MAX_SCHEDULE_HORIZON_DAYS) -> int:
    """Truncate to [0, max_days]. Oversized requests are cut down, never rejected."""
    return max(0, min(horizon_days, max_days))


def entry_id(plant_id: int, task_type: TaskType, due_date: datetime) -> str:
    return f"{plant_id}-{task_type.value}-{int(due_date.timestamp() * 1000)}"


def sort_entries(entries: list[ScheduleEntry]) -> list[ScheduleEntry]:
    """Earliest first; for the same due date, highest priority first."""
    return sorted(entries, key=lambda e: (e.due_date, -e.priority))


def _task_entries(
    plant: PlantRead,
    task_type: TaskType,
    environment: EnvironmentalSnapshot,
    now: datetime,
    end: datetime,
) -> list[ScheduleEntry]:
    step = timedelta(hours=interval_hours(task_type, plant, environment))
    entries = []
    due = now
    while True:
        due = adjust_for_weather(due + step, task_type, environment)
        if due > end:
            break
        entries.append(
            ScheduleEntry(
                id=entry_id(plant.id, task_type, due),
                plant_id=plant.id,
                task_type=task_type,
                due_date=due,
                priority=score_task_priority(task_type, due, environment, now),
                environment=environment,
            )
        )
    return entries


def calculate_schedule(
    plant: PlantRead,
    horizon_days: int,
    environment: EnvironmentalSnapshot,
    now: datetime,
    max_horizon_days: int = MAX_SCHEDULE_HORIZON_DAYS,
) -> list[ScheduleEntry]:
    end = now + timedelta(days=clamp_horizon(horizon_days, max_horizon_days))

    entries: list[ScheduleEntry] = []
    for task_type in TaskType:
        if not is_eligible(plant, task_type):
            continue
        entries.extend(_task_entries(plant, task_type, environment, now, end))

    return sort_entries(entries)
