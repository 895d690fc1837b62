from datetime import datetime, timedelta, timezone

from app.schemas.schedule import EnvironmentalSnapshot, TaskType
from app.services.scheduling.intervals import (
    HOT_TEMPERATURE_C,
    MAX_PRIORITY,
    MIN_PRIORITY,
    base_priority,
)

DRY_RAINFALL_MM = 5
URGENCY_WINDOW = timedelta(days=1)


def score_task_priority(
    task_type: TaskType,
    due_date: datetime,
    environment: EnvironmentalSnapshot,
    now: datetime,
) -> int:
    """
    Priority in [1, 3] for a task due at ``due_date``.

    Watering gains a point in heat and another when it has barely rained.
    Anything due within a day of ``now`` (or overdue) gains a point. A due
    date without a timezone is read as UTC.
    """
    if due_date.tzinfo is None:
        due_date = due_date.replace(tzinfo=timezone.utc)

    priority = base_priority(task_type)

    if task_type == TaskType.WATERING:
        if environment.temperature > HOT_TEMPERATURE_C:
            priority += 1
        if environment.rainfall < DRY_RAINFALL_MM:
            priority += 1

    if due_date - now <= URGENCY_WINDOW:
        priority += 1

    return max(MIN_PRIORITY, min(priority, MAX_PRIORITY))
