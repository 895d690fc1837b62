from datetime import datetime, timedelta

from app.schemas.schedule import EnvironmentalSnapshot, TaskType

HIGH_WIND_KMH = 20
HEAVY_RAIN_MM = 10
WEATHER_DELAY = timedelta(hours=24)


def is_adverse_weather(environment: EnvironmentalSnapshot) -> bool:
    return environment.wind_speed > HIGH_WIND_KMH or environment.rainfall > HEAVY_RAIN_MM


def adjust_for_weather(
    due_date: datetime, task_type: TaskType, environment: EnvironmentalSnapshot
) -> datetime:
    """
    Push a weather-dependent task back a day under high wind or heavy rain.

    Delay-only: a due date is never moved earlier, and tasks that do not
    depend on the weather always pass through unchanged.
    """
    if task_type.weather_dependent and is_adverse_weather(environment):
        return due_date + WEATHER_DELAY
    return due_date
