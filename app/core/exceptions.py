"""
Scheduling error taxonomy.

The API layer maps these onto HTTP responses: PlantNotFoundError to 404,
ConfigurationError to 500. Nothing here is retryable.
"""


class SchedulingError(Exception):
    """Base class for errors raised by the scheduling core."""


class PlantNotFoundError(SchedulingError):
    def __init__(self, plant_id: int):
        self.plant_id = plant_id
        super().__init__(f"Plant {plant_id} not found")


class ConfigurationError(SchedulingError):
    """A task type is missing from (or invalid in) the interval/priority tables."""
