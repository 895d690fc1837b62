from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

PlantType = Literal["tomatoes", "lettuce", "carrots", "other"]
GrowthStage = Literal["seedling", "growing", "mature", "harvesting"]


class PlantCreate(BaseModel):
    common_name: str
    plant_type: PlantType = "other"
    growth_stage: GrowthStage = "seedling"
    planted_date: Optional[date] = None
    soil_moisture: float = Field(0.5, ge=0.0, le=1.0)
    soil_nitrogen: float = Field(0.5, ge=0.0, le=1.0)
    soil_phosphorus: float = Field(0.5, ge=0.0, le=1.0)
    soil_potassium: float = Field(0.5, ge=0.0, le=1.0)
    watering_frequency_days: Optional[int] = Field(None, ge=1)
    fertilizing_frequency_days: Optional[int] = Field(None, ge=1)
    needs_watering: bool = True
    needs_fertilizing: bool = True
    needs_pruning: bool = True
    needs_harvesting: bool = True
    needs_pest_control: bool = True
    notes: Optional[str] = None


class PlantUpdate(BaseModel):
    common_name: Optional[str] = None
    plant_type: Optional[PlantType] = None
    growth_stage: Optional[GrowthStage] = None
    planted_date: Optional[date] = None
    soil_moisture: Optional[float] = Field(None, ge=0.0, le=1.0)
    soil_nitrogen: Optional[float] = Field(None, ge=0.0, le=1.0)
    soil_phosphorus: Optional[float] = Field(None, ge=0.0, le=1.0)
    soil_potassium: Optional[float] = Field(None, ge=0.0, le=1.0)
    watering_frequency_days: Optional[int] = Field(None, ge=1)
    fertilizing_frequency_days: Optional[int] = Field(None, ge=1)
    needs_watering: Optional[bool] = None
    needs_fertilizing: Optional[bool] = None
    needs_pruning: Optional[bool] = None
    needs_harvesting: Optional[bool] = None
    needs_pest_control: Optional[bool] = None
    notes: Optional[str] = None


class PlantRead(BaseModel):
    """A plant as the scheduler sees it. Read-only once loaded."""

    id: int
    common_name: str
    plant_type: PlantType = "other"
    growth_stage: GrowthStage = "seedling"
    planted_date: Optional[date] = None
    soil_moisture: float = 0.5
    soil_nitrogen: float = 0.5
    soil_phosphorus: float = 0.5
    soil_potassium: float = 0.5
    watering_frequency_days: Optional[int] = None
    fertilizing_frequency_days: Optional[int] = None
    needs_watering: bool = True
    needs_fertilizing: bool = True
    needs_pruning: bool = True
    needs_harvesting: bool = True
    needs_pest_control: bool = True
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "frozen": True}

    @property
    def average_soil_nutrients(self) -> float:
        return (self.soil_nitrogen + self.soil_phosphorus + self.soil_potassium) / 3
