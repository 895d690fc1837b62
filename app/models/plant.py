from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Enum, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Plant(Base):
    __tablename__ = "plants"

    id: Mapped[int] = mapped_column(primary_key=True)
    common_name: Mapped[str] = mapped_column(String(200), index=True)
    plant_type: Mapped[str] = mapped_column(
        Enum("tomatoes", "lettuce", "carrots", "other", name="plant_type_enum"),
        default="other",
    )
    growth_stage: Mapped[str] = mapped_column(
        Enum("seedling", "growing", "mature", "harvesting", name="growth_stage_enum"),
        default="seedling",
    )
    planted_date: Mapped[Optional[date]] = mapped_column(Date)

    # Soil conditions, fractions in 0..1
    soil_moisture: Mapped[float] = mapped_column(Float, default=0.5)
    soil_nitrogen: Mapped[float] = mapped_column(Float, default=0.5)
    soil_phosphorus: Mapped[float] = mapped_column(Float, default=0.5)
    soil_potassium: Mapped[float] = mapped_column(Float, default=0.5)

    # Per-plant overrides of the plant-type frequency tables
    watering_frequency_days: Mapped[Optional[int]] = mapped_column(Integer)
    fertilizing_frequency_days: Mapped[Optional[int]] = mapped_column(Integer)

    # Task eligibility
    needs_watering: Mapped[bool] = mapped_column(Boolean, default=True)
    needs_fertilizing: Mapped[bool] = mapped_column(Boolean, default=True)
    needs_pruning: Mapped[bool] = mapped_column(Boolean, default=True)
    needs_harvesting: Mapped[bool] = mapped_column(Boolean, default=True)
    needs_pest_control: Mapped[bool] = mapped_column(Boolean, default=True)

    notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
