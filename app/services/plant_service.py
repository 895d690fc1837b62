from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.plant import Plant
from app.schemas.plant import PlantCreate, PlantRead, PlantUpdate


class PlantRepository(Protocol):
    """Plant lookup consumed by the scheduler."""

    async def find_by_id(self, plant_id: int) -> Optional[PlantRead]: ...


async def get_plant_by_id(db: AsyncSession, plant_id: int) -> Optional[Plant]:
    result = await db.execute(select(Plant).where(Plant.id == plant_id))
    return result.scalar_one_or_none()


async def create_plant(db: AsyncSession, data: PlantCreate) -> Plant:
    plant = Plant(**data.model_dump())
    db.add(plant)
    await db.commit()
    await db.refresh(plant)
    return plant


async def update_plant(db: AsyncSession, plant: Plant, data: PlantUpdate) -> Plant:
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(plant, field, value)
    await db.commit()
    await db.refresh(plant)
    return plant


class SqlPlantRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, plant_id: int) -> Optional[PlantRead]:
        plant = await get_plant_by_id(self.db, plant_id)
        if plant is None:
            return None
        return PlantRead.model_validate(plant)
