from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import ScheduleCacheDep
from app.db.session import get_db
from app.models.plant import Plant
from app.schemas.plant import PlantCreate, PlantRead, PlantUpdate
from app.services.plant_service import create_plant, get_plant_by_id, update_plant

router = APIRouter(prefix="/plants", tags=["plants"])


async def _get_plant_or_404(db: AsyncSession, plant_id: int) -> Plant:
    plant = await get_plant_by_id(db, plant_id)
    if not plant:
        raise HTTPException(status_code=404, detail="Plant not found")
    return plant


@router.post("", response_model=PlantRead, status_code=status.HTTP_201_CREATED)
async def add_plant(data: PlantCreate, db: AsyncSession = Depends(get_db)):
    return await create_plant(db, data)


@router.get("/{plant_id}", response_model=PlantRead)
async def get_plant(plant_id: int, db: AsyncSession = Depends(get_db)):
    return await _get_plant_or_404(db, plant_id)


@router.patch("/{plant_id}", response_model=PlantRead)
async def patch_plant(
    plant_id: int,
    data: PlantUpdate,
    cache: ScheduleCacheDep,
    db: AsyncSession = Depends(get_db),
):
    plant = await _get_plant_or_404(db, plant_id)
    plant = await update_plant(db, plant, data)
    # Cached schedules were computed from the old soil/stage/eligibility values
    cache.invalidate(plant_id)
    return plant
