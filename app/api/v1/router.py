from fastapi import APIRouter

from app.api.v1.endpoints import plants, schedules

api_router = APIRouter()

api_router.include_router(plants.router)
api_router.include_router(schedules.router)
