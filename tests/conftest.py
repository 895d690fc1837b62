from datetime import datetime, timezone
from typing import Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.deps import get_schedule_cache, get_schedule_service
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models import Plant  # noqa: F401  (registers the table on Base.metadata)
from app.schemas.plant import PlantRead
from app.schemas.schedule import EnvironmentalSnapshot
from app.services.scheduling.cache import ScheduleCache
from app.services.scheduling.service import ScheduleService


NOW = datetime(2026, 6, 1, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryPlantRepository:
    def __init__(self, *plants: PlantRead):
        self.plants = {p.id: p for p in plants}
        self.calls: list[int] = []

    async def find_by_id(self, plant_id: int) -> Optional[PlantRead]:
        self.calls.append(plant_id)
        return self.plants.get(plant_id)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def mild() -> EnvironmentalSnapshot:
    return EnvironmentalSnapshot(temperature=25, humidity=60, rainfall=0, wind_speed=5)


@pytest.fixture
def hot() -> EnvironmentalSnapshot:
    return EnvironmentalSnapshot(temperature=35, humidity=60, rainfall=0, wind_speed=5)


@pytest.fixture
def stormy() -> EnvironmentalSnapshot:
    return EnvironmentalSnapshot(temperature=25, humidity=60, rainfall=15, wind_speed=25)


@pytest.fixture
def tomato() -> PlantRead:
    # 3-day watering, 14-day fertilizing (11 days while growing)
    return PlantRead(id=1, common_name="Tomato", plant_type="tomatoes", growth_stage="growing")


@pytest.fixture
def lettuce() -> PlantRead:
    return PlantRead(
        id=2,
        common_name="Lettuce",
        plant_type="lettuce",
        growth_stage="mature",
        needs_pruning=False,
        needs_fertilizing=False,
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(fake_clock: FakeClock) -> ScheduleCache:
    return ScheduleCache(ttl_seconds=3600, clock=fake_clock)


@pytest.fixture
def plants(tomato: PlantRead, lettuce: PlantRead) -> InMemoryPlantRepository:
    return InMemoryPlantRepository(tomato, lettuce)


@pytest.fixture
def service(plants: InMemoryPlantRepository, cache: ScheduleCache, now: datetime) -> ScheduleService:
    return ScheduleService(plants, cache, clock=lambda: now)


@pytest_asyncio.fixture
async def db():
    # StaticPool keeps one connection so every session sees the same in-memory database
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def client(service: ScheduleService, cache: ScheduleCache):
    app.dependency_overrides[get_schedule_service] = lambda: service
    app.dependency_overrides[get_schedule_cache] = lambda: cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def db_client(db: AsyncSession, cache: ScheduleCache):
    """Client backed by the SQLite session instead of the in-memory repository."""

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_schedule_cache] = lambda: cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
