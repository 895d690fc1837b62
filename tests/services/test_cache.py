import asyncio
from datetime import timedelta

import pytest

from app.schemas.schedule import EnvironmentalSnapshot, ScheduleEntry, TaskType
from app.services.scheduling.cache import ScheduleCache, ScheduleCacheKey


def _entry(plant_id: int, env: EnvironmentalSnapshot, now) -> ScheduleEntry:
    due = now + timedelta(days=1)
    return ScheduleEntry(
        id=f"{plant_id}-watering-{int(due.timestamp() * 1000)}",
        plant_id=plant_id,
        task_type=TaskType.WATERING,
        due_date=due,
        priority=2,
        environment=env,
    )


def _key(plant_id: int, env: EnvironmentalSnapshot, horizon: int = 7) -> ScheduleCacheKey:
    return ScheduleCacheKey(plant_id, horizon, env.fingerprint())


def test_fingerprint_is_stable_across_numeric_formatting():
    a = EnvironmentalSnapshot(temperature=25, humidity=60, rainfall=0, wind_speed=5)
    b = EnvironmentalSnapshot(temperature=25.0, humidity=60.0, rainfall=0.0, wind_speed=5.0)
    assert a.fingerprint() == b.fingerprint()
    assert a == b


def test_negative_zero_fingerprints_as_zero(mild):
    negative = mild.model_copy(update={"rainfall": -0.0})
    assert negative.fingerprint() == mild.fingerprint()


@pytest.mark.parametrize("field", ["temperature", "humidity", "rainfall", "wind_speed"])
def test_fingerprint_changes_with_any_field(field, mild):
    changed = mild.model_copy(update={field: getattr(mild, field) + 0.5})
    assert changed.fingerprint() != mild.fingerprint()


def test_miss_then_hit(cache, mild, now):
    key = _key(1, mild)
    assert cache.get(key) is None

    entries = [_entry(1, mild, now)]
    cache.set(key, entries)
    assert cache.get(key) == entries
    assert cache.stats()["hits"] == 1
    assert cache.stats()["misses"] == 1


def test_returned_list_is_a_copy(cache, mild, now):
    key = _key(1, mild)
    cache.set(key, [_entry(1, mild, now)])
    cache.get(key).clear()
    assert len(cache.get(key)) == 1


def test_expires_after_ttl(cache, fake_clock, mild, now):
    key = _key(1, mild)
    cache.set(key, [_entry(1, mild, now)])

    fake_clock.advance(3600)
    assert cache.get(key) is not None

    fake_clock.advance(1)
    assert cache.get(key) is None
    assert len(cache) == 0


def test_fingerprint_mismatch_is_a_miss(cache, mild, hot, now):
    cache.set(_key(1, mild), [_entry(1, mild, now)])
    assert cache.get(_key(1, hot)) is None


def test_new_snapshot_replaces_old_slot(cache, mild, hot, now):
    cache.set(_key(1, mild), [_entry(1, mild, now)])
    cache.set(_key(1, hot), [_entry(1, hot, now)])

    assert len(cache) == 1
    assert cache.get(_key(1, mild)) is None
    assert cache.get(_key(1, hot))[0].environment == hot


def test_horizons_are_cached_separately(cache, mild, now):
    cache.set(_key(1, mild, horizon=7), [_entry(1, mild, now)])
    cache.set(_key(1, mild, horizon=30), [])
    assert len(cache) == 2
    assert cache.get(_key(1, mild, horizon=30)) == []


def test_sweep_removes_only_expired(cache, fake_clock, mild, now):
    cache.set(_key(1, mild), [_entry(1, mild, now)])
    fake_clock.advance(2000)
    cache.set(_key(2, mild), [_entry(2, mild, now)])
    fake_clock.advance(1700)

    assert cache.sweep() == 1
    assert len(cache) == 1
    assert cache.get(_key(2, mild)) is not None


def test_invalidate_plant(cache, mild, now):
    cache.set(_key(1, mild, horizon=7), [_entry(1, mild, now)])
    cache.set(_key(1, mild, horizon=30), [_entry(1, mild, now)])
    cache.set(_key(2, mild), [_entry(2, mild, now)])

    assert cache.invalidate(1) == 2
    assert len(cache) == 1


def test_clear(cache, mild, now):
    cache.set(_key(1, mild), [_entry(1, mild, now)])
    cache.clear()
    assert len(cache) == 0


def test_sweep_interval_defaults_to_ttl():
    assert ScheduleCache(ttl_seconds=120).sweep_interval_seconds == 120
    assert ScheduleCache(ttl_seconds=120, sweep_interval_seconds=30).sweep_interval_seconds == 30


async def test_background_sweep_runs_without_traffic(fake_clock, mild, now):
    cache = ScheduleCache(ttl_seconds=60, sweep_interval_seconds=0.01, clock=fake_clock)
    cache.set(_key(1, mild), [_entry(1, mild, now)])
    fake_clock.advance(61)

    cache.start()
    try:
        assert cache.is_running
        for _ in range(50):
            if len(cache) == 0:
                break
            await asyncio.sleep(0.01)
        assert len(cache) == 0
    finally:
        await cache.stop()

    assert not cache.is_running


async def test_start_is_idempotent_and_stop_is_safe():
    cache = ScheduleCache(ttl_seconds=60)
    await cache.stop()  # never started

    cache.start()
    task = cache._sweep_task
    cache.start()
    assert cache._sweep_task is task

    await cache.stop()
    assert task.cancelled()
    assert cache.stats()["sweeping"] is False
