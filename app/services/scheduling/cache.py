"""
In-process cache for generated maintenance schedules.

Entries are keyed by (plant id, horizon days, snapshot fingerprint) and
expire after a fixed TTL (1 hour by default). A background asyncio task,
started and stopped explicitly by the application lifespan, sweeps expired
entries on a fixed interval regardless of request traffic.

Each (plant id, horizon) pair holds one slot: storing a schedule for a new
snapshot replaces the one computed for the old snapshot, and a read whose
fingerprint does not match the stored one is a miss.

Two requests racing on the same key may both compute and store; the second
write wins. That duplicate work is harmless because schedules are pure.
"""
import asyncio
import logging
import time
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from threading import Lock
from typing import Any, NamedTuple, Optional

from app.schemas.schedule import ScheduleEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0


class ScheduleCacheKey(NamedTuple):
    plant_id: int
    horizon_days: int
    fingerprint: str


@dataclass(frozen=True)
class CachedSchedule:
    entries: tuple[ScheduleEntry, ...]
    created_at: float
    fingerprint: str


class ScheduleCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        sweep_interval_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds or ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[int, int], CachedSchedule] = {}
        self._lock = Lock()
        self._sweep_task: Optional[asyncio.Task] = None
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_expired(self, cached: CachedSchedule, now: float) -> bool:
        return now - cached.created_at > self.ttl_seconds

    def get(self, key: ScheduleCacheKey) -> Optional[list[ScheduleEntry]]:
        """Cached entries for ``key``, or None on a miss (absent, expired or stale snapshot)."""
        slot = (key.plant_id, key.horizon_days)
        now = self._clock()
        with self._lock:
            cached = self._entries.get(slot)
            if cached is not None and self._is_expired(cached, now):
                del self._entries[slot]
                cached = None
            if cached is None or cached.fingerprint != key.fingerprint:
                self.misses += 1
                return None
            self.hits += 1
            return list(cached.entries)

    def set(self, key: ScheduleCacheKey, entries: list[ScheduleEntry]) -> None:
        cached = CachedSchedule(
            entries=tuple(entries),
            created_at=self._clock(),
            fingerprint=key.fingerprint,
        )
        with self._lock:
            self._entries[(key.plant_id, key.horizon_days)] = cached

    def invalidate(self, plant_id: int) -> int:
        """Drop every cached schedule for one plant. Returns the number removed."""
        with self._lock:
            stale = [slot for slot in self._entries if slot[0] == plant_id]
            for slot in stale:
                del self._entries[slot]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def sweep(self) -> int:
        """Remove all expired entries. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [slot for slot, cached in self._entries.items() if self._is_expired(cached, now)]
            for slot in expired:
                del self._entries[slot]
        if expired:
            logger.info("schedule cache sweep: removed %d expired entries", len(expired))
        return len(expired)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            total = self.hits + self.misses
            return {
                "size": len(self._entries),
                "hits": self.hits,
                "misses": self.misses,
                "hit_rate": round(self.hits / total * 100, 2) if total else 0.0,
                "ttl_seconds": self.ttl_seconds,
                "sweeping": self.is_running,
            }

    # ── Sweep lifecycle ───────────────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            self.sweep()

    def start(self) -> None:
        """Start the periodic sweep on the running event loop. No-op if already running."""
        if self.is_running:
            return
        self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_loop())
        logger.info("schedule cache sweep started (every %ss)", self.sweep_interval_seconds)

    async def stop(self) -> None:
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.info("schedule cache sweep stopped")
