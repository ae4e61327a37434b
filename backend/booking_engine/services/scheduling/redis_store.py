"""
Redis storage for weekly staff schedules.

Key format: schedule:staff:{staff_id}
Value: JSON of WeeklySchedule.to_dict(), with a TTL.

Only the advisory path (slot suggestions, calendar days) reads from here.
The Conflict Validator always reads the database.

Redis failures are logged and reported as a cache miss.
"""

import json
import logging
from typing import Optional

from redis import Redis, RedisError

from .calendar import WeeklySchedule
from .config import BookingConfig, get_booking_config

logger = logging.getLogger(__name__)


class ScheduleRedisStore:
    """Redis storage wrapper for cached weekly schedules."""

    KEY_PREFIX = "schedule:staff"

    def __init__(self, redis: Redis, config: BookingConfig | None = None):
        self.redis = redis
        self.config = config or get_booking_config()

    def _key(self, staff_id: int) -> str:
        return f"{self.KEY_PREFIX}:{staff_id}"

    # ── Write ────────────────────────────────────────────────────────────

    def store_schedule(self, schedule: WeeklySchedule) -> None:
        try:
            self.redis.set(
                self._key(schedule.staff_id),
                json.dumps(schedule.to_dict()),
                ex=self.config.schedule_cache_ttl_seconds,
            )
        except RedisError as e:
            logger.error(f"Failed to cache schedule for staff {schedule.staff_id}: {e}")

    # ── Read ─────────────────────────────────────────────────────────────

    def get_schedule(self, staff_id: int) -> Optional[WeeklySchedule]:
        """
        Get a cached schedule.

        Returns:
            WeeklySchedule, or None on cache miss.
        """
        try:
            raw = self.redis.get(self._key(staff_id))
        except RedisError as e:
            logger.error(f"Failed to read cached schedule for staff {staff_id}: {e}")
            return None

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()

        try:
            return WeeklySchedule.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.warning(f"Discarding malformed cached schedule for staff {staff_id}")
            return None

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_schedules(self, staff_ids: list[int] | None = None) -> int:
        """
        Delete cached schedules.

        Args:
            staff_ids: Specific staff members, or None to delete all.

        Returns:
            Number of deleted keys.
        """
        try:
            if staff_ids:
                keys = [self._key(staff_id) for staff_id in staff_ids]
            else:
                keys = self.redis.keys(f"{self.KEY_PREFIX}:*")

            if not keys:
                return 0
            return self.redis.delete(*keys)
        except RedisError as e:
            logger.error(f"Failed to invalidate cached schedules {staff_ids}: {e}")
            return 0
