"""
Cache invalidation for staff schedules.

Triggers:
✓ Weekly availability created/updated/deleted → invalidate staff
✓ Break created/deleted → invalidate staff
✓ Staff deactivated → invalidate staff

Does NOT trigger:
✗ Appointment created/rescheduled/cancelled (always read live)
"""

from typing import Optional

from redis import Redis

from .redis_store import ScheduleRedisStore


def invalidate_staff_schedule(
    redis: Optional[Redis],
    staff_id: int | None = None,
) -> int:
    """
    Invalidate cached schedules.

    Args:
        redis: Redis client (None = caching disabled, nothing to do)
        staff_id: Staff member, or None to invalidate every cached schedule

    Returns:
        Number of deleted cache keys
    """
    if redis is None:
        return 0
    store = ScheduleRedisStore(redis)
    return store.delete_schedules([staff_id] if staff_id is not None else None)
