"""
Day Resolver.

Answers "can this staff member conceivably work this day" for a date range.
Bookings are not consulted: a fully booked working day is still available.
"""

from datetime import date, timedelta
from typing import Optional

from redis import Redis
from sqlalchemy.orm import Session

from .calendar import WeeklySchedule, get_cached_weekly_schedule
from .config import BookingConfig, get_booking_config


def clamp_range(start_date: date, end_date: date, max_days: int) -> tuple[date, date]:
    """Limit [start_date, end_date] to at most max_days days after start_date."""
    limit = start_date + timedelta(days=max_days)
    if end_date > limit:
        end_date = limit
    return start_date, end_date


def resolve_available_days(
    schedule: WeeklySchedule,
    start_date: date,
    end_date: date,
    max_days: int = 30,
) -> list[date]:
    """
    Dates in [start_date, end_date] with a non-empty working window.

    The range is clamped to max_days; a reversed range yields no days.
    """
    if end_date < start_date:
        return []
    start_date, end_date = clamp_range(start_date, end_date, max_days)

    days = []
    current = start_date
    while current <= end_date:
        if schedule.windows_for(current):
            days.append(current)
        current += timedelta(days=1)
    return days


def calculate_available_days(
    db: Session,
    staff_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> dict:
    """
    Calendar of workable days for a staff member.

    Returns:
        Dict for SlotsCalendarResponse.
    """
    config = config or get_booking_config()

    if start_date is None:
        start_date = date.today()
    if end_date is None:
        end_date = start_date + timedelta(days=config.horizon_days)
    if end_date < start_date:
        end_date = start_date
    start_date, end_date = clamp_range(start_date, end_date, config.horizon_days)

    schedule = get_cached_weekly_schedule(db, staff_id, redis, config)
    days = resolve_available_days(schedule, start_date, end_date, config.horizon_days)

    return {
        "staff_id": staff_id,
        "start_date": start_date,
        "end_date": end_date,
        "available_days": days,
        "horizon_days": config.horizon_days,
    }
