"""
Availability Calendar.

Resolves a staff member's recurring weekly schedule (working hours per
weekday plus breaks) into concrete working windows for one calendar date.

Two data sources feed it:
✓ load_weekly_schedule        — transactional read (Conflict Validator)
✓ get_cached_weekly_schedule  — Redis first, DB on miss (advisory slot path)

Invalid records (start >= end, malformed "HH:MM") close the day and are
logged; they are never raised to the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from redis import Redis
from sqlalchemy.orm import Session

from .config import BookingConfig, get_booking_config, time_str_to_minutes
from .intervals import Interval, merge_intervals, subtract_intervals

logger = logging.getLogger(__name__)

DAY_NAMES = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]


@dataclass(frozen=True)
class AvailabilityRule:
    day_of_week: int  # 0 = Sunday
    start_time: str
    end_time: str
    is_available: bool = True


@dataclass(frozen=True)
class BreakRule:
    day_of_week: int
    start_time: str
    end_time: str


@dataclass(frozen=True)
class WeeklySchedule:
    staff_id: int
    availabilities: tuple[AvailabilityRule, ...] = field(default_factory=tuple)
    breaks: tuple[BreakRule, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "availabilities": [
                [a.day_of_week, a.start_time, a.end_time, a.is_available]
                for a in self.availabilities
            ],
            "breaks": [[b.day_of_week, b.start_time, b.end_time] for b in self.breaks],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WeeklySchedule":
        return cls(
            staff_id=data["staff_id"],
            availabilities=tuple(
                AvailabilityRule(dow, start, end, bool(avail))
                for dow, start, end, avail in data.get("availabilities", [])
            ),
            breaks=tuple(
                BreakRule(dow, start, end) for dow, start, end in data.get("breaks", [])
            ),
        )

    def windows_for(self, target_date: date) -> list[Interval]:
        return resolve_working_windows(self.availabilities, self.breaks, target_date)


def day_of_week(target_date: date) -> int:
    """Weekday number with 0 = Sunday, 6 = Saturday."""
    return (target_date.weekday() + 1) % 7


def _at(target_date: date, minutes: int) -> datetime:
    return datetime.combine(target_date, datetime.min.time()) + timedelta(minutes=minutes)


def resolve_working_windows(availabilities, breaks, target_date: date) -> list[Interval]:
    """
    Working windows for target_date.

    Args:
        availabilities: weekly availability records (ORM rows or AvailabilityRule)
        breaks: break records for the same staff member (any weekday)
        target_date: calendar date

    Returns:
        Sorted, disjoint list of Interval. Empty list = not working that day.
    """
    dow = day_of_week(target_date)

    windows: list[Interval] = []
    for record in availabilities:
        if record.day_of_week != dow or not getattr(record, "is_available", True):
            continue
        try:
            start_min = time_str_to_minutes(record.start_time)
            end_min = time_str_to_minutes(record.end_time)
        except (ValueError, AttributeError):
            logger.warning(
                f"InvalidAvailabilityRecord: unparsable hours "
                f"{record.start_time!r}-{record.end_time!r} on {DAY_NAMES[dow]}, day closed"
            )
            return []
        if start_min >= end_min:
            logger.warning(
                f"InvalidAvailabilityRecord: start {record.start_time} >= end "
                f"{record.end_time} on {DAY_NAMES[dow]}, day closed"
            )
            return []
        windows.append(Interval(_at(target_date, start_min), _at(target_date, end_min)))

    if not windows:
        return []
    windows = merge_intervals(windows)

    blocks: list[Interval] = []
    for brk in breaks:
        if brk.day_of_week != dow:
            continue
        try:
            start_min = time_str_to_minutes(brk.start_time)
            end_min = time_str_to_minutes(brk.end_time)
        except (ValueError, AttributeError):
            logger.warning(f"Ignoring unparsable break {brk.start_time!r}-{brk.end_time!r}")
            continue
        if start_min < end_min:
            blocks.append(Interval(_at(target_date, start_min), _at(target_date, end_min)))

    result: list[Interval] = []
    for window in windows:
        result.extend(subtract_intervals(window, blocks))
    return sorted(result)


# ── Loaders ─────────────────────────────────────────────────────────────


def load_weekly_schedule(db: Session, staff_id: int) -> WeeklySchedule:
    """Read a staff member's weekly schedule straight from the database."""
    from ...models.generated import StaffAvailability, StaffBreaks

    availabilities = (
        db.query(StaffAvailability)
        .filter(StaffAvailability.staff_id == staff_id)
        .order_by(StaffAvailability.day_of_week)
        .all()
    )
    breaks = (
        db.query(StaffBreaks)
        .filter(StaffBreaks.staff_id == staff_id)
        .order_by(StaffBreaks.day_of_week, StaffBreaks.start_time)
        .all()
    )
    return WeeklySchedule(
        staff_id=staff_id,
        availabilities=tuple(
            AvailabilityRule(a.day_of_week, a.start_time, a.end_time, bool(a.is_available))
            for a in availabilities
        ),
        breaks=tuple(BreakRule(b.day_of_week, b.start_time, b.end_time) for b in breaks),
    )


def get_cached_weekly_schedule(
    db: Session,
    staff_id: int,
    redis: Optional[Redis] = None,
    config: Optional[BookingConfig] = None,
) -> WeeklySchedule:
    """Get a weekly schedule, using the Redis cache when available."""
    if redis is None:
        return load_weekly_schedule(db, staff_id)

    from .redis_store import ScheduleRedisStore

    store = ScheduleRedisStore(redis, config or get_booking_config())
    cached = store.get_schedule(staff_id)
    if cached is not None:
        return cached

    # Cache miss: load and store
    schedule = load_weekly_schedule(db, staff_id)
    store.store_schedule(schedule)
    return schedule
