"""
Slot Generator.

Enumerates candidate start times for a service inside a staff member's
working windows, dropping candidates that overlap existing appointments.

Output is advisory: times may be taken between generation and submission.
Only the Conflict Validator decides whether a booking is written.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from redis import Redis
from sqlalchemy.orm import Session

from .calendar import get_cached_weekly_schedule
from .config import BookingConfig, get_booking_config
from .intervals import Interval, overlaps


def generate_slots(
    target_date: date,
    windows: Iterable[Interval],
    appointments: Iterable,
    duration_minutes: int,
    step_minutes: int = 15,
) -> list[str]:
    """
    Generate offerable "HH:MM" start times.

    Args:
        target_date: calendar date the windows belong to
        windows: working windows for that date
        appointments: existing bookings (need date_start, duration_minutes, status)
        duration_minutes: service duration
        step_minutes: candidate granularity

    Returns:
        Ascending list of "HH:MM" strings. May be empty.
    """
    if duration_minutes <= 0 or step_minutes <= 0:
        return []

    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)
    busy = list(booked_intervals(appointments, target_date))

    offered: set[datetime] = set()
    for window in windows:
        candidate = window.start
        while candidate + duration <= window.end:
            end = candidate + duration
            if not any(overlaps(candidate, end, b.start, b.end) for b in busy):
                offered.add(candidate)
            candidate += step

    return [t.strftime("%H:%M") for t in sorted(offered)]


def booked_intervals(appointments: Iterable, target_date: Optional[date] = None):
    """Yield [start, end) of non-cancelled appointments (on target_date, if given)."""
    for appt in appointments:
        if appt.status == "cancelled":
            continue
        start = appt.date_start
        if target_date is not None and start.date() != target_date:
            continue
        yield Interval(start, start + timedelta(minutes=appt.duration_minutes))


def reconcile_selection(current: Optional[str], slots: list[str]) -> Optional[str]:
    """
    Keep a UI selection valid after slots were regenerated.

    Returns the current time if it is still offered, otherwise the first
    offered slot, otherwise None.
    """
    if current is not None and current in slots:
        return current
    return slots[0] if slots else None


# ── UI-facing operation ─────────────────────────────────────────────────


def calculate_day_slots(
    db: Session,
    staff_id: int,
    service_id: int,
    target_date: date,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> dict:
    """
    Calculate available start times for one staff member and service.

    Returns:
        Dict for SlotsDayResponse.
    """
    config = config or get_booking_config()

    service = _get_service(db, service_id)
    duration_min = service.duration_minutes if service else 0

    result = {
        "staff_id": staff_id,
        "service_id": service_id,
        "date": target_date.isoformat(),
        "service_duration_min": duration_min,
        "slot_step_minutes": config.slot_step_minutes,
        "available_times": [],
    }
    if not service:
        return result

    schedule = get_cached_weekly_schedule(db, staff_id, redis, config)
    windows = schedule.windows_for(target_date)
    if not windows:
        return result

    appointments = get_staff_appointments_on(db, staff_id, target_date)
    result["available_times"] = generate_slots(
        target_date,
        windows,
        appointments,
        duration_min,
        config.slot_step_minutes,
    )
    return result


# ── Database helpers ─────────────────────────────────────────────────────


def _get_service(db: Session, service_id: int):
    """Get active service by ID."""
    from ...models.generated import Services
    return db.query(Services).filter(
        Services.id == service_id,
        Services.is_active == 1,
    ).first()


def get_staff_appointments_on(
    db: Session,
    staff_id: int,
    target_date: date,
    exclude_appointment_id: int | None = None,
) -> list:
    """Get non-cancelled appointments of a staff member starting on target_date."""
    from ...models.generated import Appointments

    day_start = datetime.combine(target_date, datetime.min.time())
    day_end = day_start + timedelta(days=1)

    query = db.query(Appointments).filter(
        Appointments.staff_id == staff_id,
        Appointments.date_start >= day_start,
        Appointments.date_start < day_end,
        Appointments.status != "cancelled",
    )
    if exclude_appointment_id is not None:
        query = query.filter(Appointments.id != exclude_appointment_id)
    return query.order_by(Appointments.date_start).all()
