# backend/booking_engine/services/scheduling/__init__.py
"""
Availability & booking conflict engine.

Advisory:      calendar (cached schedule) → generator / days
Authoritative: validator (database read) inside booking transactions
"""

from .config import BookingConfig, get_booking_config
from .intervals import Interval, overlaps, contains, merge_intervals, subtract_intervals
from .calendar import (
    WeeklySchedule,
    resolve_working_windows,
    load_weekly_schedule,
    get_cached_weekly_schedule,
)
from .generator import generate_slots, calculate_day_slots, reconcile_selection
from .days import resolve_available_days, calculate_available_days
from .validator import ErrorKind, ValidationResult, validate_appointment_booking
from .booking import (
    BookingRejected,
    create_appointment,
    reschedule_appointment,
    cancel_appointment,
)
from .invalidator import invalidate_staff_schedule

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "Interval",
    "overlaps",
    "contains",
    "merge_intervals",
    "subtract_intervals",
    "WeeklySchedule",
    "resolve_working_windows",
    "load_weekly_schedule",
    "get_cached_weekly_schedule",
    "generate_slots",
    "calculate_day_slots",
    "reconcile_selection",
    "resolve_available_days",
    "calculate_available_days",
    "ErrorKind",
    "ValidationResult",
    "validate_appointment_booking",
    "BookingRejected",
    "create_appointment",
    "reschedule_appointment",
    "cancel_appointment",
    "invalidate_staff_schedule",
]
