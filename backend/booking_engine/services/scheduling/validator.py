"""
Conflict Validator: the authoritative gate before an appointment is written.

Steps:
1. Resolve the staff member                     → NotFound
2. Proposed [start, end) inside a working window → OutsideAvailability
3. No overlap with non-cancelled appointments    → BookingConflict
4. Valid

Failures are returned as ValidationResult values, never raised, so callers
have to look at the result before writing. The validator is read-only and
never proposes a different slot.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from .calendar import load_weekly_schedule
from .generator import get_staff_appointments_on
from .intervals import Interval

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    OUTSIDE_AVAILABILITY = "outside_availability"
    BOOKING_CONFLICT = "booking_conflict"

    @property
    def http_status(self) -> int:
        return {
            ErrorKind.NOT_FOUND: 404,
            ErrorKind.OUTSIDE_AVAILABILITY: 422,
            ErrorKind.BOOKING_CONFLICT: 409,
        }[self]

    @property
    def retryable(self) -> bool:
        return self is ErrorKind.BOOKING_CONFLICT


STAFF_NOT_FOUND = "Staff member not found"
OUTSIDE_AVAILABILITY = "Staff member is not available at the requested time"
SLOT_TAKEN = "This time slot is already booked. Please select a different time."


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, kind: ErrorKind, error: str) -> "ValidationResult":
        return cls(is_valid=False, error=error, kind=kind)

    def to_dict(self) -> dict:
        data = {"isValid": self.is_valid}
        if self.error is not None:
            data["error"] = self.error
        return data


def validate_appointment_booking(
    db: Session,
    staff_id: int,
    date_start: datetime,
    duration_minutes: int,
    exclude_appointment_id: Optional[int] = None,
    staff=None,
) -> ValidationResult:
    """
    Validate a proposed appointment against the current persisted state.

    Args:
        db: session; run inside the writing transaction to be authoritative
        staff_id: staff member the appointment is for
        date_start: proposed start (naive local datetime)
        duration_minutes: proposed duration
        exclude_appointment_id: appointment being rescheduled (not a self-conflict)
        staff: already loaded (and possibly locked) staff row, if any

    Returns:
        ValidationResult
    """
    # Step 1: staff
    if staff is None:
        staff = _get_staff(db, staff_id)
    if staff is None or not staff.is_active:
        return ValidationResult.fail(ErrorKind.NOT_FOUND, STAFF_NOT_FOUND)

    # Step 2: working hours (always from the database, never the cache)
    if duration_minutes is None or duration_minutes <= 0:
        return ValidationResult.fail(ErrorKind.OUTSIDE_AVAILABILITY, OUTSIDE_AVAILABILITY)

    proposed = Interval(date_start, date_start + timedelta(minutes=duration_minutes))
    windows = load_weekly_schedule(db, staff_id).windows_for(date_start.date())

    if not any(window.contains(proposed) for window in windows):
        logger.info(
            f"Appointment outside staff availability: staff_id={staff_id}, "
            f"time={proposed.start:%Y-%m-%d %H:%M}-{proposed.end:%H:%M}"
        )
        return ValidationResult.fail(ErrorKind.OUTSIDE_AVAILABILITY, OUTSIDE_AVAILABILITY)

    # Step 3: existing bookings
    appointments = get_staff_appointments_on(
        db, staff_id, date_start.date(), exclude_appointment_id
    )
    for appt in appointments:
        busy = Interval(
            appt.date_start, appt.date_start + timedelta(minutes=appt.duration_minutes)
        )
        if proposed.overlaps(busy):
            logger.warning(
                f"Appointment conflict detected: staff_id={staff_id}, "
                f"proposed={proposed.start:%H:%M}-{proposed.end:%H:%M}, "
                f"conflicting_id={appt.id} ({busy.start:%H:%M}-{busy.end:%H:%M})"
            )
            return ValidationResult.fail(ErrorKind.BOOKING_CONFLICT, SLOT_TAKEN)

    return ValidationResult.ok()


def _get_staff(db: Session, staff_id: int):
    from ...models.generated import Staff
    return db.get(Staff, staff_id)
