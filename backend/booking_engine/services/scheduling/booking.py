"""
Booking transactions.

Validation and the write happen in one transaction so that two concurrent
requests for overlapping slots cannot both pass validation:

- SQLite: the transaction is opened with BEGIN IMMEDIATE, which takes the
  database write lock before anything is read.
- Other dialects: the staff row is locked with SELECT ... FOR UPDATE. On
  PostgreSQL the appointments_no_overlap exclusion constraint (see the
  Alembic migration) rejects any overlap that still slips through.

Lock timeouts and violations of the overlap constraint roll back and retry
with a fresh validation pass; other integrity errors are re-raised.
Rejections raise BookingRejected carrying the ValidationResult; callers
map its kind to a response.
"""

import logging
from datetime import timedelta
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from .config import BookingConfig, get_booking_config
from .validator import (
    SLOT_TAKEN,
    ErrorKind,
    ValidationResult,
    validate_appointment_booking,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fields whose change requires a fresh conflict check
_TIMING_FIELDS = {"staff_id", "date_start", "duration_minutes", "service_id"}

# PostgreSQL exclusion constraint created by the initial Alembic migration
OVERLAP_CONSTRAINT = "appointments_no_overlap"


class BookingRejected(Exception):
    """A create/reschedule/cancel request that must not be persisted."""

    def __init__(self, result: ValidationResult):
        super().__init__(result.error)
        self.result = result

    @property
    def kind(self) -> ErrorKind:
        return self.result.kind

    @property
    def status_code(self) -> int:
        return self.result.kind.http_status


def _reject(kind: ErrorKind, error: str) -> BookingRejected:
    return BookingRejected(ValidationResult.fail(kind, error))


# ── Transaction helpers ──────────────────────────────────────────────────


def _begin_write(db: Session) -> None:
    """Take the SQLite write lock up front (no-op on other dialects)."""
    conn = db.connection()
    if conn.dialect.name != "sqlite":
        return
    if not conn.connection.dbapi_connection.in_transaction:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def _is_overlap_violation(error: IntegrityError) -> bool:
    """True only for the storage-level double-booking guard."""
    return OVERLAP_CONSTRAINT in str(error.orig)


def _lock_staff(db: Session, staff_id: int):
    """Load the staff row, locking it where the dialect supports it."""
    from ...models.generated import Staff

    return (
        db.query(Staff)
        .filter(Staff.id == staff_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def run_booking_transaction(
    db: Session,
    work: Callable[[], T],
    config: BookingConfig | None = None,
) -> T:
    """
    Run work() and commit, retrying on lock timeouts and overlap violations.

    work() must perform its own validation; BookingRejected is never retried.
    """
    config = config or get_booking_config()
    last_error: Optional[Exception] = None

    for attempt in range(1, config.booking_max_attempts + 1):
        try:
            result = work()
            db.commit()
            return result
        except BookingRejected:
            db.rollback()
            raise
        except (OperationalError, IntegrityError) as e:
            db.rollback()
            if isinstance(e, IntegrityError) and not _is_overlap_violation(e):
                raise
            last_error = e
            logger.warning(
                f"Booking transaction failed (attempt {attempt}/{config.booking_max_attempts}): {e}"
            )

    raise _reject(ErrorKind.BOOKING_CONFLICT, SLOT_TAKEN) from last_error


# ── Operations ───────────────────────────────────────────────────────────


def create_appointment(db: Session, data, config: BookingConfig | None = None):
    """
    Validate and insert an appointment atomically.

    Args:
        db: session (fresh, no pending writes)
        data: AppointmentCreate

    Returns:
        The persisted Appointments row.

    Raises:
        BookingRejected
    """
    from ...models.generated import Appointments, Customers, Services

    def work():
        _begin_write(db)

        staff = None
        if data.staff_id is not None:
            staff = _lock_staff(db, data.staff_id)

        service = db.get(Services, data.service_id)
        if not service or not service.is_active:
            raise _reject(ErrorKind.NOT_FOUND, "Service not found")
        if not db.get(Customers, data.customer_id):
            raise _reject(ErrorKind.NOT_FOUND, "Customer not found")

        duration = data.duration_minutes or service.duration_minutes

        if data.staff_id is not None and data.status != "cancelled":
            result = validate_appointment_booking(
                db, data.staff_id, data.date_start, duration, staff=staff
            )
            if not result.is_valid:
                raise BookingRejected(result)

        obj = Appointments(
            staff_id=data.staff_id,
            customer_id=data.customer_id,
            service_id=data.service_id,
            date_start=data.date_start,
            date_end=data.date_start + timedelta(minutes=duration),
            duration_minutes=duration,
            status=data.status,
            notes=data.notes,
        )
        db.add(obj)
        db.flush()
        return obj

    obj = run_booking_transaction(db, work, config)
    db.refresh(obj)

    logger.info(
        f"Appointment created: appointment_id={obj.id}, staff_id={obj.staff_id}, "
        f"time={obj.date_start:%Y-%m-%d %H:%M}, duration={obj.duration_minutes}"
    )
    return obj


def reschedule_appointment(
    db: Session,
    appointment_id: int,
    data,
    config: BookingConfig | None = None,
):
    """
    Update an appointment, re-validating when its timing or staff changes.

    The appointment itself is excluded from the conflict check.

    Raises:
        BookingRejected
    """
    from ...models.generated import Appointments, Services

    fields = data.model_dump(exclude_unset=True)

    def work():
        _begin_write(db)

        obj = db.get(Appointments, appointment_id, populate_existing=True)
        if not obj or obj.status == "cancelled":
            raise _reject(ErrorKind.NOT_FOUND, "Appointment not found")

        staff_id = fields.get("staff_id", obj.staff_id)
        service_id = fields.get("service_id", obj.service_id)
        date_start = fields.get("date_start") or obj.date_start
        status = fields.get("status") or obj.status

        service = None
        if "service_id" in fields:
            if service_id is not None:
                service = db.get(Services, service_id)
            if not service or not service.is_active:
                raise _reject(ErrorKind.NOT_FOUND, "Service not found")

        duration = fields.get("duration_minutes")
        if not duration:
            duration = service.duration_minutes if service else obj.duration_minutes

        staff = None
        if staff_id is not None:
            staff = _lock_staff(db, staff_id)

        if staff_id is not None and status != "cancelled" and _TIMING_FIELDS & fields.keys():
            result = validate_appointment_booking(
                db,
                staff_id,
                date_start,
                duration,
                exclude_appointment_id=obj.id,
                staff=staff,
            )
            if not result.is_valid:
                raise BookingRejected(result)

        obj.staff_id = staff_id
        obj.service_id = service_id
        obj.date_start = date_start
        obj.duration_minutes = duration
        obj.date_end = date_start + timedelta(minutes=duration)
        obj.status = status
        if "notes" in fields:
            obj.notes = fields["notes"]
        db.flush()
        return obj

    obj = run_booking_transaction(db, work, config)
    db.refresh(obj)

    logger.info(
        f"Appointment updated: appointment_id={obj.id}, staff_id={obj.staff_id}, "
        f"time={obj.date_start:%Y-%m-%d %H:%M}, status={obj.status}"
    )
    return obj


def cancel_appointment(db: Session, appointment_id: int) -> tuple:
    """
    Cancel an appointment. Cancelling twice is a no-op.

    Returns:
        (appointment, changed); changed is False when it was already cancelled.

    Raises:
        BookingRejected (NOT_FOUND)
    """
    from ...models.generated import Appointments

    obj = db.get(Appointments, appointment_id)
    if not obj:
        raise _reject(ErrorKind.NOT_FOUND, "Appointment not found")

    if obj.status == "cancelled":
        return obj, False

    obj.status = "cancelled"
    db.commit()
    db.refresh(obj)
    logger.info(f"Appointment cancelled: appointment_id={obj.id}")
    return obj, True
