# backend/booking_engine/routers/appointments.py
# - POST / PATCH go through the booking transaction (validate + write)
# - DELETE = 405, cancellation is POST /{id}/cancel
# - BookingRejected is turned into a response by the handler in main.py

from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Appointments as DBAppointments
from ..redis_client import get_redis
from ..schemas.appointments import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentUpdate,
)
from ..services.events import appointment_payload, emit_event
from ..services.scheduling import (
    cancel_appointment,
    create_appointment,
    reschedule_appointment,
)

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("/", response_model=list[AppointmentRead])
def list_appointments(
    staff_id: Optional[int] = None,
    on_date: Optional[date] = None,
    include_cancelled: bool = True,
    db: Session = Depends(get_db),
):
    query = db.query(DBAppointments)
    if staff_id is not None:
        query = query.filter(DBAppointments.staff_id == staff_id)
    if on_date is not None:
        day_start = datetime.combine(on_date, datetime.min.time())
        query = query.filter(
            DBAppointments.date_start >= day_start,
            DBAppointments.date_start < day_start + timedelta(days=1),
        )
    if not include_cancelled:
        query = query.filter(DBAppointments.status != "cancelled")
    return query.order_by(DBAppointments.date_start).all()


@router.get("/{id}", response_model=AppointmentRead)
def get_appointment(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBAppointments, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
def create_appointment_endpoint(
    data: AppointmentCreate,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    obj = create_appointment(db, data)
    emit_event(redis, "appointment_created", appointment_payload(obj))
    return obj


@router.patch("/{id}", response_model=AppointmentRead)
def update_appointment(
    id: int,
    data: AppointmentUpdate,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    obj = reschedule_appointment(db, id, data)
    emit_event(redis, "appointment_rescheduled", appointment_payload(obj))
    return obj


@router.post("/{id}/cancel", response_model=AppointmentRead)
def cancel_appointment_endpoint(
    id: int,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    obj, changed = cancel_appointment(db, id)
    if changed:
        emit_event(redis, "appointment_cancelled", appointment_payload(obj))
    return obj


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
