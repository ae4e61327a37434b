# backend/booking_engine/routers/slots.py
"""
Slots API endpoints.

Advisory:      GET  /slots/day       - offerable start times for staff + service
Advisory:      GET  /slots/calendar  - days on which the staff member works
Authoritative: POST /slots/validate  - dry-run of the booking check
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Staff as DBStaff
from ..redis_client import get_redis
from ..schemas.slots import (
    SlotsCalendarResponse,
    SlotsDayResponse,
    ValidateRequest,
    ValidateResponse,
)
from ..services.scheduling import (
    calculate_available_days,
    calculate_day_slots,
    get_booking_config,
    validate_appointment_booking,
)

router = APIRouter(prefix="/slots", tags=["slots"])


def _require_staff(db: Session, staff_id: int) -> None:
    staff = db.get(DBStaff, staff_id)
    if not staff or not staff.is_active:
        raise HTTPException(status_code=404, detail="Staff member not found")


@router.get("/day", response_model=SlotsDayResponse)
def get_slots_day(
    staff_id: int,
    service_id: int,
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    """Get offerable start times for a service with a staff member on a day."""
    _require_staff(db, staff_id)

    result = calculate_day_slots(
        db=db,
        staff_id=staff_id,
        service_id=service_id,
        target_date=target_date,
        config=get_booking_config(),
        redis=redis,
    )
    if not result["service_duration_min"]:
        raise HTTPException(status_code=404, detail="Service not found")

    return SlotsDayResponse(**result)


@router.get("/calendar", response_model=SlotsCalendarResponse)
def get_slots_calendar(
    staff_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    """Get days on which a staff member has working hours (bookings ignored)."""
    _require_staff(db, staff_id)

    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date is before start_date")

    result = calculate_available_days(
        db=db,
        staff_id=staff_id,
        start_date=start_date,
        end_date=end_date,
        config=get_booking_config(),
        redis=redis,
    )
    return SlotsCalendarResponse(**result)


@router.post("/validate", response_model=ValidateResponse, response_model_exclude_none=True)
def validate_slot(data: ValidateRequest, db: Session = Depends(get_db)):
    """Run the booking check without writing anything."""
    result = validate_appointment_booking(
        db,
        data.staff_id,
        data.date_start,
        data.duration_minutes,
        exclude_appointment_id=data.exclude_appointment_id,
    )
    return ValidateResponse(
        **result.to_dict(),
        kind=result.kind.value if result.kind else None,
    )
