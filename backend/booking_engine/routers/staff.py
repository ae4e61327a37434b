# backend/booking_engine/routers/staff.py
# - PATCH = ALLOWED
# - DELETE = soft-delete (is_active)
# - Domain relation: staff -> weekly availability, breaks
#   (every schedule edit invalidates the cached schedule)

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import (
    Staff as DBStaff,
    StaffAvailability as DBStaffAvailability,
    StaffBreaks as DBStaffBreaks,
)
from ..redis_client import get_redis
from ..schemas.staff import (
    AvailabilityRead,
    AvailabilityUpsert,
    BreakCreate,
    BreakRead,
    StaffCreate,
    StaffRead,
    StaffUpdate,
)
from ..services.scheduling import invalidate_staff_schedule

router = APIRouter(prefix="/staff", tags=["staff"])


def _get_staff_or_404(db: Session, id: int) -> DBStaff:
    obj = db.get(DBStaff, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return obj


# ---------------------------------------------------------------------
# Base CRUD
# ---------------------------------------------------------------------

@router.get("/", response_model=list[StaffRead])
def list_staff(db: Session = Depends(get_db)):
    return db.query(DBStaff).filter(DBStaff.is_active == 1).order_by(DBStaff.id).all()


@router.get("/{id}", response_model=StaffRead)
def get_staff(id: int, db: Session = Depends(get_db)):
    return _get_staff_or_404(db, id)


@router.post("/", response_model=StaffRead, status_code=status.HTTP_201_CREATED)
def create_staff(data: StaffCreate, db: Session = Depends(get_db)):
    obj = DBStaff(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=StaffRead)
def update_staff(
    id: int,
    data: StaffUpdate,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    obj = _get_staff_or_404(db, id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(obj, field, int(value) if field == "is_active" else value)

    db.commit()
    db.refresh(obj)
    invalidate_staff_schedule(redis, id)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff(
    id: int,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    obj = _get_staff_or_404(db, id)
    obj.is_active = 0
    db.commit()
    invalidate_staff_schedule(redis, id)


# ---------------------------------------------------------------------
# Domain: Staff → Weekly availability
# ---------------------------------------------------------------------

@router.get("/{id}/availability", response_model=list[AvailabilityRead])
def list_availability(id: int, db: Session = Depends(get_db)):
    _get_staff_or_404(db, id)
    return (
        db.query(DBStaffAvailability)
        .filter(DBStaffAvailability.staff_id == id)
        .order_by(DBStaffAvailability.day_of_week)
        .all()
    )


@router.put("/{id}/availability/{day_of_week}", response_model=AvailabilityRead)
def upsert_availability(
    id: int,
    data: AvailabilityUpsert,
    day_of_week: int = Path(ge=0, le=6, description="0 = Sunday"),
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    _get_staff_or_404(db, id)

    obj = (
        db.query(DBStaffAvailability)
        .filter(
            DBStaffAvailability.staff_id == id,
            DBStaffAvailability.day_of_week == day_of_week,
        )
        .first()
    )
    if obj is None:
        obj = DBStaffAvailability(staff_id=id, day_of_week=day_of_week)
        db.add(obj)

    obj.start_time = data.start_time
    obj.end_time = data.end_time
    obj.is_available = int(data.is_available)

    db.commit()
    db.refresh(obj)
    invalidate_staff_schedule(redis, id)
    return obj


@router.delete("/{id}/availability/{day_of_week}", status_code=status.HTTP_204_NO_CONTENT)
def disable_day(
    id: int,
    day_of_week: int = Path(ge=0, le=6),
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    obj = (
        db.query(DBStaffAvailability)
        .filter(
            DBStaffAvailability.staff_id == id,
            DBStaffAvailability.day_of_week == day_of_week,
        )
        .first()
    )
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    db.delete(obj)
    db.commit()
    invalidate_staff_schedule(redis, id)


# ---------------------------------------------------------------------
# Domain: Staff → Breaks
# ---------------------------------------------------------------------

@router.get("/{id}/breaks", response_model=list[BreakRead])
def list_breaks(id: int, db: Session = Depends(get_db)):
    _get_staff_or_404(db, id)
    return (
        db.query(DBStaffBreaks)
        .filter(DBStaffBreaks.staff_id == id)
        .order_by(DBStaffBreaks.day_of_week, DBStaffBreaks.start_time)
        .all()
    )


@router.post("/{id}/breaks", response_model=BreakRead, status_code=status.HTTP_201_CREATED)
def create_break(
    id: int,
    data: BreakCreate,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    _get_staff_or_404(db, id)
    obj = DBStaffBreaks(staff_id=id, **data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    invalidate_staff_schedule(redis, id)
    return obj


@router.delete("/{id}/breaks/{break_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_break(
    id: int,
    break_id: int,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis),
):
    obj = db.get(DBStaffBreaks, break_id)
    if not obj or obj.staff_id != id:
        raise HTTPException(status_code=404, detail="Not found")
    db.delete(obj)
    db.commit()
    invalidate_staff_schedule(redis, id)
