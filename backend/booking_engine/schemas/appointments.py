# backend/booking_engine/schemas/appointments.py

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

AppointmentStatus = Literal["scheduled", "completed", "cancelled", "pending"]


def _naive(v: datetime) -> datetime:
    # all times are local wall-clock; an offset, if sent, is dropped
    return v.replace(tzinfo=None, microsecond=0) if v is not None else v


class AppointmentCreate(BaseModel):
    customer_id: int
    service_id: int
    staff_id: Optional[int] = None  # NULL = unassigned

    date_start: datetime
    duration_minutes: Optional[int] = Field(None, gt=0)  # defaults to service duration

    status: AppointmentStatus = "scheduled"
    notes: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("date_start")
    @classmethod
    def strip_tz(cls, v: datetime) -> datetime:
        return _naive(v)


class AppointmentUpdate(BaseModel):
    staff_id: Optional[int] = None
    service_id: Optional[int] = None
    date_start: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("date_start")
    @classmethod
    def strip_tz(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _naive(v)

    @field_validator("service_id")
    @classmethod
    def service_not_null(cls, v: Optional[int]) -> int:
        # may be omitted, but an appointment always has a service
        if v is None:
            raise ValueError("service_id cannot be null")
        return v


class AppointmentRead(BaseModel):
    id: int

    customer_id: int
    service_id: int
    staff_id: Optional[int] = None

    date_start: datetime
    date_end: datetime
    duration_minutes: int

    status: str
    notes: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
