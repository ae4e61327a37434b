"""
Pydantic schemas for slots API.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class SlotsDayResponse(BaseModel):
    """Offerable start times for one staff member, service and day."""
    staff_id: int
    service_id: int
    date: date
    service_duration_min: int
    slot_step_minutes: int = Field(description="Candidate granularity in minutes")
    available_times: list[str] = Field(description='Ascending "HH:MM" start times')

    model_config = {"from_attributes": True}


class SlotsCalendarResponse(BaseModel):
    """Days on which the staff member has working hours."""
    staff_id: int
    start_date: date
    end_date: date
    available_days: list[date]

    # Metadata
    horizon_days: int

    model_config = {"from_attributes": True}


class ValidateRequest(BaseModel):
    """Dry-run booking check (nothing is written)."""
    staff_id: int
    date_start: datetime
    duration_minutes: int = Field(gt=0)
    exclude_appointment_id: Optional[int] = None

    @field_validator("date_start")
    @classmethod
    def strip_tz(cls, v: datetime) -> datetime:
        return v.replace(tzinfo=None, microsecond=0)


class ValidateResponse(BaseModel):
    isValid: bool
    error: Optional[str] = None
    kind: Optional[str] = None
