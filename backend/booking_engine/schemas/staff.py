# backend/booking_engine/schemas/staff.py

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$|^24:00$")


def _check_time(v: str) -> str:
    if not _TIME_RE.match(v):
        raise ValueError("Time must be in HH:MM format")
    return v


class StaffCreate(BaseModel):
    name: str
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class StaffUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None

    model_config = {"from_attributes": True}


class StaffRead(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# ── Weekly availability ─────────────────────────────────────────────────


class AvailabilityUpsert(BaseModel):
    """Working hours for one weekday (0 = Sunday)."""
    start_time: str = Field(description="HH:MM")
    end_time: str = Field(description="HH:MM")
    is_available: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _check_time(v)

    @model_validator(mode="after")
    def validate_order(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class AvailabilityRead(BaseModel):
    id: int
    staff_id: int
    day_of_week: int
    start_time: str
    end_time: str
    is_available: bool

    model_config = {"from_attributes": True}


# ── Breaks ──────────────────────────────────────────────────────────────


class BreakCreate(BaseModel):
    day_of_week: int = Field(ge=0, le=6, description="0 = Sunday")
    start_time: str = Field(description="HH:MM")
    end_time: str = Field(description="HH:MM")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _check_time(v)

    @model_validator(mode="after")
    def validate_order(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class BreakRead(BaseModel):
    id: int
    staff_id: int
    day_of_week: int
    start_time: str
    end_time: str

    model_config = {"from_attributes": True}
