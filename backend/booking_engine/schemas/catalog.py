# backend/booking_engine/schemas/catalog.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ServiceCreate(BaseModel):
    name: str
    duration_minutes: int = Field(gt=0)
    description: Optional[str] = None
    price: Optional[float] = None

    model_config = {"from_attributes": True}


class ServiceRead(BaseModel):
    id: int
    name: str
    duration_minutes: int
    description: Optional[str] = None
    price: Optional[float] = None
    is_active: bool

    model_config = {"from_attributes": True}


class CustomerCreate(BaseModel):
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class CustomerRead(BaseModel):
    id: int
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
