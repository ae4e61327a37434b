from .generated import (
    APPOINTMENT_STATUSES,
    Appointments,
    Base,
    Customers,
    Services,
    Staff,
    StaffAvailability,
    StaffBreaks,
    metadata,
)

__all__ = [
    "APPOINTMENT_STATUSES",
    "Appointments",
    "Base",
    "Customers",
    "Services",
    "Staff",
    "StaffAvailability",
    "StaffBreaks",
    "metadata",
]
