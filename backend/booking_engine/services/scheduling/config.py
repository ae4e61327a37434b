"""
Booking configuration for the scheduling engine.
"""

from dataclasses import dataclass
from functools import lru_cache

from ...config import settings


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for slot generation and booking.

    Attributes:
        slot_step_minutes: Granularity of candidate start times (15 by default)
        horizon_days: Max length of a day-resolver range
        booking_max_attempts: Validate+write attempts before giving up
        schedule_cache_ttl_seconds: Redis TTL for cached weekly schedules
    """
    slot_step_minutes: int = 15
    horizon_days: int = 30
    booking_max_attempts: int = 3
    schedule_cache_ttl_seconds: int = 3600

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes <= 0 or 60 % self.slot_step_minutes:
            raise ValueError(
                f"slot_step_minutes must be a positive divisor of 60, got {self.slot_step_minutes}"
            )
        if self.horizon_days <= 0:
            raise ValueError(f"horizon_days must be positive, got {self.horizon_days}")
        if self.booking_max_attempts <= 0:
            raise ValueError(
                f"booking_max_attempts must be positive, got {self.booking_max_attempts}"
            )
        if self.schedule_cache_ttl_seconds <= 0:
            raise ValueError(
                f"schedule_cache_ttl_seconds must be positive, got {self.schedule_cache_ttl_seconds}"
            )


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton), built from environment settings."""
    return BookingConfig(
        slot_step_minutes=settings.slot_step_minutes,
        horizon_days=settings.horizon_days,
        booking_max_attempts=settings.booking_max_attempts,
        schedule_cache_ttl_seconds=settings.schedule_cache_ttl_seconds,
    )


def time_str_to_minutes(value: str) -> int:
    """
    Convert "HH:MM" to minutes since midnight.

    "24:00" is accepted as end of day. Raises ValueError on anything else
    that is not a valid wall-clock time.
    """
    hours, sep, minutes = value.strip().partition(":")
    if not sep or not hours.isdigit() or not minutes.isdigit() or len(minutes) != 2:
        raise ValueError(f"Invalid time string: {value!r}")
    h, m = int(hours), int(minutes)
    if m > 59 or h > 24 or (h == 24 and m):
        raise ValueError(f"Invalid time string: {value!r}")
    return h * 60 + m
