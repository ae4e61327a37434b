"""Tests for settings and booking configuration."""

import pytest

from booking_engine.config import BASE_DIR, Settings
from booking_engine.services.scheduling import BookingConfig
from booking_engine.services.scheduling.config import time_str_to_minutes


class TestBookingConfig:
    def test_defaults(self):
        config = BookingConfig()
        assert config.slot_step_minutes == 15
        assert config.horizon_days == 30
        assert config.booking_max_attempts == 3

    @pytest.mark.parametrize("step", [0, -15, 7, 45])
    def test_step_must_divide_an_hour(self, step):
        with pytest.raises(ValueError):
            BookingConfig(slot_step_minutes=step)

    @pytest.mark.parametrize(
        "field", ["horizon_days", "booking_max_attempts", "schedule_cache_ttl_seconds"]
    )
    def test_positive_values(self, field):
        with pytest.raises(ValueError):
            BookingConfig(**{field: 0})


class TestSettings:
    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SLOT_STEP_MINUTES", "30")
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/1")
        settings = Settings()
        assert settings.slot_step_minutes == 30
        assert settings.redis_url == "redis://localhost:6379/1"

    def test_relative_sqlite_path_is_anchored(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///./data/booking.db")
        url = Settings().resolved_database_url
        assert url == f"sqlite:///{BASE_DIR / 'data' / 'booking.db'}"

    def test_other_urls_untouched(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://u:p@db/booking")
        assert Settings().resolved_database_url == "postgresql+psycopg://u:p@db/booking"


class TestTimeStrings:
    @pytest.mark.parametrize("value, minutes", [("00:00", 0), ("09:30", 570), ("24:00", 1440)])
    def test_parse(self, value, minutes):
        assert time_str_to_minutes(value) == minutes

    @pytest.mark.parametrize("value", ["", "9", "09:7", "25:00", "24:30", "10:60", "ab:cd"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            time_str_to_minutes(value)
