"""Tests for the conflict validator."""

import logging
import random

import pytest

from booking_engine.models import Staff
from booking_engine.services.scheduling import ErrorKind, ValidationResult, validate_appointment_booking
from booking_engine.services.scheduling.validator import (
    OUTSIDE_AVAILABILITY,
    SLOT_TAKEN,
    STAFF_NOT_FOUND,
)

from .conftest import MONDAY, TUESDAY, at, book


class TestStaffLookup:
    def test_unknown_staff(self, db, seeded):
        result = validate_appointment_booking(db, 999, at(MONDAY, "10:00"), 30)
        assert not result.is_valid
        assert result.kind is ErrorKind.NOT_FOUND
        assert result.error == STAFF_NOT_FOUND

    def test_inactive_staff(self, db, seeded):
        db.get(Staff, seeded.alice_id).is_active = 0
        db.commit()
        result = validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "10:00"), 30)
        assert result.kind is ErrorKind.NOT_FOUND


class TestWorkingHours:
    def test_inside_hours(self, db, seeded):
        assert validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "16:30"), 30).is_valid

    def test_runs_past_closing(self, db, seeded, caplog):
        with caplog.at_level(logging.INFO):
            result = validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "16:45"), 30)
        assert result.kind is ErrorKind.OUTSIDE_AVAILABILITY
        assert result.error == OUTSIDE_AVAILABILITY
        assert "outside staff availability" in caplog.text

    def test_starts_before_opening(self, db, seeded):
        result = validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "08:45"), 30)
        assert result.kind is ErrorKind.OUTSIDE_AVAILABILITY

    def test_day_off(self, db, seeded):
        result = validate_appointment_booking(db, seeded.alice_id, at(TUESDAY, "10:00"), 30)
        assert result.kind is ErrorKind.OUTSIDE_AVAILABILITY

    def test_overlapping_break(self, db, seeded):
        result = validate_appointment_booking(db, seeded.bob_id, at(MONDAY, "11:45"), 30)
        assert result.kind is ErrorKind.OUTSIDE_AVAILABILITY

    def test_right_after_break(self, db, seeded):
        assert validate_appointment_booking(db, seeded.bob_id, at(MONDAY, "13:00"), 30).is_valid

    @pytest.mark.parametrize("duration", [0, -30])
    def test_non_positive_duration(self, db, seeded, duration):
        result = validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "10:00"), duration)
        assert result.kind is ErrorKind.OUTSIDE_AVAILABILITY


class TestConflicts:
    def test_overlap_rejected(self, db, seeded, caplog):
        existing = book(db, seeded, seeded.alice_id, "10:00", 60)
        with caplog.at_level(logging.WARNING):
            result = validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "10:30"), 30)
        assert result.kind is ErrorKind.BOOKING_CONFLICT
        assert result.error == SLOT_TAKEN
        assert f"conflicting_id={existing.id}" in caplog.text

    def test_adjacent_is_fine(self, db, seeded):
        book(db, seeded, seeded.alice_id, "09:30", 30)
        assert validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "10:00"), 30).is_valid
        assert validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "09:00"), 30).is_valid

    def test_cancelled_is_ignored(self, db, seeded):
        book(db, seeded, seeded.alice_id, "10:00", 60, status="cancelled")
        assert validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "10:00"), 60).is_valid

    def test_other_staff_is_ignored(self, db, seeded):
        book(db, seeded, seeded.bob_id, "10:00", 60)
        assert validate_appointment_booking(db, seeded.alice_id, at(MONDAY, "10:00"), 60).is_valid

    def test_reschedule_does_not_conflict_with_itself(self, db, seeded):
        existing = book(db, seeded, seeded.alice_id, "10:00", 60)
        result = validate_appointment_booking(
            db, seeded.alice_id, at(MONDAY, "10:30"), 60, exclude_appointment_id=existing.id
        )
        assert result.is_valid

    def test_excluding_one_still_checks_others(self, db, seeded):
        moving = book(db, seeded, seeded.alice_id, "10:00", 30)
        book(db, seeded, seeded.alice_id, "11:00", 30)
        result = validate_appointment_booking(
            db, seeded.alice_id, at(MONDAY, "10:45"), 30, exclude_appointment_id=moving.id
        )
        assert result.kind is ErrorKind.BOOKING_CONFLICT


class TestNoOverlapProperty:
    @pytest.mark.parametrize("seed", range(5))
    def test_valid_bookings_never_overlap(self, db, seeded, seed):
        """Only bookings that pass validation are written; none of them may overlap."""
        rng = random.Random(seed)
        written = []
        for _ in range(25):
            start = at(MONDAY, f"{rng.randint(8, 17):02d}:{rng.choice([0, 15, 30, 45]):02d}")
            minutes = rng.choice([15, 30, 45, 60, 90])
            if validate_appointment_booking(db, seeded.alice_id, start, minutes).is_valid:
                written.append(book(db, seeded, seeded.alice_id, start.strftime("%H:%M"), minutes))

        intervals = sorted((a.date_start, a.date_end) for a in written)
        for (_, prev_end), (next_start, _) in zip(intervals, intervals[1:]):
            assert prev_end <= next_start


class TestValidationResult:
    def test_to_dict(self):
        assert ValidationResult.ok().to_dict() == {"isValid": True}
        assert ValidationResult.fail(ErrorKind.BOOKING_CONFLICT, SLOT_TAKEN).to_dict() == {
            "isValid": False,
            "error": SLOT_TAKEN,
        }

    def test_error_kinds(self):
        assert ErrorKind.NOT_FOUND.http_status == 404
        assert ErrorKind.OUTSIDE_AVAILABILITY.http_status == 422
        assert ErrorKind.BOOKING_CONFLICT.http_status == 409
        assert ErrorKind.BOOKING_CONFLICT.retryable
        assert not ErrorKind.OUTSIDE_AVAILABILITY.retryable
