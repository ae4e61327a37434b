"""
backend/booking_engine/services/events.py

Event emitter: pushes appointment lifecycle events to a Redis queue for
notification consumers.

Queue:
- events:appointments — appointment_created / appointment_rescheduled /
  appointment_cancelled

Emitting is best effort: without Redis, or on a Redis error, the event is
logged and dropped.
"""

import json
import logging
import time
from typing import Optional

from redis import Redis

logger = logging.getLogger(__name__)

EVENTS_QUEUE = "events:appointments"


def emit_event(redis: Optional[Redis], event_type: str, payload: dict) -> None:
    """Push an event to the `events:appointments` list."""
    if redis is None:
        logger.debug(f"Redis disabled, event dropped: {event_type}")
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis.rpush(EVENTS_QUEUE, json.dumps(event, default=str))
        logger.info(f"Event emitted: {event_type} → {EVENTS_QUEUE}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")


def appointment_payload(appointment) -> dict:
    return {
        "appointment_id": appointment.id,
        "staff_id": appointment.staff_id,
        "customer_id": appointment.customer_id,
        "service_id": appointment.service_id,
        "date_start": appointment.date_start.isoformat(),
        "duration_minutes": appointment.duration_minutes,
        "status": appointment.status,
    }
