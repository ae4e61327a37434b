"""
Redis connection shared by the schedule cache and the event emitter.

Redis is optional: without REDIS_URL the advisory slot path reads the
database directly and events are dropped.
"""

from typing import Optional

from redis import Redis

from .config import settings

redis_client: Optional[Redis] = (
    Redis.from_url(settings.redis_url, decode_responses=True)
    if settings.redis_url
    else None
)


def get_redis() -> Optional[Redis]:
    """FastAPI dependency returning the shared client (or None)."""
    return redis_client
