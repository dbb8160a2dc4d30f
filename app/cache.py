import json
from uuid import UUID

from loguru import logger
from redis.asyncio import Redis

from app.settings import REDIS_URL, SLOTS_CACHE_TTL

_redis: Redis | None = None


def get_redis() -> Redis:
    global _redis
    if _redis is None:
        _redis = Redis.from_url(REDIS_URL, decode_responses=True)
    return _redis


def _slots_key(room_id: UUID) -> str:
    return f"slots:{room_id}"


async def get_slots_cache(room_id: UUID) -> list | None:
    try:
        data = await get_redis().get(_slots_key(room_id))
        return json.loads(data) if data else None
    except Exception:
        logger.opt(exception=True).warning("Redis get failed, skipping slots cache")
        return None


async def set_slots_cache(room_id: UUID, slots: list) -> None:
    try:
        await get_redis().setex(_slots_key(room_id), SLOTS_CACHE_TTL, json.dumps(slots))
    except Exception:
        logger.opt(exception=True).warning("Redis set failed, skipping slots cache")


async def invalidate_slots_cache(room_id: UUID) -> None:
    try:
        await get_redis().delete(_slots_key(room_id))
    except Exception:
        logger.opt(exception=True).warning("Redis invalidate failed for slots cache")
