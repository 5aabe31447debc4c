import json
import logging
import uuid
from datetime import datetime
from typing import Optional

from redis.asyncio import Redis, ConnectionPool

from app.core.config import settings

logger = logging.getLogger(__name__)

_pool: Optional[ConnectionPool] = None

USER_CACHE_TTL = 300       # 5 minutes


# ── Connection pool ───────────────────────────────────────────────────────────

async def get_redis_pool() -> ConnectionPool:
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_pool_size,
            decode_responses=True,
        )
        logger.info("Redis connection pool created: %s", settings.redis_url)
    return _pool


async def get_redis() -> Redis:
    pool = await get_redis_pool()
    return Redis(connection_pool=pool)


async def close_redis_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.aclose()
        _pool = None
        logger.info("Redis connection pool closed")


# ── Serialization helpers ─────────────────────────────────────────────────────

def _serialize_user_model(user) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "display_name": user.display_name,
        "role": user.role.value if hasattr(user.role, "value") else user.role,
        "status": user.status,
        "last_active_at": user.last_active_at.isoformat() if user.last_active_at else None,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


def _deserialize_user_model(data: dict):
    from app.models.user import User, UserRole

    user = User()
    user.id = uuid.UUID(data["id"])
    user.email = data.get("email")
    user.display_name = data.get("display_name")
    user.role = UserRole(data["role"]) if data.get("role") else UserRole.MEMBER
    user.status = data.get("status")

    la = data.get("last_active_at")
    user.last_active_at = datetime.fromisoformat(la) if la else None
    ca = data.get("created_at")
    user.created_at = datetime.fromisoformat(ca) if ca else None

    return user


# ── User cache ────────────────────────────────────────────────────────────────

async def get_cached_user(user_id: str):
    """Return a deserialized User ORM instance from cache, or None on miss/error."""
    try:
        r = await get_redis()
        raw = await r.get(f"user:{user_id}")
        if raw:
            return _deserialize_user_model(json.loads(raw))
    except Exception:
        logger.warning("User cache read failed for %s", user_id, exc_info=True)
    return None


async def set_cached_user(user_id: str, user) -> None:
    """Serialize and store a User ORM instance in cache."""
    try:
        r = await get_redis()
        await r.setex(
            f"user:{user_id}",
            USER_CACHE_TTL,
            json.dumps(_serialize_user_model(user)),
        )
    except Exception:
        logger.warning("User cache write failed for %s", user_id, exc_info=True)
