from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Callable, Optional
from app.core.database import get_db
from app.core.errors import Forbidden, Unauthenticated
from app.core.security import verify_token
from app.core.cache import get_cached_user, set_cached_user
from app.models.user import User, UserRole
from app.services.discovery_service import DiscoveryService
from app.services.match_service import MatchService
from app.services.undo_service import UndoService
from app.services.block_service import BlockService
import uuid

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Resolve the bearer token to an available user"""
    if credentials is None:
        raise Unauthenticated("Not authenticated")

    # Verify token
    user_id = verify_token(credentials.credentials, "access")
    if user_id is None:
        raise Unauthenticated()

    try:
        user_uuid = uuid.UUID(user_id)
    except ValueError:
        raise Unauthenticated()

    # Check cache first
    user = await get_cached_user(user_id)

    if user is None:
        # Cache miss, load from database
        result = await db.execute(select(User).where(User.id == user_uuid))
        user = result.scalar_one_or_none()
        if user is None:
            raise Unauthenticated()
        await set_cached_user(user_id, user)

    if not user.is_available:
        raise Unauthenticated("Account is not active")

    return user


def require_roles(allowed_roles: List[UserRole]) -> Callable:
    """Dependency factory for role-based access control"""
    def role_dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise Forbidden(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return current_user
    return role_dependency


# Common role dependencies
get_matchmaker = require_roles([UserRole.MATCHMAKER, UserRole.ADMIN])


# Service dependencies, overridable in tests
def get_discovery_service() -> DiscoveryService:
    return DiscoveryService()


def get_match_service() -> MatchService:
    return MatchService()


def get_undo_service() -> UndoService:
    return UndoService()


def get_block_service() -> BlockService:
    return BlockService()
