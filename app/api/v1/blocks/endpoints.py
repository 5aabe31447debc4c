from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid
from app.core.database import get_db
from app.api.deps import get_current_user, get_block_service
from app.models.user import User
from app.schemas.block import (
    BlockCreate,
    BlockCreateResponse,
    BlockedUser,
    BlockedUsersResponse,
)
from app.services.block_service import BlockService
from app.utils.pagination import OffsetPage

router = APIRouter()


@router.post("", response_model=BlockCreateResponse)
async def block_user(
    block_data: BlockCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: BlockService = Depends(get_block_service)
):
    """
    Block a user.

    Removes every like, pass, super-like, and favorite between the two users
    in both directions. Blocking someone already blocked succeeds again.
    """
    result = await service.block(db, current_user.id, block_data.blocked_user_id)
    return BlockCreateResponse(
        blocked=True,
        blocked_user_id=block_data.blocked_user_id,
        removed_actions=result.removed_actions,
        removed_favorites=result.removed_favorites,
    )


@router.get("", response_model=BlockedUsersResponse)
async def list_blocked_users(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: BlockService = Depends(get_block_service)
):
    """List users blocked by the current user, newest first"""
    blocks, total = await service.list_blocked(db, current_user.id, limit=limit, offset=offset)
    return BlockedUsersResponse(
        items=[
            BlockedUser(blocked_user_id=block.blocked_id, created_at=block.created_at)
            for block in blocks
        ],
        total=total,
        has_more=OffsetPage.build(limit, offset, total).has_more,
    )


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unblock_user(
    user_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: BlockService = Depends(get_block_service)
):
    """Unblock a user. Removed actions and favorites are not restored."""
    await service.unblock(db, current_user.id, user_id)
