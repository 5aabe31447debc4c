"""
Block repository for directed block edges between users.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy import select, and_, or_, desc, func, delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.models.block import Block
from .base import BaseRepository

logger = logging.getLogger(__name__)


class BlockRepository(BaseRepository[Block]):
    """
    Repository for Block.

    A block is directed (blocker -> blocked) but every visibility check
    treats it as symmetric, so most lookups here match both directions.
    """

    def __init__(self):
        """Initialize with Block model."""
        super().__init__(Block)

    async def get_pair(
        self,
        db: AsyncSession,
        blocker_id: UUID,
        blocked_id: UUID
    ) -> Optional[Block]:
        """Get the block ``blocker_id`` placed on ``blocked_id``, if any."""
        try:
            stmt = select(Block).where(
                and_(
                    Block.blocker_id == blocker_id,
                    Block.blocked_id == blocked_id
                )
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error fetching block {blocker_id} -> {blocked_id}: {e}")
            raise

    async def exists_between(
        self,
        db: AsyncSession,
        user_a: UUID,
        user_b: UUID
    ) -> bool:
        """
        Check whether either user has blocked the other.

        Args:
            db: Active database session
            user_a: UUID of one user
            user_b: UUID of the other user

        Returns:
            True if a block exists in either direction
        """
        try:
            stmt = (
                select(Block.id)
                .where(
                    or_(
                        and_(Block.blocker_id == user_a, Block.blocked_id == user_b),
                        and_(Block.blocker_id == user_b, Block.blocked_id == user_a)
                    )
                )
                .limit(1)
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none() is not None

        except SQLAlchemyError as e:
            logger.error(f"Error checking block between {user_a} and {user_b}: {e}")
            raise

    async def get_blocked_ids(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> set[UUID]:
        """
        Get every user on the other side of a block with ``user_id``.

        Includes both users ``user_id`` blocked and users who blocked
        ``user_id``.
        """
        try:
            stmt = select(Block.blocker_id, Block.blocked_id).where(
                or_(Block.blocker_id == user_id, Block.blocked_id == user_id)
            )
            result = await db.execute(stmt)
            ids: set[UUID] = set()
            for blocker_id, blocked_id in result.all():
                ids.add(blocked_id if blocker_id == user_id else blocker_id)
            return ids

        except SQLAlchemyError as e:
            logger.error(f"Error fetching blocked ids for user {user_id}: {e}")
            raise

    async def list_by_blocker(
        self,
        db: AsyncSession,
        blocker_id: UUID,
        skip: int = 0,
        limit: int = 50
    ) -> tuple[list[Block], int]:
        """
        List blocks placed by ``blocker_id``, newest first.

        Returns:
            Tuple of (blocks, total_count)
        """
        try:
            base = select(Block).where(Block.blocker_id == blocker_id)
            count_stmt = select(func.count(Block.id)).where(Block.blocker_id == blocker_id)
            total = (await db.execute(count_stmt)).scalar() or 0

            stmt = base.order_by(desc(Block.created_at), Block.id).offset(skip).limit(limit)
            result = await db.execute(stmt)
            return list(result.scalars().all()), total

        except SQLAlchemyError as e:
            logger.error(f"Error listing blocks by user {blocker_id}: {e}")
            raise

    async def delete_pair(
        self,
        db: AsyncSession,
        blocker_id: UUID,
        blocked_id: UUID
    ) -> int:
        """
        Remove the block ``blocker_id`` placed on ``blocked_id``.

        Returns:
            Number of rows deleted (0 or 1)
        """
        try:
            result = await db.execute(
                sql_delete(Block).where(
                    and_(
                        Block.blocker_id == blocker_id,
                        Block.blocked_id == blocked_id
                    )
                )
            )
            await db.flush()
            return result.rowcount or 0

        except SQLAlchemyError as e:
            logger.error(f"Error deleting block {blocker_id} -> {blocked_id}: {e}")
            await db.rollback()
            raise
