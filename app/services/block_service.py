"""
Block service: blocking, unblocking and the block cascade.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.core.errors import ActionNotFound, InvalidTarget, StoreUnavailable
from app.models.block import Block
from app.repositories.block_repository import BlockRepository
from app.repositories.match_action_repository import MatchActionRepository
from app.repositories.favorite_repository import FavoriteRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class BlockResult:
    block: Block
    removed_actions: int
    removed_favorites: int
    created: bool


class BlockService:
    """
    Service for blocks.

    Blocking removes every action and favorite between the two users in
    both directions, in the same transaction as the block itself and
    regardless of the undo window. Unblocking restores none of them.
    """

    def __init__(
        self,
        block_repo: Optional[BlockRepository] = None,
        action_repo: Optional[MatchActionRepository] = None,
        favorite_repo: Optional[FavoriteRepository] = None,
        user_repo: Optional[UserRepository] = None
    ):
        self.block_repo = block_repo or BlockRepository()
        self.action_repo = action_repo or MatchActionRepository()
        self.favorite_repo = favorite_repo or FavoriteRepository()
        self.user_repo = user_repo or UserRepository()

    async def block(
        self,
        db: AsyncSession,
        blocker_id: UUID,
        blocked_id: UUID
    ) -> BlockResult:
        """
        Block ``blocked_id`` on behalf of ``blocker_id``.

        Blocking an already blocked user is not an error; the cascade runs
        again and the existing block is returned.

        Raises:
            InvalidTarget: If the user blocks themselves or the target does not exist
            StoreUnavailable: If the transaction cannot be completed
        """
        if blocker_id == blocked_id:
            raise InvalidTarget("You cannot block yourself")

        try:
            if not await self.user_repo.exists(db, blocked_id):
                raise InvalidTarget("Target user not found")

            block = await self.block_repo.get_pair(db, blocker_id, blocked_id)
            created = block is None
            if created:
                block = await self.block_repo.create(
                    db, {"blocker_id": blocker_id, "blocked_id": blocked_id}
                )

            removed_actions = await self.action_repo.delete_between(db, blocker_id, blocked_id)
            removed_favorites = await self.favorite_repo.delete_between(db, blocker_id, blocked_id)
            await self.block_repo.commit(db)

        except SQLAlchemyError as e:
            logger.error(f"Error blocking {blocked_id} for user {blocker_id}: {e}")
            raise StoreUnavailable()

        logger.info(
            "block_created blocker=%s blocked=%s removed_actions=%s removed_favorites=%s",
            blocker_id, blocked_id, removed_actions, removed_favorites
        )
        return BlockResult(
            block=block,
            removed_actions=removed_actions,
            removed_favorites=removed_favorites,
            created=created,
        )

    async def unblock(
        self,
        db: AsyncSession,
        blocker_id: UUID,
        blocked_id: UUID
    ) -> None:
        """
        Remove a block placed by ``blocker_id``.

        Raises:
            ActionNotFound: If no such block exists
        """
        try:
            removed = await self.block_repo.delete_pair(db, blocker_id, blocked_id)
            if removed == 0:
                raise ActionNotFound("Block not found")
            await self.block_repo.commit(db)
        except SQLAlchemyError as e:
            logger.error(f"Error unblocking {blocked_id} for user {blocker_id}: {e}")
            raise StoreUnavailable()

        logger.info(f"User {blocker_id} unblocked {blocked_id}")

    async def list_blocked(
        self,
        db: AsyncSession,
        blocker_id: UUID,
        limit: int = 50,
        offset: int = 0
    ) -> tuple[List[Block], int]:
        """Blocks placed by ``blocker_id``, newest first, with the total count."""
        try:
            return await self.block_repo.list_by_blocker(db, blocker_id, skip=offset, limit=limit)
        except SQLAlchemyError as e:
            logger.error(f"Error listing blocks for user {blocker_id}: {e}")
            raise StoreUnavailable()
