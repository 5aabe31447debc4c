"""
Undo service: reverses a very recent match action.

The window is measured from the action's ``created_at`` to the moment the
undo request is handled. An action exactly ``UNDO_WINDOW_SECONDS`` old can
still be undone; one second later it cannot.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from datetime import datetime
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.core.config import settings
from app.core.errors import ActionNotFound, UndoExpired, StoreUnavailable
from app.models.match_action import MatchAction
from app.repositories.match_action_repository import MatchActionRepository
from app.repositories.user_repository import UserRepository
from app.utils.clock import Clock, utc_now, age_seconds

logger = logging.getLogger(__name__)


@dataclass
class UndoableAction:
    action: MatchAction
    seconds_remaining: int


class UndoService:
    """
    Service for undo operations on the action ledger.

    Undo is a hard delete of the action row. Nothing else is touched: a
    mutual match that the action completed simply stops existing.
    """

    UNDO_WINDOW_SECONDS = settings.undo_window_seconds

    def __init__(
        self,
        action_repo: Optional[MatchActionRepository] = None,
        user_repo: Optional[UserRepository] = None,
        clock: Clock = utc_now
    ):
        """
        Initialize service with repositories.

        Args:
            action_repo: MatchActionRepository instance (creates new if None)
            user_repo: UserRepository instance (creates new if None)
            clock: Source of the current time
        """
        self.action_repo = action_repo or MatchActionRepository()
        self.user_repo = user_repo or UserRepository()
        self.clock = clock

    def is_within_window(self, created_at: datetime, now: datetime) -> bool:
        return age_seconds(created_at, now) <= self.UNDO_WINDOW_SECONDS

    def seconds_remaining(self, created_at: datetime, now: datetime) -> int:
        """
        Whole seconds left in the undo window, never negative.

        Example:
            >>> service.seconds_remaining(now - timedelta(seconds=10), now)
            290
        """
        remaining = self.UNDO_WINDOW_SECONDS - age_seconds(created_at, now)
        return max(0, math.floor(remaining))

    async def get_undoable(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> Optional[UndoableAction]:
        """
        Get the user's most recent action if it can still be undone.

        Only the single latest action is considered; an older action inside
        the window is not offered when a newer one exists.

        Args:
            db: Active database session
            user_id: UUID of the user

        Returns:
            UndoableAction with remaining seconds, or None if nothing can be undone
        """
        try:
            action = await self.action_repo.get_latest_by_actor(db, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching undoable action for user {user_id}: {e}")
            raise StoreUnavailable()

        if action is None:
            return None

        now = self.clock()
        if not self.is_within_window(action.created_at, now):
            return None

        return UndoableAction(
            action=action,
            seconds_remaining=self.seconds_remaining(action.created_at, now)
        )

    async def undo(
        self,
        db: AsyncSession,
        user_id: UUID,
        target_id: UUID
    ) -> MatchAction:
        """
        Undo the user's action on ``target_id``.

        Args:
            db: Active database session
            user_id: UUID of the acting user
            target_id: UUID of the user the action was on

        Returns:
            The deleted action (its ``kind`` tells the client what was undone)

        Raises:
            ActionNotFound: If the user has no action on ``target_id``
            UndoExpired: If the action is older than the undo window
            StoreUnavailable: If the delete cannot be completed

        Example:
            undone = await service.undo(db, me.id, them.id)
            print(f"Undid {undone.kind}")
        """
        try:
            action = await self.action_repo.get_for_pair(db, user_id, target_id)
            if action is None:
                raise ActionNotFound()

            now = self.clock()
            if not self.is_within_window(action.created_at, now):
                raise UndoExpired(
                    f"Action is too old to undo (limit {self.UNDO_WINDOW_SECONDS} seconds)"
                )

            await self.action_repo.delete_for_pair(db, user_id, target_id)
            await self.user_repo.touch_last_active(db, user_id, now)
            await self.action_repo.commit(db)

        except SQLAlchemyError as e:
            logger.error(f"Error undoing action {user_id} -> {target_id}: {e}")
            raise StoreUnavailable()

        logger.info(
            "match_action_undone actor=%s target=%s kind=%s",
            user_id, target_id, action.kind
        )
        return action
