from __future__ import annotations
from uuid import UUID
from datetime import datetime
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.models.user import User
from .base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User identity rows."""

    def __init__(self):
        super().__init__(User)

    async def touch_last_active(
        self,
        db: AsyncSession,
        user_id: UUID,
        when: datetime
    ) -> None:
        """Set ``last_active_at`` without loading the row."""
        try:
            await db.execute(
                update(User)
                .where(User.id == user_id)
                .values(last_active_at=when)
                .execution_options(synchronize_session=False)
            )
            await db.flush()

        except SQLAlchemyError as e:
            logger.error(f"Error updating last_active_at for user {user_id}: {e}")
            await db.rollback()
            raise
