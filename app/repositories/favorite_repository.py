from __future__ import annotations
from uuid import UUID
from sqlalchemy import select, and_, or_, delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.models.favorite import Favorite
from .base import BaseRepository

logger = logging.getLogger(__name__)


class FavoriteRepository(BaseRepository[Favorite]):
    """Repository for Favorite. Favorites are read by discovery and removed by blocks."""

    def __init__(self):
        super().__init__(Favorite)

    async def get_favorite_ids(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> set[UUID]:
        """Get the ids of every user ``user_id`` has favorited."""
        try:
            stmt = select(Favorite.favorite_user_id).where(Favorite.user_id == user_id)
            result = await db.execute(stmt)
            return set(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Error fetching favorites for user {user_id}: {e}")
            raise

    async def delete_between(
        self,
        db: AsyncSession,
        user_a: UUID,
        user_b: UUID
    ) -> int:
        """
        Delete favorites between two users in both directions.

        Returns:
            Number of rows deleted (0 to 2)
        """
        try:
            result = await db.execute(
                sql_delete(Favorite).where(
                    or_(
                        and_(Favorite.user_id == user_a, Favorite.favorite_user_id == user_b),
                        and_(Favorite.user_id == user_b, Favorite.favorite_user_id == user_a)
                    )
                )
            )
            await db.flush()
            return result.rowcount or 0

        except SQLAlchemyError as e:
            logger.error(f"Error deleting favorites between {user_a} and {user_b}: {e}")
            await db.rollback()
            raise
