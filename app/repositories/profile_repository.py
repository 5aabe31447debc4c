"""
Profile repository: viewer lookups and the discovery candidate pool.
"""

from __future__ import annotations
from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Tuple
from uuid import UUID
from sqlalchemy import select, and_, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.models.profile import Profile
from app.models.user import User, UNAVAILABLE_STATUSES
from app.models.user_filters import UserFilters
from .base import BaseRepository

logger = logging.getLogger(__name__)


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for Profile.

    Every query that returns profiles loads the owning User in the same
    round trip, because eligibility needs the account status.
    """

    def __init__(self):
        """Initialize with Profile model."""
        super().__init__(Profile)

    def _with_user(self):
        return (
            select(Profile)
            .join(Profile.user)
            .options(contains_eager(Profile.user))
            .execution_options(populate_existing=True)
        )

    async def get_by_user_id(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> Optional[Profile]:
        """
        Get a user's profile with the user loaded.

        Args:
            db: Active database session
            user_id: UUID of the owning user

        Returns:
            Profile if the user has one, None otherwise
        """
        try:
            stmt = self._with_user().where(Profile.user_id == user_id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error fetching profile for user {user_id}: {e}")
            raise

    async def get_by_user_ids(
        self,
        db: AsyncSession,
        user_ids: Iterable[UUID]
    ) -> dict[UUID, Profile]:
        """Map user id to profile for every id that has one."""
        ids = list(user_ids)
        if not ids:
            return {}
        try:
            stmt = self._with_user().where(Profile.user_id.in_(ids))
            result = await db.execute(stmt)
            return {profile.user_id: profile for profile in result.scalars().all()}

        except SQLAlchemyError as e:
            logger.error(f"Error fetching profiles for {len(ids)} users: {e}")
            raise

    async def get_discovery_pool(
        self,
        db: AsyncSession,
        excluded_ids: Iterable[UUID],
        limit: int,
        *,
        genders: Optional[Sequence[str]] = None,
        born_after: Optional[date] = None,
        born_on_or_before: Optional[date] = None,
        after: Optional[Tuple[datetime, UUID]] = None
    ) -> list[Profile]:
        """
        Fetch one batch of matchable profiles, newest first.

        Visibility, matchability, account status, and exclusions always run
        in SQL. Candidate gender and date-of-birth bounds are pushed down when
        given; a NULL date of birth always passes. Reverse gender preference,
        height, lifestyle filters, and distance are left to the eligibility
        filter.

        Args:
            db: Active database session
            excluded_ids: User ids that must never appear
            limit: Batch size
            genders: Accepted candidate genders (None for any)
            born_after: Exclusive lower bound on date_of_birth
            born_on_or_before: Inclusive upper bound on date_of_birth
            after: ``(created_at, id)`` of the last profile of the previous
                batch; only older profiles are returned

        Returns:
            Profiles ordered by created_at DESC, then id DESC
        """
        conditions = [
            Profile.profile_hidden == False,
            Profile.can_start_matching == True,
            or_(
                User.status.is_(None),
                User.status.notin_(UNAVAILABLE_STATUSES)
            ),
            Profile.user_id.notin_(list(excluded_ids)),
        ]
        if genders is not None:
            conditions.append(Profile.gender.in_(list(genders)))
        if born_after is not None:
            conditions.append(
                or_(Profile.date_of_birth.is_(None), Profile.date_of_birth > born_after)
            )
        if born_on_or_before is not None:
            conditions.append(
                or_(Profile.date_of_birth.is_(None), Profile.date_of_birth <= born_on_or_before)
            )
        if after is not None:
            created_at, profile_id = after
            conditions.append(
                or_(
                    Profile.created_at < created_at,
                    and_(Profile.created_at == created_at, Profile.id < profile_id)
                )
            )

        try:
            stmt = (
                self._with_user()
                .where(and_(*conditions))
                .order_by(desc(Profile.created_at), desc(Profile.id))
                .limit(limit)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Error fetching discovery pool: {e}")
            raise

    async def get_filters(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> Optional[UserFilters]:
        """Get the user's saved discovery filters, if any."""
        try:
            stmt = select(UserFilters).where(UserFilters.user_id == user_id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error fetching filters for user {user_id}: {e}")
            raise
