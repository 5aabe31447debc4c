"""
Match action repository: the ledger of like / pass / super_like decisions.

This module is the only place that writes ``match_actions`` rows. It provides
the replace-on-write primitive, reverse lookups for mutual match detection,
and the reads behind undo and the match and like listings.
"""

from __future__ import annotations
from typing import Iterable, Optional, Sequence
from uuid import UUID
from datetime import datetime
from sqlalchemy import select, and_, or_, desc, delete as sql_delete, case, exists, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from app.models.match_action import MatchAction, MatchActionKind, POSITIVE_KINDS
from app.models.profile import Profile
from app.models.user import User, UNAVAILABLE_STATUSES
from .base import BaseRepository

logger = logging.getLogger(__name__)


class MatchActionRepository(BaseRepository[MatchAction]):
    """
    Repository for MatchAction with pair-oriented queries.

    Provides methods for:
    - Replacing the action for an (actor, target) pair
    - Looking up the reverse positive action
    - Getting a user's most recent action (undo)
    - Deleting actions for one or both directions of a pair
    - Listing mutual matches, unanswered likes received, and pending likes sent
    """

    def __init__(self):
        """Initialize with MatchAction model."""
        super().__init__(MatchAction)

    async def get_for_pair(
        self,
        db: AsyncSession,
        actor_id: UUID,
        target_id: UUID
    ) -> Optional[MatchAction]:
        """
        Get the action ``actor_id`` recorded on ``target_id``.

        Args:
            db: Active database session
            actor_id: UUID of the user who acted
            target_id: UUID of the user acted upon

        Returns:
            The MatchAction if one exists, None otherwise
        """
        try:
            stmt = select(MatchAction).where(
                and_(
                    MatchAction.actor_id == actor_id,
                    MatchAction.target_id == target_id
                )
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error fetching action {actor_id} -> {target_id}: {e}")
            raise

    async def replace(
        self,
        db: AsyncSession,
        actor_id: UUID,
        target_id: UUID,
        kind: MatchActionKind,
        created_at: datetime
    ) -> MatchAction:
        """
        Delete any existing row for (actor, target) and insert a new one.

        Both statements run in the session's current transaction, so a
        failure leaves either the old row or the new row once the caller
        commits or rolls back, never both and never neither.

        Args:
            db: Active database session
            actor_id: UUID of the acting user
            target_id: UUID of the target user
            kind: The new action kind
            created_at: Timestamp of the action (restarts the undo window)

        Returns:
            The newly inserted MatchAction

        Raises:
            IntegrityError: If a concurrent insert for the same pair won the race
        """
        try:
            await db.execute(
                sql_delete(MatchAction).where(
                    and_(
                        MatchAction.actor_id == actor_id,
                        MatchAction.target_id == target_id
                    )
                )
            )

            action = MatchAction(
                actor_id=actor_id,
                target_id=target_id,
                kind=MatchActionKind(kind).value,
                created_at=created_at
            )
            db.add(action)
            await db.flush()
            return action

        except IntegrityError as e:
            logger.warning(f"Concurrent write on action {actor_id} -> {target_id}: {e}")
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error replacing action {actor_id} -> {target_id}: {e}")
            await db.rollback()
            raise

    async def get_reverse_positive(
        self,
        db: AsyncSession,
        actor_id: UUID,
        target_id: UUID
    ) -> Optional[MatchAction]:
        """
        Get the like or super_like that ``target_id`` recorded on ``actor_id``.

        Args:
            db: Active database session
            actor_id: UUID of the user who just acted
            target_id: UUID of the user they acted on

        Returns:
            The reverse positive action if present, None otherwise
        """
        try:
            stmt = select(MatchAction).where(
                and_(
                    MatchAction.actor_id == target_id,
                    MatchAction.target_id == actor_id,
                    MatchAction.kind.in_(POSITIVE_KINDS)
                )
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error fetching reverse action {target_id} -> {actor_id}: {e}")
            raise

    async def get_latest_by_actor(
        self,
        db: AsyncSession,
        actor_id: UUID
    ) -> Optional[MatchAction]:
        """
        Get the most recent action authored by ``actor_id``.

        The undo window is checked by the caller against its own clock.
        """
        try:
            stmt = (
                select(MatchAction)
                .where(MatchAction.actor_id == actor_id)
                .order_by(desc(MatchAction.created_at))
                .limit(1)
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error(f"Error fetching last action for user {actor_id}: {e}")
            raise

    async def delete_for_pair(
        self,
        db: AsyncSession,
        actor_id: UUID,
        target_id: UUID
    ) -> int:
        """
        Delete the action ``actor_id`` recorded on ``target_id``.

        Returns:
            Number of rows deleted (0 or 1)
        """
        try:
            result = await db.execute(
                sql_delete(MatchAction).where(
                    and_(
                        MatchAction.actor_id == actor_id,
                        MatchAction.target_id == target_id
                    )
                )
            )
            await db.flush()
            return result.rowcount or 0

        except SQLAlchemyError as e:
            logger.error(f"Error deleting action {actor_id} -> {target_id}: {e}")
            await db.rollback()
            raise

    async def delete_between(
        self,
        db: AsyncSession,
        user_a: UUID,
        user_b: UUID
    ) -> int:
        """
        Delete actions between two users in both directions.

        Returns:
            Number of rows deleted (0 to 2)
        """
        try:
            result = await db.execute(
                sql_delete(MatchAction).where(
                    or_(
                        and_(MatchAction.actor_id == user_a, MatchAction.target_id == user_b),
                        and_(MatchAction.actor_id == user_b, MatchAction.target_id == user_a)
                    )
                )
            )
            await db.flush()
            return result.rowcount or 0

        except SQLAlchemyError as e:
            logger.error(f"Error deleting actions between {user_a} and {user_b}: {e}")
            await db.rollback()
            raise

    async def get_acted_on_ids(
        self,
        db: AsyncSession,
        actor_id: UUID
    ) -> set[UUID]:
        """Get every target ``actor_id`` has acted on, whatever the kind."""
        try:
            stmt = select(MatchAction.target_id).where(MatchAction.actor_id == actor_id)
            result = await db.execute(stmt)
            return set(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Error fetching acted-on ids for user {actor_id}: {e}")
            raise

    async def get_liker_kinds(
        self,
        db: AsyncSession,
        target_id: UUID
    ) -> dict[UUID, str]:
        """Map each user who liked or super-liked ``target_id`` to the kind they used."""
        try:
            stmt = select(MatchAction.actor_id, MatchAction.kind).where(
                and_(
                    MatchAction.target_id == target_id,
                    MatchAction.kind.in_(POSITIVE_KINDS)
                )
            )
            result = await db.execute(stmt)
            return {actor_id: kind for actor_id, kind in result.all()}

        except SQLAlchemyError as e:
            logger.error(f"Error fetching likers of user {target_id}: {e}")
            raise

    async def get_mutual_pairs(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> list[tuple[UUID, datetime, datetime]]:
        """
        Get every user ``user_id`` is mutually matched with.

        Returns:
            List of (other_user_id, my_action_at, their_action_at)
        """
        mine = aliased(MatchAction)
        theirs = aliased(MatchAction)
        try:
            stmt = (
                select(mine.target_id, mine.created_at, theirs.created_at)
                .select_from(mine)
                .join(
                    theirs,
                    and_(
                        theirs.actor_id == mine.target_id,
                        theirs.target_id == mine.actor_id
                    )
                )
                .where(
                    and_(
                        mine.actor_id == user_id,
                        mine.kind.in_(POSITIVE_KINDS),
                        theirs.kind.in_(POSITIVE_KINDS)
                    )
                )
            )
            result = await db.execute(stmt)
            return [tuple(row) for row in result.all()]

        except SQLAlchemyError as e:
            logger.error(f"Error fetching mutual matches for user {user_id}: {e}")
            raise

    @staticmethod
    def _with_visible_counterpart(stmt, counterpart_id, excluded_ids: Iterable[UUID]):
        """Keep rows whose other user has a visible profile and an available account."""
        excluded = list(excluded_ids)
        stmt = (
            stmt.join(Profile, Profile.user_id == counterpart_id)
            .join(User, User.id == counterpart_id)
            .where(
                and_(
                    Profile.profile_hidden == False,
                    or_(
                        User.status.is_(None),
                        User.status.notin_(UNAVAILABLE_STATUSES)
                    )
                )
            )
        )
        if excluded:
            stmt = stmt.where(counterpart_id.notin_(excluded))
        return stmt

    async def _page_with_total(
        self,
        db: AsyncSession,
        stmt,
        order_by: Sequence,
        skip: int,
        limit: int
    ) -> tuple[list[MatchAction], int]:
        total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
        result = await db.execute(stmt.order_by(*order_by).offset(skip).limit(limit))
        return list(result.scalars().all()), total or 0

    async def get_unanswered_likes(
        self,
        db: AsyncSession,
        user_id: UUID,
        kinds: Sequence[str] = POSITIVE_KINDS,
        excluded_ids: Iterable[UUID] = (),
        skip: int = 0,
        limit: int = 20
    ) -> tuple[list[MatchAction], int]:
        """
        Get likes received by ``user_id`` from people they have not acted on yet.

        Likers with a hidden profile, an unavailable account, or an id in
        ``excluded_ids`` are filtered in the query, so every page is full
        and the total matches what can be paged through.

        Args:
            db: Active database session
            user_id: UUID of the user who was liked
            kinds: Action kinds to include
            excluded_ids: Liker ids to leave out (blocks)
            skip: Number of likes to skip
            limit: Maximum number of likes to return

        Returns:
            Tuple of (likes, total); super-likes first, then newest first
        """
        mine = aliased(MatchAction)
        try:
            stmt = select(MatchAction).where(
                and_(
                    MatchAction.target_id == user_id,
                    MatchAction.kind.in_(list(kinds)),
                    ~exists().where(
                        and_(
                            mine.actor_id == user_id,
                            mine.target_id == MatchAction.actor_id
                        )
                    )
                )
            )
            stmt = self._with_visible_counterpart(stmt, MatchAction.actor_id, excluded_ids)
            return await self._page_with_total(
                db,
                stmt,
                (
                    case((MatchAction.kind == MatchActionKind.SUPER_LIKE.value, 0), else_=1),
                    desc(MatchAction.created_at)
                ),
                skip,
                limit
            )

        except SQLAlchemyError as e:
            logger.error(f"Error fetching likes received for user {user_id}: {e}")
            raise

    async def get_pending_likes_sent(
        self,
        db: AsyncSession,
        user_id: UUID,
        kinds: Sequence[str] = POSITIVE_KINDS,
        excluded_ids: Iterable[UUID] = (),
        skip: int = 0,
        limit: int = 20
    ) -> tuple[list[MatchAction], int]:
        """
        Get likes ``user_id`` sent that have not been returned yet.

        A like stops being pending once the target likes or super-likes back.
        A pass from the target leaves it pending, so a pass is never revealed.

        Returns:
            Tuple of (likes, total), newest first
        """
        theirs = aliased(MatchAction)
        try:
            stmt = select(MatchAction).where(
                and_(
                    MatchAction.actor_id == user_id,
                    MatchAction.kind.in_(list(kinds)),
                    ~exists().where(
                        and_(
                            theirs.actor_id == MatchAction.target_id,
                            theirs.target_id == user_id,
                            theirs.kind.in_(POSITIVE_KINDS)
                        )
                    )
                )
            )
            stmt = self._with_visible_counterpart(stmt, MatchAction.target_id, excluded_ids)
            return await self._page_with_total(
                db, stmt, (desc(MatchAction.created_at), desc(MatchAction.id)), skip, limit
            )

        except SQLAlchemyError as e:
            logger.error(f"Error fetching likes sent by user {user_id}: {e}")
            raise
