"""
Match service: records like / pass / super_like actions and derives mutual matches.

A mutual match is never stored. It exists exactly while both directions of
a pair hold a like or super_like, so it is recomputed on every read.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from app.core.errors import ActionNotFound, InvalidTarget, StoreUnavailable
from app.models.match_action import MatchAction, MatchActionKind, POSITIVE_KINDS
from app.models.profile import Profile
from app.repositories.match_action_repository import MatchActionRepository
from app.repositories.block_repository import BlockRepository
from app.repositories.user_repository import UserRepository
from app.repositories.profile_repository import ProfileRepository
from app.utils.clock import Clock, utc_now, ensure_aware
from app.utils.pagination import paginate

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    action: MatchAction
    is_mutual: bool


@dataclass
class MatchStatus:
    my_action: Optional[str]
    their_action: Optional[str]
    is_mutual: bool


@dataclass
class MutualMatch:
    profile: Profile
    matched_at: datetime


@dataclass
class LikeReceived:
    profile: Profile
    kind: str
    liked_at: datetime


@dataclass
class LikeSent:
    profile: Profile
    kind: str
    liked_at: datetime


class MatchService:
    """
    Service for the action ledger.

    Handles:
    - Recording an action (replace-on-write, last write wins)
    - Mutual match detection right after the write
    - Pairwise match status and unmatching
    - Mutual match, likes-received, and likes-sent listings
    """

    # A double-submit that loses the unique-constraint race is retried this many times
    WRITE_RETRIES = 1

    def __init__(
        self,
        action_repo: Optional[MatchActionRepository] = None,
        block_repo: Optional[BlockRepository] = None,
        user_repo: Optional[UserRepository] = None,
        profile_repo: Optional[ProfileRepository] = None,
        clock: Clock = utc_now
    ):
        """
        Initialize service with repositories.

        Args:
            action_repo: MatchActionRepository instance (creates new if None)
            block_repo: BlockRepository instance (creates new if None)
            user_repo: UserRepository instance (creates new if None)
            profile_repo: ProfileRepository instance (creates new if None)
            clock: Source of the current time
        """
        self.action_repo = action_repo or MatchActionRepository()
        self.block_repo = block_repo or BlockRepository()
        self.user_repo = user_repo or UserRepository()
        self.profile_repo = profile_repo or ProfileRepository()
        self.clock = clock

    async def record_action(
        self,
        db: AsyncSession,
        actor_id: UUID,
        target_id: UUID,
        kind: MatchActionKind
    ) -> ActionResult:
        """
        Record ``actor_id``'s decision on ``target_id``.

        This operation:
        1. Validates the target (not self, exists, available, not blocked)
        2. Replaces any previous action on the same target and updates the
           actor's last_active_at, committing both together
        3. Checks for the reverse positive action

        Args:
            db: Active database session
            actor_id: UUID of the acting user
            target_id: UUID of the target user
            kind: like, pass or super_like

        Returns:
            ActionResult with the stored action and whether it completed a mutual match

        Raises:
            InvalidTarget: If the target is the actor, missing, unavailable, or blocked
            StoreUnavailable: If the write cannot be completed

        Example:
            result = await service.record_action(db, me.id, them.id, MatchActionKind.LIKE)
            if result.is_mutual:
                print("It's a match!")
        """
        kind = MatchActionKind(kind)
        if actor_id == target_id:
            raise InvalidTarget("You cannot act on your own profile")

        try:
            target = await self.user_repo.get(db, target_id)
            if target is None:
                raise InvalidTarget("Target user not found")
            if not target.is_available:
                raise InvalidTarget("Target user is not available")
            if await self.block_repo.exists_between(db, actor_id, target_id):
                raise InvalidTarget("Cannot interact with this user")

            action = await self._write_action(db, actor_id, target_id, kind)

            # Runs after the write is committed so two people liking each
            # other at the same moment cannot both miss the match.
            is_mutual = await self.check_mutual(db, actor_id, target_id, kind)

        except SQLAlchemyError as e:
            logger.error(f"Error recording action {actor_id} -> {target_id}: {e}")
            raise StoreUnavailable()

        logger.info(
            "match_action_recorded actor=%s target=%s kind=%s",
            actor_id, target_id, kind.value
        )
        if is_mutual:
            logger.info("mutual_match_detected actor=%s target=%s", actor_id, target_id)

        return ActionResult(action=action, is_mutual=is_mutual)

    async def _write_action(
        self,
        db: AsyncSession,
        actor_id: UUID,
        target_id: UUID,
        kind: MatchActionKind
    ) -> MatchAction:
        attempt = 0
        while True:
            try:
                created_at = self.clock()
                action = await self.action_repo.replace(
                    db, actor_id, target_id, kind, created_at=created_at
                )
                await self.user_repo.touch_last_active(db, actor_id, created_at)
                await self.action_repo.commit(db)
                return action
            except IntegrityError:
                if attempt >= self.WRITE_RETRIES:
                    raise
                attempt += 1
                logger.warning(f"Retrying action write {actor_id} -> {target_id} after conflict")

    async def check_mutual(
        self,
        db: AsyncSession,
        actor_id: UUID,
        target_id: UUID,
        kind: MatchActionKind
    ) -> bool:
        """
        True iff ``kind`` is positive and ``target_id`` has a positive action on ``actor_id``.

        A pass never completes a match, whatever the other side did.
        """
        if MatchActionKind(kind).value not in POSITIVE_KINDS:
            return False
        reverse = await self.action_repo.get_reverse_positive(db, actor_id, target_id)
        return reverse is not None

    async def get_match_status(
        self,
        db: AsyncSession,
        user_id: UUID,
        other_id: UUID
    ) -> MatchStatus:
        """Both directions of the pair and whether they form a mutual match."""
        try:
            mine = await self.action_repo.get_for_pair(db, user_id, other_id)
            theirs = await self.action_repo.get_for_pair(db, other_id, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching match status {user_id} <-> {other_id}: {e}")
            raise StoreUnavailable()

        return MatchStatus(
            my_action=mine.kind if mine else None,
            their_action=theirs.kind if theirs else None,
            is_mutual=bool(mine and theirs and mine.is_positive and theirs.is_positive),
        )

    async def unmatch(
        self,
        db: AsyncSession,
        user_id: UUID,
        other_id: UUID
    ) -> int:
        """
        Remove every action between two users.

        Returns:
            Number of action rows removed

        Raises:
            InvalidTarget: If ``other_id`` is the caller
            ActionNotFound: If the pair has no actions at all
        """
        if user_id == other_id:
            raise InvalidTarget("You cannot unmatch yourself")

        try:
            removed = await self.action_repo.delete_between(db, user_id, other_id)
            if removed == 0:
                raise ActionNotFound("No match exists with this user")
            await self.action_repo.commit(db)
        except SQLAlchemyError as e:
            logger.error(f"Error unmatching {user_id} and {other_id}: {e}")
            raise StoreUnavailable()

        logger.info(f"User {user_id} unmatched {other_id} ({removed} actions removed)")
        return removed

    async def list_mutual_matches(
        self,
        db: AsyncSession,
        user_id: UUID,
        limit: int = 20,
        offset: int = 0
    ) -> tuple[List[MutualMatch], int]:
        """
        List the user's mutual matches, newest match first.

        A match happened when the second of the two likes was recorded.
        Hidden profiles and unavailable accounts are skipped.

        Returns:
            Tuple of (page of matches, total visible matches)
        """
        try:
            pairs = await self.action_repo.get_mutual_pairs(db, user_id)
            profiles = await self.profile_repo.get_by_user_ids(db, [other for other, _, _ in pairs])
        except SQLAlchemyError as e:
            logger.error(f"Error listing matches for user {user_id}: {e}")
            raise StoreUnavailable()

        matches = []
        for other_id, my_at, their_at in pairs:
            profile = profiles.get(other_id)
            if profile is None or profile.profile_hidden or not profile.user.is_available:
                continue
            matched_at = max(ensure_aware(my_at), ensure_aware(their_at))
            matches.append(MutualMatch(profile=profile, matched_at=matched_at))

        matches.sort(key=lambda m: m.matched_at, reverse=True)
        return paginate(matches, offset, limit), len(matches)

    async def list_likes_received(
        self,
        db: AsyncSession,
        user_id: UUID,
        limit: int = 20,
        offset: int = 0,
        include_super: bool = True
    ) -> tuple[List[LikeReceived], int]:
        """
        List people who liked ``user_id`` and are still waiting for a decision.

        Super-likes come first, then newest first. Likers the user already
        acted on, hidden profiles, unavailable accounts, and blocked users
        are left out by the query itself.

        Returns:
            Tuple of (page of likes, total pending likes)
        """
        kinds = POSITIVE_KINDS if include_super else (MatchActionKind.LIKE.value,)
        try:
            blocked = await self.block_repo.get_blocked_ids(db, user_id)
            likes, total = await self.action_repo.get_unanswered_likes(
                db, user_id, kinds=kinds, excluded_ids=blocked, skip=offset, limit=limit
            )
            profiles = await self.profile_repo.get_by_user_ids(db, [like.actor_id for like in likes])
        except SQLAlchemyError as e:
            logger.error(f"Error listing likes received for user {user_id}: {e}")
            raise StoreUnavailable()

        received = [
            LikeReceived(profile=profiles[like.actor_id], kind=like.kind, liked_at=like.created_at)
            for like in likes
            if like.actor_id in profiles
        ]
        return received, total

    async def list_likes_sent(
        self,
        db: AsyncSession,
        user_id: UUID,
        limit: int = 20,
        offset: int = 0,
        include_super: bool = True
    ) -> tuple[List[LikeSent], int]:
        """
        List people ``user_id`` liked who have not liked back yet, newest first.

        Returns:
            Tuple of (page of likes, total pending likes)
        """
        kinds = POSITIVE_KINDS if include_super else (MatchActionKind.LIKE.value,)
        try:
            blocked = await self.block_repo.get_blocked_ids(db, user_id)
            likes, total = await self.action_repo.get_pending_likes_sent(
                db, user_id, kinds=kinds, excluded_ids=blocked, skip=offset, limit=limit
            )
            profiles = await self.profile_repo.get_by_user_ids(db, [like.target_id for like in likes])
        except SQLAlchemyError as e:
            logger.error(f"Error listing likes sent by user {user_id}: {e}")
            raise StoreUnavailable()

        return [
            LikeSent(profile=profiles[like.target_id], kind=like.kind, liked_at=like.created_at)
            for like in likes
            if like.target_id in profiles
        ], total
