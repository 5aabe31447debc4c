"""
Candidate selector for the discovery feed.

Builds the viewer's exclusion set, scans every matchable profile in batches,
runs each one through the eligibility filter, and returns one page of
survivors decorated with distance, favorite, and liked-me flags.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.core.config import settings
from app.core.errors import StoreUnavailable
from app.models.profile import Profile
from app.models.match_action import MatchActionKind
from app.models.user_filters import ANY_VALUE
from app.repositories.profile_repository import ProfileRepository
from app.repositories.block_repository import BlockRepository
from app.repositories.match_action_repository import MatchActionRepository
from app.repositories.favorite_repository import FavoriteRepository
from app.services.eligibility_service import LIFESTYLE_RULES, EligibilityService, ViewerContext
from app.services.geo import miles_to_km
from app.utils.pagination import paginate

logger = logging.getLogger(__name__)

EMPTY_PROFILE_NOT_FOUND = "profile_not_found"
EMPTY_INCOMPLETE_PROFILE = "incomplete_profile"
EMPTY_NO_MATCHES = "no_matches"


@dataclass
class Candidate:
    profile: Profile
    distance_km: Optional[float] = None
    is_favorite: bool = False
    has_liked_me: bool = False
    is_super_like: bool = False


@dataclass
class DiscoveryResult:
    candidates: List[Candidate] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0
    empty_reason: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.candidates) < self.total


class DiscoveryService:
    """
    Service computing which profiles a viewer may see next.

    Candidates are ordered by profile creation time, newest first, with the
    profile id as tie-breaker so pages are stable while the pool is unchanged.
    """

    def __init__(
        self,
        profile_repo: Optional[ProfileRepository] = None,
        block_repo: Optional[BlockRepository] = None,
        action_repo: Optional[MatchActionRepository] = None,
        favorite_repo: Optional[FavoriteRepository] = None,
        eligibility: Optional[EligibilityService] = None,
        batch_size: Optional[int] = None
    ):
        """
        Initialize service with repositories.

        Args:
            profile_repo: ProfileRepository instance (creates new if None)
            block_repo: BlockRepository instance (creates new if None)
            action_repo: MatchActionRepository instance (creates new if None)
            favorite_repo: FavoriteRepository instance (creates new if None)
            eligibility: EligibilityService instance (creates new if None)
            batch_size: Profiles fetched per query while scanning (settings value if None)
        """
        self.profile_repo = profile_repo or ProfileRepository()
        self.block_repo = block_repo or BlockRepository()
        self.action_repo = action_repo or MatchActionRepository()
        self.favorite_repo = favorite_repo or FavoriteRepository()
        self.eligibility = eligibility or EligibilityService()
        self.batch_size = batch_size or settings.discovery_batch_size

    async def select_candidates(
        self,
        db: AsyncSession,
        viewer_id: UUID,
        limit: int,
        offset: int = 0
    ) -> DiscoveryResult:
        """
        Return one page of eligible candidates for ``viewer_id``.

        Args:
            db: Active database session
            viewer_id: UUID of the viewing user
            limit: Page size
            offset: Number of eligible candidates to skip

        Returns:
            DiscoveryResult; ``empty_reason`` is set when no candidates are returned

        Raises:
            StoreUnavailable: If the database cannot be read

        Example:
            result = await service.select_candidates(db, user.id, limit=40)
            for candidate in result.candidates:
                print(candidate.profile.first_name, candidate.distance_km)
        """
        return await self._select(db, viewer_id, limit, offset, reciprocal=True)

    async def select_candidates_for_client(
        self,
        db: AsyncSession,
        client_id: UUID,
        limit: int,
        offset: int = 0
    ) -> DiscoveryResult:
        """
        Run the same pipeline on behalf of a matchmaker's client.

        The mutual gender rule is skipped; every other rule applies from the
        client's point of view.
        """
        return await self._select(db, client_id, limit, offset, reciprocal=False)

    async def build_viewer_context(
        self,
        db: AsyncSession,
        profile: Profile
    ) -> ViewerContext:
        """Combine the viewer's profile and saved filters into a ViewerContext."""
        filters = await self.profile_repo.get_filters(db, profile.user_id)

        preferences = {}
        if filters is not None:
            if filters.max_distance_miles is not None:
                preferences["max_distance_km"] = miles_to_km(filters.max_distance_miles)
            for name in ("min_age", "max_age", "min_height", "max_height"):
                preferences[name] = getattr(filters, name)
            for name in ("body_types", "ethnicities", "religions", "education_levels", "zodiac_signs"):
                preferences[name] = tuple(getattr(filters, name) or ())
            for name in LIFESTYLE_RULES:
                value = getattr(filters, name)
                preferences[name] = None if value in (None, "", ANY_VALUE) else value

        return ViewerContext(
            user_id=profile.user_id,
            gender=profile.gender,
            looking_for=tuple(profile.looking_for or ()),
            latitude=profile.latitude,
            longitude=profile.longitude,
            **preferences,
        )

    async def _select(
        self,
        db: AsyncSession,
        viewer_id: UUID,
        limit: int,
        offset: int,
        reciprocal: bool
    ) -> DiscoveryResult:
        result = DiscoveryResult(limit=limit, offset=offset)

        try:
            profile = await self.profile_repo.get_by_user_id(db, viewer_id)
            if profile is None:
                result.empty_reason = EMPTY_PROFILE_NOT_FOUND
                return result

            viewer = await self.build_viewer_context(db, profile)
            if reciprocal and not viewer.is_complete:
                result.empty_reason = EMPTY_INCOMPLETE_PROFILE
                return result

            excluded_ids = {viewer_id}
            excluded_ids |= await self.block_repo.get_blocked_ids(db, viewer_id)
            excluded_ids |= await self.action_repo.get_acted_on_ids(db, viewer_id)

            survivors, scanned, rejected = await self._scan_pool(
                db, viewer, excluded_ids, reciprocal
            )

            page = paginate(survivors, offset, limit)

            favorite_ids = await self.favorite_repo.get_favorite_ids(db, viewer_id) if page else set()
            liker_kinds = await self.action_repo.get_liker_kinds(db, viewer_id) if page else {}

        except SQLAlchemyError as e:
            logger.error(f"Error selecting candidates for user {viewer_id}: {e}")
            raise StoreUnavailable()

        result.total = len(survivors)
        result.candidates = [
            Candidate(
                profile=candidate,
                distance_km=self.eligibility.distance_to(viewer, candidate),
                is_favorite=candidate.user_id in favorite_ids,
                has_liked_me=candidate.user_id in liker_kinds,
                is_super_like=liker_kinds.get(candidate.user_id) == MatchActionKind.SUPER_LIKE.value,
            )
            for candidate in page
        ]
        if not result.candidates:
            result.empty_reason = EMPTY_NO_MATCHES

        logger.debug(
            f"Discovery for user {viewer_id}: scanned={scanned} eligible={len(survivors)} "
            f"returned={len(result.candidates)} rejected={dict(rejected)}"
        )
        return result

    async def _scan_pool(
        self,
        db: AsyncSession,
        viewer: ViewerContext,
        excluded_ids: Set[UUID],
        reciprocal: bool
    ) -> Tuple[List[Profile], int, Counter]:
        """
        Walk the whole candidate pool in keyset batches.

        Every batch is run through the eligibility filter, so the survivors
        (and therefore ``total``) cover all matchable profiles, not only the
        newest batch.
        """
        genders = viewer.looking_for if reciprocal else None
        born_after, born_on_or_before = self.eligibility.birth_date_bounds(viewer)

        survivors: List[Profile] = []
        rejected: Counter = Counter()
        scanned = 0
        cursor = None
        while True:
            batch = await self.profile_repo.get_discovery_pool(
                db,
                excluded_ids,
                self.batch_size,
                genders=genders,
                born_after=born_after,
                born_on_or_before=born_on_or_before,
                after=cursor,
            )
            scanned += len(batch)
            for candidate in batch:
                reason = self.eligibility.explain(
                    viewer, candidate, excluded_ids, reciprocal=reciprocal
                )
                if reason is None:
                    survivors.append(candidate)
                else:
                    rejected[reason] += 1

            if len(batch) < self.batch_size:
                return survivors, scanned, rejected
            last = batch[-1]
            cursor = (last.created_at, last.id)
