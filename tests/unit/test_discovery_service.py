"""
Unit tests for DiscoveryService with mocked repositories.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import StoreUnavailable
from app.models.profile import Profile
from app.models.user import User, UserRole
from app.models.user_filters import UserFilters
from app.services.discovery_service import DiscoveryService
from app.services.eligibility_service import EligibilityService

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def _make_profile(
    gender: str = "female",
    looking_for: list[str] | None = None,
    minutes_old: int = 0,
    latitude: float | None = None,
    longitude: float | None = None,
) -> Profile:
    user = User()
    user.id = uuid.uuid4()
    user.email = f"{user.id.hex[:8]}@example.com"
    user.role = UserRole.MEMBER
    user.status = "active"

    profile = Profile()
    profile.id = uuid.uuid4()
    profile.user_id = user.id
    profile.user = user
    profile.gender = gender
    profile.looking_for = ["male"] if looking_for is None else looking_for
    profile.latitude = latitude
    profile.longitude = longitude
    profile.profile_hidden = False
    profile.can_start_matching = True
    profile.date_of_birth = date(1994, 5, 5)
    profile.created_at = BASE_TIME - timedelta(minutes=minutes_old)
    return profile


def _make_service(
    viewer: Profile | None,
    pool: list[Profile] | None = None,
    filters: UserFilters | None = None,
    blocked: set | None = None,
    acted: set | None = None,
    favorites: set | None = None,
    likers: dict | None = None,
    batch_size: int = 100,
) -> tuple[DiscoveryService, dict[str, MagicMock]]:
    profile_repo = MagicMock()
    profile_repo.get_by_user_id = AsyncMock(return_value=viewer)
    profile_repo.get_filters = AsyncMock(return_value=filters)
    profile_repo.get_discovery_pool = AsyncMock(return_value=pool or [])

    block_repo = MagicMock()
    block_repo.get_blocked_ids = AsyncMock(return_value=blocked or set())

    action_repo = MagicMock()
    action_repo.get_acted_on_ids = AsyncMock(return_value=acted or set())
    action_repo.get_liker_kinds = AsyncMock(return_value=likers or {})

    favorite_repo = MagicMock()
    favorite_repo.get_favorite_ids = AsyncMock(return_value=favorites or set())

    service = DiscoveryService(
        profile_repo=profile_repo,
        block_repo=block_repo,
        action_repo=action_repo,
        favorite_repo=favorite_repo,
        eligibility=EligibilityService(today=date(2026, 1, 1)),
        batch_size=batch_size,
    )
    repos = {
        "profile": profile_repo,
        "block": block_repo,
        "action": action_repo,
        "favorite": favorite_repo,
    }
    return service, repos


def _viewer(**kwargs) -> Profile:
    values = {"gender": "male", "looking_for": ["female"]}
    values.update(kwargs)
    return _make_profile(**values)


# ---------------------------------------------------------------------------
# Empty results
# ---------------------------------------------------------------------------
class TestEmptyReasons:
    @pytest.mark.asyncio
    async def test_missing_profile(self):
        service, repos = _make_service(viewer=None)

        result = await service.select_candidates(AsyncMock(), uuid.uuid4(), limit=10)

        assert result.candidates == []
        assert result.empty_reason == "profile_not_found"
        repos["profile"].get_discovery_pool.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_incomplete_profile(self):
        viewer = _viewer(looking_for=[])
        service, repos = _make_service(viewer=viewer)

        result = await service.select_candidates(AsyncMock(), viewer.user_id, limit=10)

        assert result.empty_reason == "incomplete_profile"
        repos["profile"].get_discovery_pool.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_matches(self):
        viewer = _viewer()
        service, _ = _make_service(viewer=viewer, pool=[_make_profile(gender="male")])

        result = await service.select_candidates(AsyncMock(), viewer.user_id, limit=10)

        assert result.candidates == []
        assert result.total == 0
        assert result.empty_reason == "no_matches"


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------
class TestSelectCandidates:
    @pytest.mark.asyncio
    async def test_exclusion_set_contains_self_blocks_and_actions(self):
        viewer = _viewer()
        blocked_id, acted_id = uuid.uuid4(), uuid.uuid4()
        service, repos = _make_service(viewer=viewer, blocked={blocked_id}, acted={acted_id})

        await service.select_candidates(AsyncMock(), viewer.user_id, limit=10)

        excluded = repos["profile"].get_discovery_pool.await_args.args[1]
        assert excluded == {viewer.user_id, blocked_id, acted_id}

    @pytest.mark.asyncio
    async def test_offset_counts_eligible_candidates(self):
        viewer = _viewer()
        eligible = [_make_profile(minutes_old=i) for i in range(5)]
        ineligible = _make_profile(gender="male")
        pool = eligible[:2] + [ineligible] + eligible[2:]
        service, _ = _make_service(viewer=viewer, pool=pool)

        result = await service.select_candidates(AsyncMock(), viewer.user_id, limit=2, offset=2)

        assert [c.profile for c in result.candidates] == eligible[2:4]
        assert result.total == 5
        assert result.has_more is True

    @pytest.mark.asyncio
    async def test_offset_past_end_returns_empty_page(self):
        viewer = _viewer()
        service, _ = _make_service(viewer=viewer, pool=[_make_profile()])

        result = await service.select_candidates(AsyncMock(), viewer.user_id, limit=10, offset=50)

        assert result.candidates == []
        assert result.has_more is False

    @pytest.mark.asyncio
    async def test_candidates_are_decorated(self):
        viewer = _viewer(latitude=40.0, longitude=-75.0)
        fav = _make_profile(latitude=40.3, longitude=-75.2)
        liker = _make_profile(minutes_old=1)
        service, _ = _make_service(
            viewer=viewer,
            pool=[fav, liker],
            favorites={fav.user_id},
            likers={liker.user_id: "super_like"},
        )

        result = await service.select_candidates(AsyncMock(), viewer.user_id, limit=10)

        first, second = result.candidates
        assert first.is_favorite is True
        assert first.has_liked_me is False
        assert first.distance_km is not None and first.distance_km < 50
        assert second.has_liked_me is True
        assert second.is_super_like is True
        assert second.distance_km is None

    @pytest.mark.asyncio
    async def test_saved_distance_filter_is_applied_in_km(self):
        viewer = _viewer(latitude=40.0, longitude=-75.0)
        near = _make_profile(latitude=40.3, longitude=-75.2)
        far = _make_profile(latitude=45.0, longitude=-70.0)
        filters = UserFilters(user_id=viewer.user_id, max_distance_miles=31.07)  # ~50 km
        service, _ = _make_service(viewer=viewer, pool=[near, far], filters=filters)

        result = await service.select_candidates(AsyncMock(), viewer.user_id, limit=10)

        assert [c.profile for c in result.candidates] == [near]

    @pytest.mark.asyncio
    async def test_client_mode_ignores_gender(self):
        client = _viewer()
        same_gender = _make_profile(gender="male", looking_for=["male"])
        service, _ = _make_service(viewer=client, pool=[same_gender])

        result = await service.select_candidates_for_client(AsyncMock(), client.user_id, limit=10)

        assert [c.profile for c in result.candidates] == [same_gender]

    @pytest.mark.asyncio
    async def test_database_error_becomes_store_unavailable(self):
        viewer = _viewer()
        service, repos = _make_service(viewer=viewer)
        repos["profile"].get_discovery_pool.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(StoreUnavailable):
            await service.select_candidates(AsyncMock(), viewer.user_id, limit=10)


# ---------------------------------------------------------------------------
# Pool scanning
# ---------------------------------------------------------------------------
class TestPoolScanning:
    @pytest.mark.asyncio
    async def test_scans_batches_until_pool_is_exhausted(self):
        viewer = _viewer()
        newer = [_make_profile(gender="male", minutes_old=i) for i in range(2)]
        older = _make_profile(minutes_old=10)
        service, repos = _make_service(viewer=viewer, batch_size=2)
        repos["profile"].get_discovery_pool.side_effect = [newer, [older]]

        result = await service.select_candidates(AsyncMock(), viewer.user_id, limit=10)

        assert [c.profile for c in result.candidates] == [older]
        assert result.total == 1
        assert result.empty_reason is None
        calls = repos["profile"].get_discovery_pool.await_args_list
        assert len(calls) == 2
        assert calls[0].kwargs["after"] is None
        assert calls[1].kwargs["after"] == (newer[-1].created_at, newer[-1].id)

    @pytest.mark.asyncio
    async def test_full_last_batch_triggers_one_more_query(self):
        viewer = _viewer()
        batch = [_make_profile(minutes_old=i) for i in range(2)]
        service, repos = _make_service(viewer=viewer, batch_size=2)
        repos["profile"].get_discovery_pool.side_effect = [batch, []]

        result = await service.select_candidates(AsyncMock(), viewer.user_id, limit=1)

        assert result.total == 2
        assert result.has_more is True
        assert repos["profile"].get_discovery_pool.await_count == 2

    @pytest.mark.asyncio
    async def test_gender_and_age_bounds_are_pushed_to_the_query(self):
        viewer = _viewer()
        filters = UserFilters(user_id=viewer.user_id, min_age=25, max_age=35)
        service, repos = _make_service(viewer=viewer, filters=filters)

        await service.select_candidates(AsyncMock(), viewer.user_id, limit=10)

        kwargs = repos["profile"].get_discovery_pool.await_args.kwargs
        assert kwargs["genders"] == ("female",)
        assert kwargs["born_after"] == date(1990, 1, 1)
        assert kwargs["born_on_or_before"] == date(2001, 1, 1)

    @pytest.mark.asyncio
    async def test_client_mode_does_not_restrict_gender_in_query(self):
        client = _viewer()
        service, repos = _make_service(viewer=client)

        await service.select_candidates_for_client(AsyncMock(), client.user_id, limit=10)

        kwargs = repos["profile"].get_discovery_pool.await_args.kwargs
        assert kwargs["genders"] is None
        assert kwargs["born_after"] is None
        assert kwargs["born_on_or_before"] is None


# ---------------------------------------------------------------------------
# Viewer context
# ---------------------------------------------------------------------------
class TestBuildViewerContext:
    @pytest.mark.asyncio
    async def test_saved_preferences_are_loaded(self):
        viewer = _viewer()
        filters = UserFilters(
            user_id=viewer.user_id,
            min_height=62,
            max_height=74,
            body_types=["athletic", "average"],
            ethnicities=["asian"],
            smoking="never",
            has_kids="any",
        )
        service, _ = _make_service(viewer=viewer, filters=filters)

        context = await service.build_viewer_context(AsyncMock(), viewer)

        assert context.min_height == 62
        assert context.max_height == 74
        assert context.body_types == ("athletic", "average")
        assert context.ethnicities == ("asian",)
        assert context.religions == ()
        assert context.smoking == "never"
        assert context.has_kids is None
        assert context.drinking is None

    @pytest.mark.asyncio
    async def test_no_saved_filters_means_no_constraints(self):
        viewer = _viewer()
        service, _ = _make_service(viewer=viewer)

        context = await service.build_viewer_context(AsyncMock(), viewer)

        assert context.max_distance_km is None
        assert context.min_age is None
        assert context.body_types == ()
        assert context.wants_kids is None
