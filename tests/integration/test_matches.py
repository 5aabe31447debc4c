"""
Integration tests for mutual match endpoints.

Covers:
  GET    /api/v1/matches
  GET    /api/v1/matches/likes-received
  GET    /api/v1/matches/likes-sent
  GET    /api/v1/matches/{user_id}
  DELETE /api/v1/matches/{user_id}
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from tests.factories import BlockFactory, MatchActionFactory, create_member

URL = "/api/v1/matches"


def _ago(minutes: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(minutes=minutes)


async def _mutual(db: AsyncSession, me: User, other: User, mine_at: datetime, theirs_at: datetime):
    await MatchActionFactory.create_async(db, actor_id=me.id, target_id=other.id, created_at=mine_at)
    await MatchActionFactory.create_async(db, actor_id=other.id, target_id=me.id, created_at=theirs_at)


# ---------------------------------------------------------------------------
# GET /api/v1/matches
# ---------------------------------------------------------------------------
class TestListMatches:
    async def test_newest_match_first(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        early = await create_member(db_session, profile={"first_name": "Early"})
        late = await create_member(db_session, profile={"first_name": "Late"})
        one_sided = await create_member(db_session)
        await _mutual(db_session, test_user, early, _ago(60), _ago(50))
        await _mutual(db_session, test_user, late, _ago(40), _ago(5))
        await MatchActionFactory.create_async(db_session, actor_id=test_user.id, target_id=one_sided.id)
        await db_session.commit()

        response = await async_client.get(URL, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [m["profile"]["first_name"] for m in data["items"]] == ["Late", "Early"]

    async def test_pass_on_one_side_is_not_a_match(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        other = await create_member(db_session)
        await MatchActionFactory.create_async(db_session, actor_id=test_user.id, target_id=other.id)
        await MatchActionFactory.create_async(
            db_session, actor_id=other.id, target_id=test_user.id, kind="pass"
        )
        await db_session.commit()

        response = await async_client.get(URL, headers=auth_headers)

        assert response.json()["items"] == []

    async def test_pagination(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        for i in range(3):
            other = await create_member(db_session)
            await _mutual(db_session, test_user, other, _ago(10 + i), _ago(10 + i))
        await db_session.commit()

        response = await async_client.get(URL, params={"limit": 2}, headers=auth_headers)

        data = response.json()
        assert len(data["items"]) == 2
        assert data["total"] == 3
        assert data["has_more"] is True


# ---------------------------------------------------------------------------
# GET /api/v1/matches/likes-received
# ---------------------------------------------------------------------------
class TestLikesReceived:
    async def test_super_likes_first_and_answered_likes_hidden(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        liker = await create_member(db_session, profile={"first_name": "Liker"})
        super_liker = await create_member(db_session, profile={"first_name": "Super"})
        answered = await create_member(db_session, profile={"first_name": "Answered"})
        blocked = await create_member(db_session, profile={"first_name": "Blocked"})
        await MatchActionFactory.create_async(
            db_session, actor_id=liker.id, target_id=test_user.id, created_at=_ago(1)
        )
        await MatchActionFactory.create_async(
            db_session, actor_id=super_liker.id, target_id=test_user.id,
            kind="super_like", created_at=_ago(30)
        )
        await MatchActionFactory.create_async(db_session, actor_id=answered.id, target_id=test_user.id)
        await MatchActionFactory.create_async(
            db_session, actor_id=test_user.id, target_id=answered.id, kind="pass"
        )
        await MatchActionFactory.create_async(db_session, actor_id=blocked.id, target_id=test_user.id)
        await BlockFactory.create_async(db_session, blocker_id=blocked.id, blocked_id=test_user.id)
        await db_session.commit()

        response = await async_client.get(f"{URL}/likes-received", headers=auth_headers)

        assert response.status_code == 200
        items = response.json()["items"]
        assert [(i["profile"]["first_name"], i["kind"]) for i in items] == [
            ("Super", "super_like"),
            ("Liker", "like"),
        ]

    async def test_hidden_and_blocked_likers_do_not_shorten_pages(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        hidden = await create_member(db_session, profile={"profile_hidden": True})
        suspended = await create_member(db_session, status="suspended")
        i_blocked = await create_member(db_session)
        first = await create_member(db_session, profile={"first_name": "First"})
        second = await create_member(db_session, profile={"first_name": "Second"})
        # The filtered-out likers are the newest, so they would fill page one
        for minutes, liker in enumerate([hidden, suspended, i_blocked, first, second]):
            await MatchActionFactory.create_async(
                db_session, actor_id=liker.id, target_id=test_user.id, created_at=_ago(minutes)
            )
        await BlockFactory.create_async(db_session, blocker_id=test_user.id, blocked_id=i_blocked.id)
        await db_session.commit()

        page_one = await async_client.get(
            f"{URL}/likes-received", params={"limit": 1}, headers=auth_headers
        )
        page_two = await async_client.get(
            f"{URL}/likes-received", params={"limit": 1, "offset": 1}, headers=auth_headers
        )

        one, two = page_one.json(), page_two.json()
        assert [i["profile"]["first_name"] for i in one["items"]] == ["First"]
        assert one["total"] == 2
        assert one["has_more"] is True
        assert [i["profile"]["first_name"] for i in two["items"]] == ["Second"]
        assert two["has_more"] is False

    async def test_exclude_super_likes(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        super_liker = await create_member(db_session)
        await MatchActionFactory.create_async(
            db_session, actor_id=super_liker.id, target_id=test_user.id, kind="super_like"
        )
        await db_session.commit()

        response = await async_client.get(
            f"{URL}/likes-received", params={"include_super": "false"}, headers=auth_headers
        )

        assert response.json()["items"] == []
        assert response.json()["total"] == 0


# ---------------------------------------------------------------------------
# GET /api/v1/matches/likes-sent
# ---------------------------------------------------------------------------
class TestLikesSent:
    async def test_pending_likes_newest_first(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        older = await create_member(db_session, profile={"first_name": "Older"})
        newer = await create_member(db_session, profile={"first_name": "Newer"})
        passed_me = await create_member(db_session, profile={"first_name": "PassedMe"})
        liked_back = await create_member(db_session, profile={"first_name": "LikedBack"})
        passed = await create_member(db_session, profile={"first_name": "Passed"})
        await MatchActionFactory.create_async(
            db_session, actor_id=test_user.id, target_id=older.id, created_at=_ago(30)
        )
        await MatchActionFactory.create_async(
            db_session, actor_id=test_user.id, target_id=newer.id,
            kind="super_like", created_at=_ago(5)
        )
        await MatchActionFactory.create_async(
            db_session, actor_id=test_user.id, target_id=passed_me.id, created_at=_ago(20)
        )
        await MatchActionFactory.create_async(
            db_session, actor_id=passed_me.id, target_id=test_user.id, kind="pass"
        )
        await _mutual(db_session, test_user, liked_back, _ago(10), _ago(9))
        await MatchActionFactory.create_async(
            db_session, actor_id=test_user.id, target_id=passed.id, kind="pass"
        )
        await db_session.commit()

        response = await async_client.get(f"{URL}/likes-sent", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert [(i["profile"]["first_name"], i["kind"]) for i in data["items"]] == [
            ("Newer", "super_like"),
            ("PassedMe", "like"),
            ("Older", "like"),
        ]
        assert data["total"] == 3
        assert data["has_more"] is False

    async def test_hidden_and_blocked_targets_are_left_out(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        hidden = await create_member(db_session, profile={"profile_hidden": True})
        blocked_me = await create_member(db_session)
        visible = await create_member(db_session)
        for target in (hidden, blocked_me, visible):
            await MatchActionFactory.create_async(db_session, actor_id=test_user.id, target_id=target.id)
        await BlockFactory.create_async(db_session, blocker_id=blocked_me.id, blocked_id=test_user.id)
        await db_session.commit()

        response = await async_client.get(f"{URL}/likes-sent", headers=auth_headers)

        data = response.json()
        assert [i["profile"]["user_id"] for i in data["items"]] == [str(visible.id)]
        assert data["total"] == 1

    async def test_exclude_super_likes_and_paginate(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        for minutes in range(3):
            target = await create_member(db_session)
            await MatchActionFactory.create_async(
                db_session, actor_id=test_user.id, target_id=target.id, created_at=_ago(minutes)
            )
        super_liked = await create_member(db_session)
        await MatchActionFactory.create_async(
            db_session, actor_id=test_user.id, target_id=super_liked.id, kind="super_like"
        )
        await db_session.commit()

        response = await async_client.get(
            f"{URL}/likes-sent",
            params={"include_super": "false", "limit": 2},
            headers=auth_headers,
        )

        data = response.json()
        assert len(data["items"]) == 2
        assert all(i["kind"] == "like" for i in data["items"])
        assert data["total"] == 3
        assert data["has_more"] is True

    async def test_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.get(f"{URL}/likes-sent")
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# GET /api/v1/matches/{user_id}
# ---------------------------------------------------------------------------
class TestMatchStatus:
    async def test_no_actions(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        db_session: AsyncSession,
    ):
        other = await create_member(db_session)
        await db_session.commit()

        response = await async_client.get(f"{URL}/{other.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "user_id": str(other.id),
            "my_action": None,
            "their_action": None,
            "is_mutual": False,
        }

    async def test_super_like_and_like_are_mutual(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
    ):
        other = await create_member(db_session)
        await MatchActionFactory.create_async(
            db_session, actor_id=test_user.id, target_id=other.id, kind="super_like"
        )
        await MatchActionFactory.create_async(db_session, actor_id=other.id, target_id=test_user.id)
        await db_session.commit()

        response = await async_client.get(f"{URL}/{other.id}", headers=auth_headers)

        data = response.json()
        assert data["my_action"] == "super_like"
        assert data["their_action"] == "like"
        assert data["is_mutual"] is True

    async def test_malformed_user_id(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
    ):
        response = await async_client.get(f"{URL}/not-a-uuid", headers=auth_headers)
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# DELETE /api/v1/matches/{user_id}
# ---------------------------------------------------------------------------
class TestUnmatch:
    async def test_unmatch_removes_both_directions(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
        db_session: AsyncSession,
        headers_for,
    ):
        other = await create_member(db_session)
        await _mutual(db_session, test_user, other, _ago(3), _ago(2))
        await db_session.commit()

        response = await async_client.delete(f"{URL}/{other.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"unmatched": True, "removed_actions": 2}

        theirs = await async_client.get(f"{URL}/{test_user.id}", headers=headers_for(other))
        assert theirs.json()["is_mutual"] is False
        assert theirs.json()["my_action"] is None

    async def test_unmatch_without_actions_is_not_found(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        db_session: AsyncSession,
    ):
        other = await create_member(db_session)
        await db_session.commit()

        response = await async_client.delete(f"{URL}/{other.id}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    async def test_cannot_unmatch_self(
        self,
        async_client: AsyncClient,
        auth_headers: dict,
        test_user: User,
    ):
        response = await async_client.delete(f"{URL}/{test_user.id}", headers=auth_headers)
        assert response.status_code == 400
