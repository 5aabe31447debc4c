from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
import uuid
from app.core.database import get_db
from app.api.deps import get_current_user, get_match_service
from app.models.user import User
from app.schemas.match import (
    LikeReceivedItem,
    LikesReceivedResponse,
    LikeSentItem,
    LikesSentResponse,
    MatchStatusResponse,
    MutualMatchItem,
    MutualMatchesResponse,
    UnmatchResponse,
)
from app.schemas.profile import ProfileSummary
from app.services.match_service import MatchService
from app.utils.pagination import OffsetPage

router = APIRouter()


@router.get("", response_model=MutualMatchesResponse)
async def list_matches(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: MatchService = Depends(get_match_service)
):
    """List mutual matches, most recent match first"""
    matches, total = await service.list_mutual_matches(db, current_user.id, limit=limit, offset=offset)
    return MutualMatchesResponse(
        items=[
            MutualMatchItem(
                profile=ProfileSummary.model_validate(match.profile),
                matched_at=match.matched_at,
            )
            for match in matches
        ],
        total=total,
        limit=limit,
        offset=offset,
        has_more=OffsetPage.build(limit, offset, total).has_more,
    )


# NOTE: Must come before /{user_id} to avoid UUID parsing conflicts
@router.get("/likes-received", response_model=LikesReceivedResponse)
async def list_likes_received(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    include_super: bool = Query(True, description="Include super-likes"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: MatchService = Depends(get_match_service)
):
    """List people who liked the current user and are waiting for a decision"""
    likes, total = await service.list_likes_received(
        db, current_user.id, limit=limit, offset=offset, include_super=include_super
    )
    return LikesReceivedResponse(
        items=[
            LikeReceivedItem(
                profile=ProfileSummary.model_validate(like.profile),
                kind=like.kind,
                liked_at=like.liked_at,
            )
            for like in likes
        ],
        total=total,
        limit=limit,
        offset=offset,
        has_more=OffsetPage.build(limit, offset, total).has_more,
    )


@router.get("/likes-sent", response_model=LikesSentResponse)
async def list_likes_sent(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    include_super: bool = Query(True, description="Include super-likes"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: MatchService = Depends(get_match_service)
):
    """List people the current user liked who have not liked back yet"""
    likes, total = await service.list_likes_sent(
        db, current_user.id, limit=limit, offset=offset, include_super=include_super
    )
    return LikesSentResponse(
        items=[
            LikeSentItem(
                profile=ProfileSummary.model_validate(like.profile),
                kind=like.kind,
                liked_at=like.liked_at,
            )
            for like in likes
        ],
        total=total,
        limit=limit,
        offset=offset,
        has_more=OffsetPage.build(limit, offset, total).has_more,
    )


@router.get("/{user_id}", response_model=MatchStatusResponse)
async def get_match_status(
    user_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: MatchService = Depends(get_match_service)
):
    """Get both directions of the pair and whether they form a match"""
    match_status = await service.get_match_status(db, current_user.id, user_id)
    return MatchStatusResponse(
        user_id=user_id,
        my_action=match_status.my_action,
        their_action=match_status.their_action,
        is_mutual=match_status.is_mutual,
    )


@router.delete("/{user_id}", response_model=UnmatchResponse)
async def unmatch(
    user_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: MatchService = Depends(get_match_service)
):
    """Unmatch a user, removing actions in both directions"""
    removed = await service.unmatch(db, current_user.id, user_id)
    return UnmatchResponse(unmatched=True, removed_actions=removed)
