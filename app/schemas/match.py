from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
import uuid

from app.models.match_action import MatchActionKind
from app.schemas.profile import ProfileSummary


class MutualMatchItem(BaseModel):
    """A mutual match with the other person's profile"""
    profile: ProfileSummary
    matched_at: datetime  # When the second like was recorded


class MutualMatchesResponse(BaseModel):
    items: List[MutualMatchItem]
    total: int
    limit: int
    offset: int
    has_more: bool


class LikeReceivedItem(BaseModel):
    profile: ProfileSummary
    kind: MatchActionKind
    liked_at: datetime


class LikesReceivedResponse(BaseModel):
    items: List[LikeReceivedItem]
    total: int
    limit: int
    offset: int
    has_more: bool


class LikeSentItem(BaseModel):
    """A like or super-like the caller sent that has not been returned"""
    profile: ProfileSummary
    kind: MatchActionKind
    liked_at: datetime


class LikesSentResponse(BaseModel):
    items: List[LikeSentItem]
    total: int
    limit: int
    offset: int
    has_more: bool


class MatchStatusResponse(BaseModel):
    user_id: uuid.UUID
    my_action: Optional[MatchActionKind] = None
    their_action: Optional[MatchActionKind] = None
    is_mutual: bool


class UnmatchResponse(BaseModel):
    unmatched: bool = True
    removed_actions: int
