from pydantic import BaseModel
from typing import Optional, List

from app.schemas.profile import ProfileSummary


class CandidateItem(BaseModel):
    """Single discovery card"""
    profile: ProfileSummary
    distance_km: Optional[float] = None  # None when either side has no location
    is_favorite: bool = False
    has_liked_me: bool = False
    is_super_like: bool = False


class DiscoveryResponse(BaseModel):
    """Response model for the discovery feed with offset pagination"""
    candidates: List[CandidateItem]
    total: int
    limit: int
    offset: int
    has_more: bool
    empty_reason: Optional[str] = None  # incomplete_profile, profile_not_found, no_matches
