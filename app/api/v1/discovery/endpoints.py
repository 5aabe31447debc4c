from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
import uuid
from app.core.config import settings
from app.core.database import get_db
from app.api.deps import get_current_user, get_matchmaker, get_discovery_service
from app.models.user import User
from app.schemas.discovery import CandidateItem, DiscoveryResponse
from app.schemas.profile import ProfileSummary
from app.services.discovery_service import DiscoveryResult, DiscoveryService

router = APIRouter()


def _to_response(result: DiscoveryResult) -> DiscoveryResponse:
    return DiscoveryResponse(
        candidates=[
            CandidateItem(
                profile=ProfileSummary.model_validate(candidate.profile),
                distance_km=round(candidate.distance_km, 1) if candidate.distance_km is not None else None,
                is_favorite=candidate.is_favorite,
                has_liked_me=candidate.has_liked_me,
                is_super_like=candidate.is_super_like,
            )
            for candidate in result.candidates
        ],
        total=result.total,
        limit=result.limit,
        offset=result.offset,
        has_more=result.has_more,
        empty_reason=result.empty_reason,
    )


@router.get("/candidates", response_model=DiscoveryResponse)
async def get_candidates(
    limit: int = Query(settings.discovery_default_limit, ge=1, le=settings.discovery_max_limit),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: DiscoveryService = Depends(get_discovery_service)
):
    """
    Get the next profiles the current user may see, newest first.

    Excludes the user themselves, anyone blocked in either direction, and
    anyone the user has already liked, passed, or super-liked.
    """
    result = await service.select_candidates(db, current_user.id, limit=limit, offset=offset)
    return _to_response(result)


@router.get("/clients/{client_id}/candidates", response_model=DiscoveryResponse)
async def get_candidates_for_client(
    client_id: uuid.UUID,
    limit: int = Query(settings.discovery_default_limit, ge=1, le=settings.discovery_max_limit),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_matchmaker),  # Only matchmakers and admins
    db: AsyncSession = Depends(get_db),
    service: DiscoveryService = Depends(get_discovery_service)
):
    """Browse candidates on behalf of a client; the mutual gender rule is not applied"""
    result = await service.select_candidates_for_client(db, client_id, limit=limit, offset=offset)
    return _to_response(result)
