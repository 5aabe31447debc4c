from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.api.deps import get_current_user, get_match_service, get_undo_service
from app.models.user import User
from app.schemas.match_action import (
    MatchAction as MatchActionSchema,
    MatchActionCreate,
    MatchActionResponse,
    UndoRequest,
    UndoResponse,
    UndoableAction,
    UndoableStatus,
)
from app.services.match_service import MatchService
from app.services.undo_service import UndoService

router = APIRouter()


@router.post("", response_model=MatchActionResponse, status_code=status.HTTP_201_CREATED)
async def create_match_action(
    action_data: MatchActionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: MatchService = Depends(get_match_service)
):
    """
    Like, pass, or super-like another user.

    Acting again on the same user replaces the previous action and restarts
    the undo window. ``mutual_match`` is true when this action completed a
    like in both directions.
    """
    result = await service.record_action(
        db, current_user.id, action_data.target_user_id, action_data.kind
    )
    return MatchActionResponse(
        created=True,
        mutual_match=result.is_mutual,
        action=MatchActionSchema.model_validate(result.action),
    )


@router.get("/undoable", response_model=UndoableStatus)
async def get_undoable_action(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: UndoService = Depends(get_undo_service)
):
    """Get the most recent action if it can still be undone"""
    undoable = await service.get_undoable(db, current_user.id)
    if undoable is None:
        return UndoableStatus(can_undo=False)

    return UndoableStatus(
        can_undo=True,
        action=UndoableAction(
            target_user_id=undoable.action.target_id,
            kind=undoable.action.kind,
            created_at=undoable.action.created_at,
            seconds_remaining=undoable.seconds_remaining,
        ),
    )


@router.post("/undo", response_model=UndoResponse)
async def undo_match_action(
    undo_data: UndoRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: UndoService = Depends(get_undo_service)
):
    """
    Undo the current user's action on a target.

    Returns 404 (code ``not_found``) when there is nothing to undo and 409
    (code ``expired``) once the undo window has passed.
    """
    undone = await service.undo(db, current_user.id, undo_data.target_user_id)
    return UndoResponse(undone_kind=undone.kind, target_user_id=undo_data.target_user_id)
