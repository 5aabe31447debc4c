from pydantic import BaseModel
from typing import Optional
from datetime import datetime
import uuid

from app.models.match_action import MatchActionKind


class MatchActionCreate(BaseModel):
    target_user_id: uuid.UUID
    kind: MatchActionKind


class MatchAction(BaseModel):
    id: uuid.UUID
    actor_id: uuid.UUID
    target_id: uuid.UUID
    kind: MatchActionKind
    created_at: datetime

    class Config:
        from_attributes = True


class MatchActionResponse(BaseModel):
    created: bool = True
    mutual_match: bool
    action: MatchAction


class UndoRequest(BaseModel):
    target_user_id: uuid.UUID


class UndoResponse(BaseModel):
    undone_kind: MatchActionKind
    target_user_id: uuid.UUID


class UndoableAction(BaseModel):
    """The action that can still be undone and how long the window stays open"""
    target_user_id: uuid.UUID
    kind: MatchActionKind
    created_at: datetime
    seconds_remaining: int


class UndoableStatus(BaseModel):
    can_undo: bool
    action: Optional[UndoableAction] = None
