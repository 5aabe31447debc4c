from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
import uuid


class BlockCreate(BaseModel):
    blocked_user_id: uuid.UUID


class BlockCreateResponse(BaseModel):
    blocked: bool = True
    blocked_user_id: uuid.UUID
    removed_actions: int
    removed_favorites: int


class BlockedUser(BaseModel):
    blocked_user_id: uuid.UUID
    created_at: Optional[datetime] = None


class BlockedUsersResponse(BaseModel):
    items: List[BlockedUser]
    total: int
    has_more: bool
