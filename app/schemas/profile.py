from pydantic import BaseModel, computed_field
from typing import Optional, List
from datetime import date, datetime
import uuid

from app.models.profile import calculate_age


class ProfileSummary(BaseModel):
    """Public profile fields shown on discovery cards and match lists"""
    user_id: uuid.UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    looking_for: Optional[List[str]] = None
    bio: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    height_inches: Optional[int] = None
    body_type: Optional[str] = None
    ethnicity: Optional[List[str]] = None
    religion: Optional[str] = None
    education: Optional[str] = None
    zodiac_sign: Optional[str] = None
    smoking: Optional[str] = None
    drinking: Optional[str] = None
    marijuana: Optional[str] = None
    has_kids: Optional[str] = None
    wants_kids: Optional[str] = None
    is_verified: bool = False
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def age(self) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return calculate_age(self.date_of_birth)

    class Config:
        from_attributes = True
