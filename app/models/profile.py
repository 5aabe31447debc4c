from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """Whole years between ``date_of_birth`` and ``today``."""
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True
    )

    first_name = Column(String(100))
    last_name = Column(String(100))
    date_of_birth = Column(Date, index=True)
    gender = Column(String(20), index=True)
    looking_for = Column(JSON)  # List of accepted genders
    bio = Column(Text)

    city = Column(String(100))
    state = Column(String(100))
    latitude = Column(Float)
    longitude = Column(Float)

    # Visibility (user controlled) and eligibility (system controlled)
    profile_hidden = Column(Boolean, nullable=False, default=False, index=True)
    can_start_matching = Column(Boolean, nullable=False, default=False, index=True)

    # Attributes matched against saved discovery filters; NULL means not shared
    height_inches = Column(Integer)
    body_type = Column(String(30))
    ethnicity = Column(JSON)  # List, a person may give several
    religion = Column(String(50))
    education = Column(String(50))
    zodiac_sign = Column(String(20))
    smoking = Column(String(20))
    drinking = Column(String(20))
    marijuana = Column(String(20))
    has_kids = Column(String(30))
    wants_kids = Column(String(30))

    is_verified = Column(Boolean, nullable=False, default=False)
    profile_image_url = Column(String(500))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="profile")

    @property
    def age(self) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return calculate_age(self.date_of_birth)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def __repr__(self):
        return f"<Profile(user_id={self.user_id}, gender={self.gender})>"
