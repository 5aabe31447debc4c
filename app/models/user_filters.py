"""
Per-user discovery preferences.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, JSON, String
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.core.database import Base

# Stored by clients for single-choice filters that should match everyone
ANY_VALUE = "any"


class UserFilters(Base):
    """
    Discovery preferences set by the viewer.

    All columns are optional; a NULL column, an empty list, or ``"any"``
    means "no constraint". Distance is stored in miles and height in inches
    because that is what the clients edit.
    """
    __tablename__ = "user_filters"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True
    )

    max_distance_miles = Column(Float)
    min_age = Column(Integer)
    max_age = Column(Integer)
    min_height = Column(Integer)
    max_height = Column(Integer)

    # Multi-choice filters: candidate value must be one of these
    body_types = Column(JSON)
    ethnicities = Column(JSON)
    religions = Column(JSON)
    education_levels = Column(JSON)
    zodiac_signs = Column(JSON)

    # Single-choice lifestyle filters
    smoking = Column(String(20))
    drinking = Column(String(20))
    marijuana = Column(String(20))
    has_kids = Column(String(30))
    wants_kids = Column(String(30))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<UserFilters(user_id={self.user_id}, max_distance_miles={self.max_distance_miles})>"
