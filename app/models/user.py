from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from app.core.database import Base


class UserRole(str, enum.Enum):
    MEMBER = "member"
    MATCHMAKER = "matchmaker"
    ADMIN = "admin"


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"


# Accounts in these states are never shown, matched, or authenticated.
# A NULL status belongs to a brand new account and counts as active.
UNAVAILABLE_STATUSES = (UserStatus.SUSPENDED.value, UserStatus.DELETED.value)


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(255))

    role = Column(Enum(UserRole), nullable=False, default=UserRole.MEMBER, index=True)
    status = Column(String(20), nullable=True, default=UserStatus.ACTIVE.value, index=True)

    last_active_at = Column(DateTime(timezone=True))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    profile = relationship("Profile", back_populates="user", uselist=False)

    @property
    def is_available(self) -> bool:
        return self.status not in UNAVAILABLE_STATUSES

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
