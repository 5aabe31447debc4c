from sqlalchemy import Column, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from app.core.database import Base


class MatchActionKind(str, enum.Enum):
    LIKE = "like"
    PASS = "pass"
    SUPER_LIKE = "super_like"


# Kinds that count toward a mutual match. A pass never does.
POSITIVE_KINDS = (MatchActionKind.LIKE.value, MatchActionKind.SUPER_LIKE.value)


class MatchAction(Base):
    __tablename__ = "match_actions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    actor_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    target_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    kind = Column(String(20), nullable=False)  # like, pass, super_like

    # Set by the service from its clock so the undo window is exact
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    # Relationships
    actor = relationship("User", foreign_keys=[actor_id])
    target = relationship("User", foreign_keys=[target_id])

    # One action per ordered (actor, target) pair; a new action replaces the old row
    __table_args__ = (
        UniqueConstraint('actor_id', 'target_id', name='unique_actor_target_action'),
        Index('ix_match_actions_target_kind', 'target_id', 'kind'),
    )

    @property
    def is_positive(self) -> bool:
        return self.kind in POSITIVE_KINDS

    def __repr__(self):
        return f"<MatchAction(actor_id={self.actor_id}, target_id={self.target_id}, kind={self.kind})>"
