import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, Uuid, Index, func
from sqlalchemy.orm import relationship

from core.enums import NotificationType
from .base import Base, enum_column_type


class Notification(Base):
    """
    In-app notification for a single recipient.

    Written by the invitation workflow in the same transaction as the state
    change it describes. Only the recipient flips ``is_read``.
    """
    __tablename__ = 'notifications'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    project_id = Column(Uuid, ForeignKey('projects.id', ondelete='CASCADE'), nullable=True)

    type = Column(enum_column_type(NotificationType), nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now()
    )

    user = relationship("User")
    project = relationship("Project")

    __table_args__ = (
        Index('idx_notifications_user_created', 'user_id', 'created_at'),
    )
