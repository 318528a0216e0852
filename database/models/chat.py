import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Uuid, UniqueConstraint, Index, func
from sqlalchemy.orm import relationship

from core.enums import ChatRole
from .base import Base, enum_column_type


class ChatRoom(Base):
    """
    Per-project room shared by the business and the accepted freelancers.

    The UNIQUE constraint on ``project_id`` is the backstop that keeps invitation
    resolution from ever creating a second room for a project.
    """
    __tablename__ = 'chat_rooms'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    project = relationship("Project", back_populates="chat_room")
    participants = relationship("ChatParticipant", back_populates="room", cascade="all, delete-orphan")
    messages = relationship(
        "ChatMessage",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="ChatMessage.created_at"
    )

    __table_args__ = (
        UniqueConstraint('project_id', name='uq_chat_room_project'),
    )


class ChatParticipant(Base):
    __tablename__ = 'chat_participants'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    room_id = Column(Uuid, ForeignKey('chat_rooms.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    role = Column(enum_column_type(ChatRole), nullable=False)
    name = Column(Text, nullable=False)

    room = relationship("ChatRoom", back_populates="participants")

    __table_args__ = (
        UniqueConstraint('room_id', 'user_id', name='uq_chat_participant'),
    )


class ChatMessage(Base):
    __tablename__ = 'chat_messages'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    room_id = Column(Uuid, ForeignKey('chat_rooms.id', ondelete='CASCADE'), nullable=False)
    sender_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    sender_name = Column(Text, nullable=False)
    body = Column(Text, nullable=False)
    # Python-side default keeps sub-second ordering for polling with ``since``
    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now()
    )

    room = relationship("ChatRoom", back_populates="messages")

    __table_args__ = (
        Index('idx_chat_messages_room_created', 'room_id', 'created_at'),
    )
