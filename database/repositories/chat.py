import logging
from datetime import datetime
from typing import Any, List, Optional, Tuple

from sqlalchemy import select

from core.enums import ChatRole
from database.models import ChatRoom, ChatParticipant, ChatMessage
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ChatRepository(BaseRepository):
    def get_room(self, room_id: Any) -> Optional[ChatRoom]:
        return self.db.get(ChatRoom, room_id)

    def get_room_for_project(self, project_id: Any) -> Optional[ChatRoom]:
        stmt = select(ChatRoom).where(ChatRoom.project_id == project_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_or_create_for_project(self, project_id: Any) -> Tuple[ChatRoom, bool]:
        """
        Return the project's room, creating it if missing.

        Must run inside the transaction holding the project lock; the UNIQUE
        constraint on ``project_id`` rejects a second room regardless.
        """
        room = self.get_room_for_project(project_id)
        if room is not None:
            return room, False

        room = ChatRoom(project_id=project_id)
        self.db.add(room)
        self.db.flush()
        logger.info(f"Created chat room {room.id} for project {project_id}")
        return room, True

    def get_participant(self, room_id: Any, user_id: Any) -> Optional[ChatParticipant]:
        stmt = select(ChatParticipant).where(
            ChatParticipant.room_id == room_id,
            ChatParticipant.user_id == user_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def ensure_participant(self, room: ChatRoom, user_id: Any, role: ChatRole, name: str) -> ChatParticipant:
        participant = self.get_participant(room.id, user_id)
        if participant is None:
            participant = ChatParticipant(room_id=room.id, user_id=user_id, role=role, name=name)
            self.db.add(participant)
            self.db.flush()
        return participant

    def list_participants(self, room_id: Any) -> List[ChatParticipant]:
        stmt = select(ChatParticipant).where(ChatParticipant.room_id == room_id)
        return list(self.db.execute(stmt).scalars().all())

    def add_message(self, room_id: Any, sender_id: Any, sender_name: str, body: str) -> ChatMessage:
        message = ChatMessage(room_id=room_id, sender_id=sender_id, sender_name=sender_name, body=body)
        self.db.add(message)
        self.db.flush()
        return message

    def list_messages(self, room_id: Any, since: Optional[datetime] = None) -> List[ChatMessage]:
        stmt = select(ChatMessage).where(ChatMessage.room_id == room_id)
        if since is not None:
            stmt = stmt.where(ChatMessage.created_at > since)
        stmt = stmt.order_by(ChatMessage.created_at, ChatMessage.id)
        return list(self.db.execute(stmt).scalars().all())
