#!/usr/bin/env python3
"""
Chat service - polling chat between a project's business and accepted freelancers.

Rooms are only ever created by invitation resolution; this service reads them
and appends messages.
"""

import logging
from datetime import datetime
from typing import Any, List, Optional

from core.errors import NotFoundError, NotParticipantError, ValidationError
from database.models import ChatMessage, ChatRoom, User
from database.uow import UnitOfWork
from ..models.responses import ChatMessageView, ChatRoomView, ParticipantView
from ..utils import enum_value, safe_datetime_iso

logger = logging.getLogger(__name__)


def message_view(message: ChatMessage) -> ChatMessageView:
    return ChatMessageView(
        id=str(message.id),
        sender_id=str(message.sender_id),
        sender_name=message.sender_name,
        message=message.body,
        created_at=safe_datetime_iso(message.created_at),
    )


class ChatService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def _participant_room(self, user: User, room: Optional[ChatRoom]) -> ChatRoom:
        if room is None:
            raise NotFoundError("Chat room not found")
        if self.uow.chats.get_participant(room.id, user.id) is None:
            raise NotParticipantError("Not authorized to view this chat")
        return room

    def participants(self, room_id: Any) -> List[ParticipantView]:
        return [
            ParticipantView(user_id=str(p.user_id), role=enum_value(p.role), name=p.name)
            for p in self.uow.chats.list_participants(room_id)
        ]

    def get_room_for_project(self, user: User, project_id: Any) -> ChatRoomView:
        if self.uow.projects.get_by_id(project_id) is None:
            raise NotFoundError("Project not found")
        room = self.uow.chats.get_room_for_project(project_id)
        if room is None:
            raise NotFoundError("Chat room not created yet")
        room = self._participant_room(user, room)
        return ChatRoomView(id=str(room.id), project_id=str(room.project_id), participants=self.participants(room.id))

    def list_messages(self, user: User, room_id: Any, since: Optional[datetime] = None) -> List[ChatMessageView]:
        room = self._participant_room(user, self.uow.chats.get_room(room_id))
        return [message_view(m) for m in self.uow.chats.list_messages(room.id, since=since)]

    def post_message(self, user: User, room_id: Any, body: str) -> ChatMessageView:
        if not body or not body.strip():
            raise ValidationError("Message cannot be empty")
        room = self._participant_room(user, self.uow.chats.get_room(room_id))
        participant = self.uow.chats.get_participant(room.id, user.id)

        message = self.uow.chats.add_message(room.id, user.id, participant.name, body.strip())
        self.uow.commit()
        return message_view(message)
