#!/usr/bin/env python3
"""
Chat endpoints - project rooms and polled messages.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from core.config_loader import get_config
from database.models import User
from database.uow import UnitOfWork
from ..dependencies import get_current_user, get_uow
from ..services.chat_service import ChatService
from ..models.requests import ChatMessageRequest
from ..models.responses import ChatRoomResponse, MessageResponse, MessagesResponse

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/api/chat", tags=["chat"])


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": str(exc), "type": "RateLimitExceeded"}
    )


def get_chat_service(uow: UnitOfWork = Depends(get_uow)) -> ChatService:
    return ChatService(uow)


@router.get("/room", response_model=ChatRoomResponse)
def get_room(
    project_id: UUID = Query(..., description="Project whose room to open"),
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    """The project's chat room. 404 until a freelancer has accepted."""
    return ChatRoomResponse(success=True, chat_room=service.get_room_for_project(user, project_id))


@router.get("/{room_id}/messages", response_model=MessagesResponse)
def list_messages(
    room_id: UUID,
    since: Optional[datetime] = Query(default=None, description="Only messages created after this instant"),
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    """
    Poll messages in chronological order.

    Clients pass the ``created_at`` of the last message they hold as ``since``.
    """
    messages = service.list_messages(user, room_id, since=since)
    return MessagesResponse(success=True, messages=messages, participants=service.participants(room_id))


@router.post("/{room_id}/messages", response_model=MessageResponse)
@limiter.limit(lambda: get_config().web.message_rate_limit)
def post_message(
    request: Request,
    room_id: UUID,
    body: ChatMessageRequest,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    return MessageResponse(success=True, message=service.post_message(user, room_id, body.message))
