#!/usr/bin/env python3
"""
Invitation endpoints - freelancer responses to a team selection.
"""

from fastapi import APIRouter, Depends

from database.models import User
from database.uow import UnitOfWork
from ..dependencies import get_current_user, get_uow
from ..services.team_service import TeamServiceWrapper
from ..models.requests import InvitationRespondRequest
from ..models.responses import InvitationResponse

router = APIRouter(prefix="/api/invitations", tags=["invitations"])


@router.post("/respond", response_model=InvitationResponse)
def respond_to_invitation(
    request: InvitationRespondRequest,
    user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow)
):
    """
    Accept or reject an invitation.

    ``status`` is ``waiting`` until both freelancers have answered, then one of
    ``both_accepted``, ``both_rejected`` or ``partial_acceptance``. Responding
    twice returns 409.
    """
    result = TeamServiceWrapper(uow).respond(user, request.project_id, request.response)
    return InvitationResponse(success=True, **result)
