#!/usr/bin/env python3
"""
User endpoints - onboarding.
"""

from fastapi import APIRouter, Depends

from database.uow import UnitOfWork
from ..dependencies import get_identity, get_uow
from ..services.freelancer_service import FreelancerDirectoryService
from ..models.requests import OnboardingRequest
from ..models.responses import UserResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/onboarding", response_model=UserResponse)
def onboard_user(
    request: OnboardingRequest,
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_uow)
):
    """
    Register the caller as a business or freelancer.

    Repeating onboarding updates the role and contact details.
    """
    result = FreelancerDirectoryService(uow).onboard(identity, request)
    return UserResponse(success=True, user=result['user'], redirect_to=result['redirect_to'])
