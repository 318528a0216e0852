#!/usr/bin/env python3
"""
Freelancer endpoints - the caller's own profile.
"""

from fastapi import APIRouter, Depends

from database.models import User
from database.uow import UnitOfWork
from ..dependencies import get_current_user, get_uow
from ..services.freelancer_service import FreelancerDirectoryService
from ..models.requests import FreelancerProfileCreate, FreelancerProfileUpdate
from ..models.responses import FreelancerProfileResponse

router = APIRouter(prefix="/api/freelancers", tags=["freelancers"])


def get_directory_service(uow: UnitOfWork = Depends(get_uow)) -> FreelancerDirectoryService:
    """Dependency to get the freelancer directory service."""
    return FreelancerDirectoryService(uow)


@router.get("/profile", response_model=FreelancerProfileResponse)
def get_profile(
    user: User = Depends(get_current_user),
    service: FreelancerDirectoryService = Depends(get_directory_service)
):
    """Return the caller's profile, or ``profile: null`` if none exists yet."""
    return FreelancerProfileResponse(success=True, profile=service.get_profile(user))


@router.post("/profile", response_model=FreelancerProfileResponse)
def save_profile(
    request: FreelancerProfileCreate,
    user: User = Depends(get_current_user),
    service: FreelancerDirectoryService = Depends(get_directory_service)
):
    """
    Create or overwrite the caller's designer/developer profile.

    New profiles start with a 4.5 rating and no completed projects.
    """
    return FreelancerProfileResponse(success=True, profile=service.save_profile(user, request))


@router.patch("/profile", response_model=FreelancerProfileResponse)
def update_profile(
    request: FreelancerProfileUpdate,
    user: User = Depends(get_current_user),
    service: FreelancerDirectoryService = Depends(get_directory_service)
):
    return FreelancerProfileResponse(success=True, profile=service.update_profile(user, request))
