#!/usr/bin/env python3
"""
Team endpoints - offers, selection and replacements.
"""

import logging

from fastapi import APIRouter, Depends

from database.models import User
from database.uow import UnitOfWork
from ..dependencies import get_current_user, get_uow
from ..services.team_service import TeamServiceWrapper
from ..models.requests import (
    GenerateTeamsRequest,
    ReplacementSearchRequest,
    ReplacementSelectRequest,
    SelectTeamRequest
)
from ..models.responses import GenerateTeamsResponse, ProjectResponse, ReplacementsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/teams", tags=["teams"])


def get_team_service(uow: UnitOfWork = Depends(get_uow)) -> TeamServiceWrapper:
    """Dependency to get the team service."""
    return TeamServiceWrapper(uow)


@router.post("/generate", response_model=GenerateTeamsResponse)
def generate_teams(
    request: GenerateTeamsRequest,
    user: User = Depends(get_current_user),
    service: TeamServiceWrapper = Depends(get_team_service)
):
    """
    Build up to three tiered team offers for a project.

    Offers are computed on demand and never stored. Returns 404 when no
    designer or no developer is available.
    """
    teams = service.generate_offers(user, request.project_id)
    return GenerateTeamsResponse(success=True, project_id=str(request.project_id), teams=teams)


@router.post("/select", response_model=ProjectResponse)
def select_team(
    request: SelectTeamRequest,
    user: User = Depends(get_current_user),
    service: TeamServiceWrapper = Depends(get_team_service)
):
    """
    Choose a team and invite both freelancers.

    Premium and pro tiers need a verified payment confirmation.
    """
    project = service.select_team(
        user,
        request.project_id,
        request.designer_id,
        request.developer_id,
        request.tier,
        payment=request.payment
    )
    return ProjectResponse(success=True, project=project)


@router.post("/replacements", response_model=ReplacementsResponse)
def find_replacements(
    request: ReplacementSearchRequest,
    user: User = Depends(get_current_user),
    service: TeamServiceWrapper = Depends(get_team_service)
):
    """Top available candidates to replace the freelancer who declined."""
    result = service.find_replacements(user, request.project_id, request.role)
    return ReplacementsResponse(success=True, **result)


@router.patch("/replacements", response_model=ProjectResponse)
def select_replacement(
    request: ReplacementSelectRequest,
    user: User = Depends(get_current_user),
    service: TeamServiceWrapper = Depends(get_team_service)
):
    project = service.select_replacement(user, request.project_id, request.role, request.replacement_id)
    return ProjectResponse(success=True, project=project)
