#!/usr/bin/env python3
"""
Project endpoints - intake conversation and dashboards.
"""

from fastapi import APIRouter, Depends

from database.models import User
from database.uow import UnitOfWork
from ..dependencies import get_current_user, get_uow
from ..services.project_service import ProjectService
from ..models.requests import IntakeRequest
from ..models.responses import AssignedProjectsResponse, IntakeResponse, ProjectsResponse

router = APIRouter(prefix="/api/projects", tags=["projects"])


def get_project_service(uow: UnitOfWork = Depends(get_uow)) -> ProjectService:
    return ProjectService(uow)


@router.post("/intake", response_model=IntakeResponse)
def answer_intake(
    request: IntakeRequest,
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    """
    Submit the answer to the current intake question.

    The first call (no ``project_id``) creates the project. After the sixth
    answer the project moves to ``team_presented`` and teams can be generated.
    """
    result = service.answer_intake(user, request.project_id, request.answer)
    return IntakeResponse(success=True, **result)


@router.get("/mine", response_model=ProjectsResponse)
def list_my_projects(
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    """Projects owned by the calling business, newest first."""
    projects = service.list_owned(user)
    return ProjectsResponse(success=True, count=len(projects), projects=projects)


@router.get("/assigned", response_model=AssignedProjectsResponse)
def list_assigned_projects(
    user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    """Projects the calling freelancer was invited to, grouped by dashboard tab."""
    groups = service.list_assigned(user)
    return AssignedProjectsResponse(success=True, **groups)
