#!/usr/bin/env python3
"""
Project service - intake conversation and project listings.
"""

import logging
from typing import Any, Dict, List, Optional

from core.config_loader import AppConfig, get_config
from core.enums import FreelancerRole, ProjectStatus, UserRole
from core.errors import NotAuthorizedError, NotFoundError, NotOwnerError
from core.intake import IntakeParser
from core.team_service import invitation_expires_at
from database.models import Project, User
from database.uow import UnitOfWork
from ..models.responses import AssignedProjectView, ProjectView, TeamView
from ..utils import enum_value, optional_str, safe_datetime_iso, safe_str

logger = logging.getLogger(__name__)

ONGOING_STATUSES = frozenset({ProjectStatus.TEAM_ACCEPTED, ProjectStatus.IN_PROGRESS})


def project_fields(project: Project, response_window_hours: int) -> Dict[str, Any]:
    team = None
    if project.has_selected_team:
        team = TeamView(
            designer_id=str(project.team_designer_id),
            developer_id=str(project.team_developer_id),
            tier=enum_value(project.team_tier),
            designer_accepted=project.designer_accepted,
            designer_rejected=project.designer_rejected,
            developer_accepted=project.developer_accepted,
            developer_rejected=project.developer_rejected,
            invitation_sent_at=safe_datetime_iso(project.invitation_sent_at),
            invitation_expires_at=safe_datetime_iso(invitation_expires_at(project, response_window_hours)),
        )

    return {
        'id': str(project.id),
        'status': enum_value(project.status),
        'website_type': safe_str(project.website_type),
        'design_complexity': safe_str(project.design_complexity),
        'features': list(project.features or []),
        'page_count': project.page_count or 0,
        'timeline': safe_str(project.timeline),
        'budget_range': safe_str(project.budget_range),
        'tech_preference': project.tech_preference,
        'intake_step': project.intake_step or 0,
        'team': team,
        'payment_status': enum_value(project.payment_status),
        'chat_room_id': optional_str(project.chat_room.id if project.chat_room else None),
        'created_at': safe_datetime_iso(project.created_at),
        'updated_at': safe_datetime_iso(project.updated_at),
    }


def project_view(project: Project, response_window_hours: int) -> ProjectView:
    return ProjectView(**project_fields(project, response_window_hours))


class ProjectService:
    def __init__(self, uow: UnitOfWork, config: Optional[AppConfig] = None):
        self.uow = uow
        self.config = config or get_config()
        self.intake_parser = IntakeParser(self.config.matching)

    @property
    def _window(self) -> int:
        return self.config.invitations.response_window_hours

    def answer_intake(self, user: User, project_id: Optional[Any], answer: str) -> Dict[str, Any]:
        """Record the next intake answer, creating the project on the first one."""
        if user.role is not UserRole.BUSINESS:
            raise NotAuthorizedError("Only business accounts can create projects")

        if project_id is None:
            project = self.uow.projects.create(user.id)
            logger.info(f"Started intake for new project {project.id}")
        else:
            project = self.uow.projects.get_by_id(project_id)
            if project is None:
                raise NotFoundError("Project not found")
            if project.owner_id != user.id:
                raise NotOwnerError("You do not own this project")

        try:
            progress = self.intake_parser.apply_answer(project, answer)
            self.uow.projects.save(project)
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            raise

        return {
            'project_id': str(project.id),
            'step': progress.step,
            'complete': progress.complete,
            'next_question': progress.next_question,
            'show_create_team': progress.complete,
        }

    def list_owned(self, user: User) -> List[ProjectView]:
        return [project_view(p, self._window) for p in self.uow.projects.list_for_owner(user.id)]

    def list_assigned(self, user: User) -> Dict[str, List[AssignedProjectView]]:
        """Projects the caller's freelancer profile is on, grouped for the dashboard."""
        freelancer = self.uow.freelancers.get_by_user_id(user.id)
        if freelancer is None:
            raise NotFoundError("Freelancer profile not found")

        groups = {'pending': [], 'ongoing': [], 'completed': []}
        for project in self.uow.projects.list_for_freelancer(freelancer.id):
            role = FreelancerRole.DESIGNER if project.team_designer_id == freelancer.id else FreelancerRole.DEVELOPER
            accepted = getattr(project, f"{role.value}_accepted")
            rejected = getattr(project, f"{role.value}_rejected")
            view = AssignedProjectView(
                **project_fields(project, self._window),
                my_role=role.value,
                my_acceptance=accepted,
                my_rejection=rejected,
            )

            if project.status is ProjectStatus.AWAITING_ACCEPTANCE and not (accepted or rejected):
                groups['pending'].append(view)
            elif project.status in ONGOING_STATUSES and accepted:
                groups['ongoing'].append(view)
            elif project.status is ProjectStatus.COMPLETED:
                groups['completed'].append(view)
        return groups
