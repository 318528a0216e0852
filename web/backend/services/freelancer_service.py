#!/usr/bin/env python3
"""
Onboarding and freelancer profile operations.
"""

import logging
from typing import Any, Dict, Optional

from core.enums import ExperienceLevel, FreelancerRole, UserRole
from core.errors import NotFoundError, ValidationError
from core.team_service import parse_enum
from database.models import Freelancer, User
from database.uow import UnitOfWork
from ..models.requests import FreelancerProfileCreate, FreelancerProfileUpdate, OnboardingRequest
from ..models.responses import FreelancerView, UserView
from ..utils import enum_value, safe_str

logger = logging.getLogger(__name__)

MIN_SKILLS = 3


def user_view(user: User) -> UserView:
    return UserView(
        id=str(user.id),
        external_id=user.external_id,
        email=safe_str(user.email),
        name=safe_str(user.name),
        role=enum_value(user.role),
    )


def freelancer_view(freelancer: Freelancer) -> FreelancerView:
    return FreelancerView(
        id=str(freelancer.id),
        user_id=str(freelancer.user_id),
        name=freelancer.name,
        role=enum_value(freelancer.role),
        experience_level=enum_value(freelancer.experience_level),
        skills=list(freelancer.skills or []),
        tools_used=list(freelancer.tools_used or []),
        hourly_rate=freelancer.hourly_rate,
        bio=freelancer.bio,
        portfolio_url=freelancer.portfolio_url,
        rating=freelancer.rating,
        completed_projects=freelancer.completed_projects or 0,
        is_available=bool(freelancer.is_available),
    )


def _clean_skills(skills) -> list:
    return [s.strip() for s in skills if s and s.strip()]


class FreelancerDirectoryService:
    """User onboarding and the freelancer directory's self-service profile."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def onboard(self, identity: str, request: OnboardingRequest) -> Dict[str, Any]:
        role = parse_enum(UserRole, request.role, "role")
        user = self.uow.users.upsert(identity, role, email=request.email or '', name=request.name or '')
        self.uow.commit()

        if role is UserRole.BUSINESS:
            redirect_to = '/dashboard/business'
        elif self.uow.freelancers.get_by_user_id(user.id) is None:
            redirect_to = '/dashboard/freelancer/profile'
        else:
            redirect_to = '/dashboard/freelancer'
        return {'user': user_view(user), 'redirect_to': redirect_to}

    def get_profile(self, user: User) -> Optional[FreelancerView]:
        freelancer = self.uow.freelancers.get_by_user_id(user.id)
        return freelancer_view(freelancer) if freelancer else None

    def save_profile(self, user: User, request: FreelancerProfileCreate) -> FreelancerView:
        """Create the caller's profile, or overwrite its editable fields if one exists."""
        role = parse_enum(FreelancerRole, request.role, "freelancer type")
        skills = _clean_skills(request.skills)
        if len(skills) < MIN_SKILLS:
            raise ValidationError(f"At least {MIN_SKILLS} skills are required")
        experience = parse_enum(ExperienceLevel, request.experience_level, "experience level")

        fields = {
            'role': role,
            'experience_level': experience,
            'skills': skills,
            'tools_used': request.tools_used or [],
            'hourly_rate': request.hourly_rate,
            'bio': request.bio,
            'portfolio_url': request.portfolio_url,
        }

        if user.role is not UserRole.FREELANCER:
            user.role = UserRole.FREELANCER

        freelancer = self.uow.freelancers.get_by_user_id(user.id)
        if freelancer is None:
            freelancer = self.uow.freelancers.create(user.id, fields)
            logger.info(f"Created {role.value} profile {freelancer.id} for user {user.id}")
        else:
            fields['is_available'] = True
            self.uow.freelancers.update_profile(freelancer, fields)
        self.uow.commit()
        return freelancer_view(freelancer)

    def update_profile(self, user: User, request: FreelancerProfileUpdate) -> FreelancerView:
        freelancer = self.uow.freelancers.get_by_user_id(user.id)
        if freelancer is None:
            raise NotFoundError("Profile not found")

        fields = request.model_dump(exclude_unset=True)
        if 'experience_level' in fields:
            fields['experience_level'] = parse_enum(ExperienceLevel, fields['experience_level'], "experience level")
        if 'skills' in fields:
            skills = _clean_skills(fields['skills'] or [])
            if len(skills) < MIN_SKILLS:
                raise ValidationError(f"At least {MIN_SKILLS} skills are required")
            fields['skills'] = skills
        if fields.get('tools_used') is None:
            fields.pop('tools_used', None)
        if fields.get('is_available') is None:
            fields.pop('is_available', None)

        self.uow.freelancers.update_profile(freelancer, fields)
        self.uow.commit()
        return freelancer_view(freelancer)
