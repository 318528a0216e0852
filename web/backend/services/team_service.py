#!/usr/bin/env python3
"""
Team service wrapper - adapts core.team_service results to API views.
"""

import logging
from typing import Any, Dict, List, Optional

from core.config_loader import AppConfig, get_config
from core.enums import FreelancerRole, TeamTier
from core.payments import PaymentConfirmation, PaymentVerifier
from core.team_service import InvitationResult, TeamService, parse_enum
from database.models import User
from database.uow import UnitOfWork
from ..models.requests import PaymentDetails
from ..models.responses import OfferView, ProjectView, ReplacementCandidateView
from ..utils import enum_value, optional_str
from .freelancer_service import freelancer_view
from .project_service import project_view

logger = logging.getLogger(__name__)


class TeamServiceWrapper:
    """Wrapper for TeamService bound to the request's unit of work."""

    def __init__(
        self,
        uow: UnitOfWork,
        config: Optional[AppConfig] = None,
        payment_verifier: Optional[PaymentVerifier] = None
    ):
        self.uow = uow
        self.config = config or get_config()
        self.team_service = TeamService(uow, self.config, payment_verifier=payment_verifier)

    def generate_offers(self, owner: User, project_id: Any) -> List[OfferView]:
        return [
            OfferView(
                tier=offer.tier.value,
                score=offer.score,
                designer=freelancer_view(offer.designer),
                developer=freelancer_view(offer.developer),
                platform_fee=offer.platform_fee,
                estimated_hours=offer.estimated_hours,
                estimated_project_cost=offer.estimated_project_cost,
            )
            for offer in self.team_service.generate_offers(owner, project_id)
        ]

    def select_team(
        self,
        owner: User,
        project_id: Any,
        designer_id: Any,
        developer_id: Any,
        tier: str,
        payment: Optional[PaymentDetails] = None
    ) -> ProjectView:
        confirmation = None
        if payment is not None:
            confirmation = PaymentConfirmation(
                order_id=payment.order_id,
                payment_id=payment.payment_id,
                signature=payment.signature,
                tier=parse_enum(TeamTier, payment.tier, "payment tier") if payment.tier else None,
            )
        project = self.team_service.choose_team(
            owner, project_id, designer_id, developer_id, tier, payment=confirmation
        )
        return project_view(project, self.config.invitations.response_window_hours)

    def respond(self, user: User, project_id: Any, decision: str) -> Dict[str, Any]:
        result: InvitationResult = self.team_service.respond_to_invitation(user, project_id, decision)
        return {
            'status': result.status.value,
            'message': result.message,
            'chat_room_id': optional_str(result.chat_room_id),
            'accepted_role': enum_value(result.accepted_role),
            'rejected_role': enum_value(result.rejected_role),
        }

    def find_replacements(self, owner: User, project_id: Any, role: str) -> Dict[str, Any]:
        """Ranked candidates plus the id of the teammate who stays on the project."""
        role = parse_enum(FreelancerRole, role, "role")
        candidates = self.team_service.find_replacement(owner, project_id, role)

        project = self.uow.projects.get_by_id(project_id)
        existing = project.team_developer_id if role is FreelancerRole.DESIGNER else project.team_designer_id
        return {
            'role': role.value,
            'existing_member_id': optional_str(existing),
            'replacements': [
                ReplacementCandidateView(
                    **freelancer_view(c.freelancer).model_dump(),
                    match_score=c.score,
                )
                for c in candidates
            ],
        }

    def select_replacement(self, owner: User, project_id: Any, role: str, candidate_id: Any) -> ProjectView:
        project = self.team_service.select_replacement(owner, project_id, role, candidate_id)
        return project_view(project, self.config.invitations.response_window_hours)
