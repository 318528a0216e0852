#!/usr/bin/env python3
"""
Team Service - offers, team selection, invitations and replacements.

Each mutating operation is one transaction on the unit of work's session:
checks run first, then the project row is changed, notifications are written,
and the session commits. External notification deliveries go out only after
the commit.

``respond_to_invitation`` is the race-prone path. It reads the project with a
row lock and writes through the versioned UPDATE; when another response
commits in between, the whole read-decide-write sequence is rolled back and
re-run against a fresh read.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional, Tuple

from tenacity import Retrying, stop_after_attempt, retry_if_exception_type, wait_random

from core.config_loader import AppConfig, get_config
from core.enums import (
    ChatRole,
    FreelancerRole,
    InvitationDecision,
    PaymentStatus,
    ProjectStatus,
    Resolution,
    TeamTier,
)
from core.errors import (
    ConcurrentUpdateError,
    InvalidStateError,
    NotFoundError,
    NotOwnerError,
    NotParticipantError,
    PaymentFailedError,
    PaymentRequiredError,
    ValidationError,
)
from core.intake import TOTAL_STEPS
from core.invitations import (
    TeamSelection,
    choose_team,
    record_response,
    resolve,
    swap_member,
)
from core.matcher import CandidateScore, Offer, ReplacementFinder, TeamOfferBuilder
from core.payments import PaymentConfirmation, PaymentVerifier, RazorpaySignatureVerifier
from core.scorer import KeywordRequirementInterpreter, RequirementInterpreter
from database.models import ChatRoom, Freelancer, Payment, Project, User
from database.uow import UnitOfWork
from notification import NotificationMessageBuilder, NotificationService

logger = logging.getLogger(__name__)

REPLACEABLE_STATUSES = frozenset({ProjectStatus.AWAITING_ACCEPTANCE, ProjectStatus.TEAM_ACCEPTED})


@dataclass
class InvitationResult:
    status: Resolution
    message: str
    chat_room_id: Optional[Any] = None
    accepted_role: Optional[FreelancerRole] = None
    rejected_role: Optional[FreelancerRole] = None


def parse_enum(enum_cls, value: Any, label: str):
    """Coerce ``value`` into ``enum_cls``; unknown values are a ValidationError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}'. Valid options: {allowed}")


def invitation_expires_at(project: Project, response_window_hours: int) -> Optional[datetime]:
    """Advisory response deadline shown to invitees; no transition enforces it."""
    if project.invitation_sent_at is None or project.status is not ProjectStatus.AWAITING_ACCEPTANCE:
        return None
    return project.invitation_sent_at + timedelta(hours=response_window_hours)


def selection_of(project: Project) -> Optional[TeamSelection]:
    if not project.has_selected_team:
        return None
    return TeamSelection(
        designer_id=project.team_designer_id,
        developer_id=project.team_developer_id,
        tier=project.team_tier,
        designer_accepted=project.designer_accepted,
        designer_rejected=project.designer_rejected,
        developer_accepted=project.developer_accepted,
        developer_rejected=project.developer_rejected,
    )


def store_selection(project: Project, selection: Optional[TeamSelection]) -> None:
    """Write ``selection`` into the project's team columns; None clears them all."""
    if selection is None:
        project.team_designer_id = None
        project.team_developer_id = None
        project.team_tier = None
        project.designer_accepted = False
        project.designer_rejected = False
        project.developer_accepted = False
        project.developer_rejected = False
        project.invitation_sent_at = None
        return

    project.team_designer_id = selection.designer_id
    project.team_developer_id = selection.developer_id
    project.team_tier = selection.tier
    project.designer_accepted = selection.designer_accepted
    project.designer_rejected = selection.designer_rejected
    project.developer_accepted = selection.developer_accepted
    project.developer_rejected = selection.developer_rejected


class TeamService:
    def __init__(
        self,
        uow: UnitOfWork,
        config: Optional[AppConfig] = None,
        interpreter: Optional[RequirementInterpreter] = None,
        payment_verifier: Optional[PaymentVerifier] = None,
        notifications: Optional[NotificationService] = None
    ):
        self.uow = uow
        self.config = config or get_config()
        self.interpreter = interpreter or KeywordRequirementInterpreter(self.config.matching)
        self.payment_verifier = payment_verifier or RazorpaySignatureVerifier(self.config.payments.key_secret)
        self.notifications = notifications or NotificationService(
            uow.notifications, self.config.notifications
        )
        self.offer_builder = TeamOfferBuilder(self.config.matching)
        self.replacement_finder = ReplacementFinder(self.config.matching)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _owned_project(self, owner: User, project_id: Any, for_update: bool = False) -> Project:
        projects = self.uow.projects
        project = projects.get_for_update(project_id) if for_update else projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        if project.owner_id != owner.id:
            raise NotOwnerError("You do not own this project")
        return project

    def _require_intake_complete(self, project: Project) -> None:
        if (project.intake_step or 0) < TOTAL_STEPS:
            raise InvalidStateError("Finish the project intake before building a team")

    def _team_member(self, freelancer_id: Any, role: FreelancerRole) -> Freelancer:
        freelancer = self.uow.freelancers.get_by_id(freelancer_id)
        if freelancer is None:
            raise ValidationError(f"Selected {role.value} does not exist")
        if FreelancerRole(freelancer.role) is not role:
            raise ValidationError(f"Selected freelancer is not a {role.value}")
        if not freelancer.is_available:
            raise ValidationError(f"Selected {role.value} is not available")
        return freelancer

    def _commit(self) -> None:
        self.uow.commit()
        self.notifications.flush()

    def _abort(self) -> None:
        self.uow.rollback()
        self.notifications.discard()

    def _open_chat_room(self, project: Project, members: Iterable[Tuple[FreelancerRole, Freelancer]]) -> ChatRoom:
        """Get or create the project's room and make sure the owner and ``members`` are in it."""
        chats = self.uow.chats
        owner = project.owner
        room, created = chats.get_or_create_for_project(project.id)
        chats.ensure_participant(room, owner.id, ChatRole.BUSINESS, owner.name)
        for role, freelancer in members:
            chats.ensure_participant(room, freelancer.user_id, ChatRole(role.value), freelancer.name)

        if created:
            chats.add_message(
                room.id,
                owner.id,
                owner.name,
                f"Welcome to the project chat! Let's build this {project.website_type or 'web'} project together. 🚀"
            )
        return room

    # ------------------------------------------------------------------
    # Offers
    # ------------------------------------------------------------------

    def generate_offers(self, owner: User, project_id: Any) -> List[Offer]:
        """Score every available pair and return up to three tiered offers. Read-only."""
        project = self._owned_project(owner, project_id)
        self._require_intake_complete(project)
        requirements = self.interpreter.interpret(project)
        designers = self.uow.freelancers.list_available(FreelancerRole.DESIGNER)
        developers = self.uow.freelancers.list_available(FreelancerRole.DEVELOPER)
        logger.info(
            f"Generating offers for project {project.id}: "
            f"{len(designers)} designers, {len(developers)} developers"
        )
        return self.offer_builder.build_offers(requirements, designers, developers)

    # ------------------------------------------------------------------
    # Team selection
    # ------------------------------------------------------------------

    def choose_team(
        self,
        owner: User,
        project_id: Any,
        designer_id: Any,
        developer_id: Any,
        tier: Any,
        payment: Optional[PaymentConfirmation] = None
    ) -> Project:
        """
        Invite a designer+developer team. Premium and pro need a verified
        payment for this project and tier, unless the project still holds an
        unspent payment of the same tier from a team that declined.
        """
        tier = parse_enum(TeamTier, tier, "tier")
        try:
            project = self._owned_project(owner, project_id, for_update=True)
            self._require_intake_complete(project)
            selection = choose_team(project.status, selection_of(project), designer_id, developer_id, tier)
            designer = self._team_member(designer_id, FreelancerRole.DESIGNER)
            developer = self._team_member(developer_id, FreelancerRole.DEVELOPER)

            new_payment = None
            if tier.is_paid and not self._has_payment_credit(project, tier):
                new_payment = self._record_payment(project, tier, payment)

            store_selection(project, selection)
            project.status = ProjectStatus.AWAITING_ACCEPTANCE
            project.invitation_sent_at = datetime.now(timezone.utc)
            if new_payment is not None:
                project.payment_status = PaymentStatus.PAID
                project.payment_order_id = new_payment.order_id
            self.uow.projects.save(project)

            window = self.config.invitations.response_window_hours
            for role, member in ((FreelancerRole.DESIGNER, designer), (FreelancerRole.DEVELOPER, developer)):
                self.notifications.notify(
                    member.user,
                    NotificationMessageBuilder.team_selected(project.website_type, role.value, window),
                    project_id=project.id
                )
            if new_payment is not None:
                self.notifications.notify(
                    owner,
                    NotificationMessageBuilder.payment_received(project.website_type, tier.value, new_payment.order_id),
                    project_id=project.id
                )

            self._commit()
        except Exception:
            self._abort()
            raise

        logger.info(f"Project {project.id}: {tier.value} team selected, awaiting acceptance")
        return project

    def _has_payment_credit(self, project: Project, tier: TeamTier) -> bool:
        """A paid selection both freelancers declined leaves its payment on the project."""
        if project.payment_status is not PaymentStatus.PAID or not project.payment_order_id:
            return False
        paid = self.uow.payments.get_by_order_id(project.payment_order_id)
        return paid is not None and paid.tier is tier

    def _record_payment(self, project: Project, tier: TeamTier, payment: Optional[PaymentConfirmation]) -> Payment:
        if payment is None:
            raise PaymentRequiredError(f"The {tier.value} team requires payment")
        self.payment_verifier.require_valid(payment)
        if payment.tier is not None and payment.tier is not tier:
            raise PaymentFailedError(f"This payment was made for the {payment.tier.value} team, not {tier.value}")
        if self.uow.payments.get_by_order_id(payment.order_id) is not None:
            raise PaymentFailedError("This payment has already been used")
        return self.uow.payments.record(payment.order_id, payment.payment_id, project.id, tier)

    # ------------------------------------------------------------------
    # Invitation responses
    # ------------------------------------------------------------------

    def respond_to_invitation(self, user: User, project_id: Any, decision: Any) -> InvitationResult:
        decision = parse_enum(InvitationDecision, decision, "response")
        retrying = Retrying(
            stop=stop_after_attempt(self.config.invitations.conflict_retry_attempts),
            retry=retry_if_exception_type(ConcurrentUpdateError),
            wait=wait_random(0, 0.05),
            before_sleep=lambda state: logger.warning(
                f"Conflicting invitation response on project {project_id}; "
                f"retrying (attempt {state.attempt_number})"
            ),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return self._respond_once(user, project_id, decision)

    def _respond_once(self, user: User, project_id: Any, decision: InvitationDecision) -> InvitationResult:
        try:
            project = self.uow.projects.get_for_update(project_id)
            if project is None:
                raise NotFoundError("Project not found")

            freelancer = self.uow.freelancers.get_by_user_id(user.id)
            current = selection_of(project)
            role = current.role_of(freelancer.id) if (current and freelancer) else None
            if role is None:
                raise NotParticipantError("You are not part of this team")

            updated = record_response(project.status, current, role, decision)
            store_selection(project, updated)
            self.uow.projects.save(project)

            result = self._resolve(project, updated, role, decision)
            self.uow.projects.save(project)
            self._commit()
        except Exception:
            self._abort()
            raise

        logger.info(f"Project {project_id}: {role.value} {decision.value}ed, resolution {result.status.value}")
        return result

    def _resolve(
        self,
        project: Project,
        selection: TeamSelection,
        role: FreelancerRole,
        decision: InvitationDecision
    ) -> InvitationResult:
        resolution = resolve(selection)
        owner = project.owner
        website_type = project.website_type

        if resolution is Resolution.WAITING:
            return InvitationResult(
                status=resolution,
                message=f"You {decision.value}ed the invitation. Waiting for the other freelancer to respond.",
            )

        freelancers = self.uow.freelancers
        designer = freelancers.get_by_id(selection.designer_id)
        developer = freelancers.get_by_id(selection.developer_id)

        if resolution is Resolution.BOTH_ACCEPTED:
            room = self._open_chat_room(project, (
                (FreelancerRole.DESIGNER, designer),
                (FreelancerRole.DEVELOPER, developer),
            ))
            project.status = ProjectStatus.TEAM_ACCEPTED
            self.notifications.notify(
                owner, NotificationMessageBuilder.team_accepted(website_type), project_id=project.id
            )
            return InvitationResult(
                status=resolution,
                message="Both freelancers accepted! Chat room created.",
                chat_room_id=room.id,
            )

        if resolution is Resolution.BOTH_REJECTED:
            # Payment fields stay: a paid order is credit for the next selection of its tier.
            store_selection(project, None)
            project.status = ProjectStatus.TEAM_PRESENTED
            self.notifications.notify(
                owner, NotificationMessageBuilder.team_unavailable(website_type), project_id=project.id
            )
            return InvitationResult(
                status=resolution,
                message="Both freelancers rejected. No rating impact.",
            )

        accepted_role = FreelancerRole.DESIGNER if selection.designer_accepted else FreelancerRole.DEVELOPER
        rejected_role = accepted_role.other
        accepted = designer if accepted_role is FreelancerRole.DESIGNER else developer
        rejector = designer if rejected_role is FreelancerRole.DESIGNER else developer

        room = self._open_chat_room(project, ((accepted_role, accepted),))
        project.status = ProjectStatus.TEAM_ACCEPTED

        invitations = self.config.invitations
        new_rating = self.uow.freelancers.apply_rating_penalty(
            rejector, invitations.rejection_penalty, invitations.rating_floor
        )
        logger.info(f"Freelancer {rejector.id} rating lowered to {new_rating} after declining")

        self.notifications.notify(
            owner,
            NotificationMessageBuilder.partial_acceptance(website_type, accepted_role.value, rejected_role.value),
            project_id=project.id
        )
        return InvitationResult(
            status=resolution,
            message=(
                f"{accepted_role.value} accepted. Chat room created. "
                f"{rejected_role.value} declined (rating reduced)."
            ),
            chat_room_id=room.id,
            accepted_role=accepted_role,
            rejected_role=rejected_role,
        )

    # ------------------------------------------------------------------
    # Replacements
    # ------------------------------------------------------------------

    def find_replacement(self, owner: User, project_id: Any, role: Any) -> List[CandidateScore]:
        role = parse_enum(FreelancerRole, role, "role")
        project = self._owned_project(owner, project_id)
        requirements = self.interpreter.interpret(project)

        team_ids = {project.team_designer_id, project.team_developer_id} - {None}
        candidates = [
            f for f in self.uow.freelancers.list_available(role)
            if f.id not in team_ids
        ]
        return self.replacement_finder.find(requirements, candidates, role)

    def select_replacement(self, owner: User, project_id: Any, role: Any, candidate_id: Any) -> Project:
        role = parse_enum(FreelancerRole, role, "role")
        try:
            project = self._owned_project(owner, project_id, for_update=True)
            current = selection_of(project)
            if current is None or project.status not in REPLACEABLE_STATUSES:
                raise InvalidStateError("No team is awaiting a replacement on this project")

            candidate = self.uow.freelancers.get_by_id(candidate_id)
            if candidate is None:
                raise NotFoundError("Replacement freelancer not found")
            if FreelancerRole(candidate.role) is not role:
                raise ValidationError(f"Replacement is not a {role.value}")
            if not candidate.is_available:
                raise ValidationError("Replacement freelancer is not available")
            if candidate.id in (current.designer_id, current.developer_id):
                raise ValidationError("Replacement is already on this team")

            store_selection(project, swap_member(current, role, candidate.id))
            project.status = ProjectStatus.AWAITING_ACCEPTANCE
            project.invitation_sent_at = datetime.now(timezone.utc)
            self.uow.projects.save(project)

            self.notifications.notify(
                candidate.user,
                NotificationMessageBuilder.replacement_invitation(
                    project.website_type, role.value, self.config.invitations.response_window_hours
                ),
                project_id=project.id
            )
            self._commit()
        except Exception:
            self._abort()
            raise

        logger.info(f"Project {project.id}: replacement {role.value} {candidate.id} invited")
        return project
