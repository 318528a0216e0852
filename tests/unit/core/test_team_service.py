#!/usr/bin/env python3
"""
Tests for TeamService against an in-memory SQLite database.
"""

import hashlib
import hmac
from dataclasses import replace

import pytest
from sqlalchemy import func, select

from core.enums import (
    ChatRole,
    ExperienceLevel,
    FreelancerRole,
    NotificationType,
    PaymentStatus,
    ProjectStatus,
    Resolution,
    TeamTier,
    UserRole,
)
from core.errors import (
    AlreadyRespondedError,
    InvalidStateError,
    NoFreelancersAvailableError,
    NotFoundError,
    NotOwnerError,
    NotParticipantError,
    PaymentFailedError,
    PaymentRequiredError,
    ValidationError,
)
from core.payments import PaymentConfirmation, RazorpaySignatureVerifier
from core.team_service import TeamService
from database.models import ChatMessage, ChatParticipant, ChatRoom, Notification, Payment, Project
from tests.conftest import make_freelancer, make_project, make_selected_project, make_user

SECRET = "rzp_test_secret"


def confirmation(order_id="order_9", payment_id="pay_9", secret=SECRET):
    signature = hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()
    return PaymentConfirmation(order_id=order_id, payment_id=payment_id, signature=signature)


def notifications_for(session, user):
    return list(session.execute(select(Notification).where(Notification.user_id == user.id)).scalars())


def rooms(session):
    return list(session.execute(select(ChatRoom)).scalars())


def snapshot(project):
    return {
        "status": project.status,
        "version_id": project.version_id,
        "designer_accepted": project.designer_accepted,
        "designer_rejected": project.designer_rejected,
        "developer_accepted": project.developer_accepted,
        "developer_rejected": project.developer_rejected,
    }


@pytest.fixture
def service(uow, app_config):
    return TeamService(uow, app_config, payment_verifier=RazorpaySignatureVerifier(SECRET))


@pytest.fixture
def owner(session):
    return make_user(session, UserRole.BUSINESS, name="Priya Owner")


@pytest.fixture
def team(session):
    designer = make_freelancer(session, FreelancerRole.DESIGNER, ExperienceLevel.SENIOR, rating=4.8, completed_projects=45)
    developer = make_freelancer(session, FreelancerRole.DEVELOPER, skills=["React", "Stripe", "Authentication"])
    return designer, developer


# ---------------------------------------------------------------------------
# Offers
# ---------------------------------------------------------------------------

def test_generate_offers_returns_tiers(session, service, owner, team):
    make_freelancer(session, FreelancerRole.DESIGNER, ExperienceLevel.JUNIOR)
    make_freelancer(session, FreelancerRole.DEVELOPER, ExperienceLevel.JUNIOR)
    project = make_project(session, owner)

    offers = service.generate_offers(owner, project.id)

    assert [o.tier for o in offers] == [TeamTier.PREMIUM, TeamTier.PRO, TeamTier.FREEMIUM]
    assert offers[0].designer.id == team[0].id
    assert offers[0].developer.id == team[1].id
    assert offers[0].score >= offers[1].score >= offers[2].score
    session.refresh(project)
    assert project.status is ProjectStatus.TEAM_PRESENTED
    assert project.team_designer_id is None


def test_generate_offers_skips_unavailable(session, service, owner, team):
    make_freelancer(session, FreelancerRole.DESIGNER, ExperienceLevel.SENIOR, rating=5.0, completed_projects=99, is_available=False)
    project = make_project(session, owner)

    offers = service.generate_offers(owner, project.id)

    assert len(offers) == 1
    assert offers[0].designer.id == team[0].id


def test_generate_offers_empty_pool(session, service, owner):
    make_freelancer(session, FreelancerRole.DESIGNER)
    project = make_project(session, owner)
    version = project.version_id

    with pytest.raises(NoFreelancersAvailableError):
        service.generate_offers(owner, project.id)

    session.refresh(project)
    assert project.status is ProjectStatus.TEAM_PRESENTED
    assert project.version_id == version
    assert project.team_designer_id is None
    assert session.scalar(select(func.count()).select_from(Notification)) == 0
    assert rooms(session) == []


def test_generate_offers_requires_finished_intake(session, service, owner, team):
    project = make_project(session, owner, status=ProjectStatus.CHATTING, intake_step=3)

    with pytest.raises(InvalidStateError):
        service.generate_offers(owner, project.id)
    with pytest.raises(InvalidStateError):
        service.choose_team(owner, project.id, team[0].id, team[1].id, "freemium")

    session.refresh(project)
    assert project.status is ProjectStatus.CHATTING
    assert project.team_designer_id is None


def test_generate_offers_checks_ownership(session, service, owner, team):
    project = make_project(session, owner)
    stranger = make_user(session, UserRole.BUSINESS)

    with pytest.raises(NotOwnerError):
        service.generate_offers(stranger, project.id)
    with pytest.raises(NotFoundError):
        service.generate_offers(owner, make_user(session).id)


# ---------------------------------------------------------------------------
# Team selection
# ---------------------------------------------------------------------------

def test_choose_freemium_team_invites_both(session, service, owner, team):
    designer, developer = team
    project = make_project(session, owner)

    service.choose_team(owner, project.id, designer.id, developer.id, "freemium")

    session.refresh(project)
    assert project.status is ProjectStatus.AWAITING_ACCEPTANCE
    assert project.team_designer_id == designer.id
    assert project.team_developer_id == developer.id
    assert project.team_tier is TeamTier.FREEMIUM
    assert project.invitation_sent_at is not None
    assert project.payment_status is None
    assert not any([project.designer_accepted, project.designer_rejected,
                    project.developer_accepted, project.developer_rejected])

    for member in team:
        received = notifications_for(session, member.user)
        assert len(received) == 1
        assert received[0].type is NotificationType.TEAM_SELECTION
        assert received[0].project_id == project.id
    assert notifications_for(session, owner) == []


def test_paid_tier_requires_payment(session, service, owner, team):
    designer, developer = team
    project = make_project(session, owner)

    with pytest.raises(PaymentRequiredError):
        service.choose_team(owner, project.id, designer.id, developer.id, "premium")

    session.refresh(project)
    assert project.status is ProjectStatus.TEAM_PRESENTED
    assert project.team_designer_id is None
    assert notifications_for(session, designer.user) == []


def test_paid_tier_with_bad_signature(session, service, owner, team):
    designer, developer = team
    project = make_project(session, owner)

    with pytest.raises(PaymentFailedError):
        service.choose_team(owner, project.id, designer.id, developer.id, "pro",
                            payment=confirmation(secret="wrong"))

    session.refresh(project)
    assert project.status is ProjectStatus.TEAM_PRESENTED
    assert project.payment_status is None


def test_paid_tier_with_valid_payment(session, service, owner, team):
    designer, developer = team
    project = make_project(session, owner)

    service.choose_team(owner, project.id, designer.id, developer.id, TeamTier.PRO, payment=confirmation())

    session.refresh(project)
    assert project.status is ProjectStatus.AWAITING_ACCEPTANCE
    assert project.payment_status is PaymentStatus.PAID
    assert project.payment_order_id == "order_9"
    owner_notes = notifications_for(session, owner)
    assert [n.type for n in owner_notes] == [NotificationType.PAYMENT]


def test_payment_cannot_be_reused_on_another_project(session, service, owner, team):
    designer, developer = team
    first = make_project(session, owner)
    second = make_project(session, owner)
    paid = confirmation()

    service.choose_team(owner, first.id, designer.id, developer.id, TeamTier.PRO, payment=paid)

    with pytest.raises(PaymentFailedError):
        service.choose_team(owner, second.id, designer.id, developer.id, TeamTier.PREMIUM, payment=paid)

    session.refresh(second)
    assert second.status is ProjectStatus.TEAM_PRESENTED
    assert second.payment_status is None
    assert second.payment_order_id is None
    assert second.team_designer_id is None
    [payment] = session.execute(select(Payment)).scalars().all()
    assert payment.project_id == first.id
    assert payment.tier is TeamTier.PRO


def test_payment_for_another_tier_is_rejected(session, service, owner, team):
    designer, developer = team
    project = make_project(session, owner)
    pro_order = replace(confirmation(), tier=TeamTier.PRO)

    with pytest.raises(PaymentFailedError):
        service.choose_team(owner, project.id, designer.id, developer.id, TeamTier.PREMIUM, payment=pro_order)

    session.refresh(project)
    assert project.payment_status is None
    assert session.execute(select(Payment)).scalars().all() == []


def test_declined_paid_team_leaves_credit_for_same_tier(session, service, owner, team):
    designer, developer = team
    project = make_project(session, owner)
    service.choose_team(owner, project.id, designer.id, developer.id, TeamTier.PRO, payment=confirmation())
    service.respond_to_invitation(designer.user, project.id, "reject")
    service.respond_to_invitation(developer.user, project.id, "reject")

    session.refresh(project)
    assert project.status is ProjectStatus.TEAM_PRESENTED
    assert project.payment_status is PaymentStatus.PAID
    assert project.payment_order_id == "order_9"

    with pytest.raises(PaymentRequiredError):
        service.choose_team(owner, project.id, designer.id, developer.id, TeamTier.PREMIUM)

    service.choose_team(owner, project.id, designer.id, developer.id, TeamTier.PRO)

    session.refresh(project)
    assert project.status is ProjectStatus.AWAITING_ACCEPTANCE
    assert project.team_tier is TeamTier.PRO
    assert project.payment_order_id == "order_9"
    assert [n.type for n in notifications_for(session, owner)].count(NotificationType.PAYMENT) == 1


def test_choose_team_validation(session, service, owner, team):
    designer, developer = team
    project = make_project(session, owner)
    unavailable = make_freelancer(session, FreelancerRole.DESIGNER, is_available=False)

    with pytest.raises(ValidationError):
        service.choose_team(owner, project.id, designer.id, developer.id, "platinum")
    with pytest.raises(ValidationError):
        service.choose_team(owner, project.id, developer.id, designer.id, "freemium")
    with pytest.raises(ValidationError):
        service.choose_team(owner, project.id, unavailable.id, developer.id, "freemium")
    with pytest.raises(NotOwnerError):
        service.choose_team(make_user(session), project.id, designer.id, developer.id, "freemium")


def test_choose_team_twice_is_invalid(session, service, owner, team):
    designer, developer = team
    project = make_selected_project(session, owner, designer, developer)

    with pytest.raises(InvalidStateError):
        service.choose_team(owner, project.id, designer.id, developer.id, "freemium")


# ---------------------------------------------------------------------------
# Invitation responses
# ---------------------------------------------------------------------------

def test_first_response_waits(session, service, owner, team):
    designer, developer = team
    project = make_selected_project(session, owner, designer, developer)

    result = service.respond_to_invitation(designer.user, project.id, "accept")

    assert result.status is Resolution.WAITING
    assert result.chat_room_id is None
    session.refresh(project)
    assert project.designer_accepted
    assert project.status is ProjectStatus.AWAITING_ACCEPTANCE
    assert rooms(session) == []
    assert notifications_for(session, owner) == []


def test_both_accept_opens_chat(session, service, owner, team):
    designer, developer = team
    project = make_selected_project(session, owner, designer, developer)

    service.respond_to_invitation(designer.user, project.id, "accept")
    result = service.respond_to_invitation(developer.user, project.id, "accept")

    assert result.status is Resolution.BOTH_ACCEPTED
    session.refresh(project)
    assert project.status is ProjectStatus.TEAM_ACCEPTED

    [room] = rooms(session)
    assert result.chat_room_id == room.id
    assert room.project_id == project.id
    roles = {p.user_id: p.role for p in session.execute(select(ChatParticipant)).scalars()}
    assert roles == {
        owner.id: ChatRole.BUSINESS,
        designer.user_id: ChatRole.DESIGNER,
        developer.user_id: ChatRole.DEVELOPER,
    }
    messages = list(session.execute(select(ChatMessage)).scalars())
    assert len(messages) == 1
    assert messages[0].sender_id == owner.id

    owner_notes = notifications_for(session, owner)
    assert [n.title for n in owner_notes] == ["Team Accepted!"]


def test_both_reject_clears_selection(session, service, owner, team):
    designer, developer = team
    project = make_selected_project(session, owner, designer, developer)

    service.respond_to_invitation(developer.user, project.id, "reject")
    result = service.respond_to_invitation(designer.user, project.id, "reject")

    assert result.status is Resolution.BOTH_REJECTED
    session.refresh(project)
    assert project.status is ProjectStatus.TEAM_PRESENTED
    assert project.team_designer_id is None
    assert project.team_developer_id is None
    assert project.team_tier is None
    assert project.invitation_sent_at is None
    assert not project.designer_rejected
    session.refresh(designer)
    session.refresh(developer)
    assert designer.rating == 4.8
    assert developer.rating == 4.5
    assert rooms(session) == []
    assert [n.title for n in notifications_for(session, owner)] == ["Team Unavailable"]


def test_partial_acceptance_penalizes_rejector(session, service, owner, team):
    designer, developer = team
    project = make_selected_project(session, owner, designer, developer)

    service.respond_to_invitation(designer.user, project.id, "accept")
    result = service.respond_to_invitation(developer.user, project.id, "reject")

    assert result.status is Resolution.PARTIAL_ACCEPTANCE
    assert result.accepted_role is FreelancerRole.DESIGNER
    assert result.rejected_role is FreelancerRole.DEVELOPER
    session.refresh(project)
    assert project.status is ProjectStatus.TEAM_ACCEPTED
    assert project.team_developer_id == developer.id

    session.refresh(developer)
    session.refresh(designer)
    assert developer.rating == pytest.approx(4.2)
    assert designer.rating == pytest.approx(4.8)

    [room] = rooms(session)
    participants = {p.user_id for p in session.execute(select(ChatParticipant)).scalars()}
    assert participants == {owner.id, designer.user_id}
    assert [n.title for n in notifications_for(session, owner)] == ["Partial Team Acceptance"]


def test_respond_errors(session, service, owner, team):
    designer, developer = team
    project = make_selected_project(session, owner, designer, developer)
    outsider = make_freelancer(session, FreelancerRole.DEVELOPER)

    with pytest.raises(ValidationError):
        service.respond_to_invitation(designer.user, project.id, "maybe")
    with pytest.raises(NotParticipantError):
        service.respond_to_invitation(outsider.user, project.id, "accept")
    with pytest.raises(NotParticipantError):
        service.respond_to_invitation(owner, project.id, "accept")

    service.respond_to_invitation(designer.user, project.id, "reject")
    session.refresh(project)
    after_first = snapshot(project)

    with pytest.raises(AlreadyRespondedError):
        service.respond_to_invitation(designer.user, project.id, "accept")

    session.refresh(project)
    assert snapshot(project) == after_first
    assert after_first["designer_rejected"] is True

    with pytest.raises(NotFoundError):
        service.respond_to_invitation(designer.user, outsider.id, "accept")


def test_respond_after_resolution_is_invalid(session, service, owner, team):
    designer, developer = team
    project = make_selected_project(session, owner, designer, developer,
                                    designer_accepted=True, developer_accepted=True)
    project.status = ProjectStatus.TEAM_ACCEPTED
    session.commit()

    with pytest.raises(InvalidStateError):
        service.respond_to_invitation(designer.user, project.id, "reject")


# ---------------------------------------------------------------------------
# Replacements
# ---------------------------------------------------------------------------

@pytest.fixture
def partial_project(session, service, owner, team):
    """Designer accepted, developer declined."""
    designer, developer = team
    project = make_selected_project(session, owner, designer, developer)
    service.respond_to_invitation(designer.user, project.id, "accept")
    service.respond_to_invitation(developer.user, project.id, "reject")
    return project


def test_find_replacement_excludes_team(session, service, owner, team, partial_project):
    designer, developer = team
    alternatives = [make_freelancer(session, FreelancerRole.DEVELOPER, rating=3.0 + i * 0.5) for i in range(3)]

    candidates = service.find_replacement(owner, partial_project.id, "developer")

    ids = [c.freelancer.id for c in candidates]
    assert developer.id not in ids
    assert ids == [alternatives[2].id, alternatives[1].id, alternatives[0].id]


def test_find_replacement_none_available(session, service, owner, partial_project):
    from core.errors import NoneAvailableError

    with pytest.raises(NoneAvailableError):
        service.find_replacement(owner, partial_project.id, FreelancerRole.DEVELOPER)
    with pytest.raises(ValidationError):
        service.find_replacement(owner, partial_project.id, "tester")


def test_replacement_accepts_into_existing_room(session, service, owner, team, partial_project):
    designer, developer = team
    replacement = make_freelancer(session, FreelancerRole.DEVELOPER, skills=["React", "Node.js", "Stripe"])

    service.select_replacement(owner, partial_project.id, "developer", replacement.id)

    session.refresh(partial_project)
    assert partial_project.status is ProjectStatus.AWAITING_ACCEPTANCE
    assert partial_project.team_developer_id == replacement.id
    assert partial_project.team_designer_id == designer.id
    assert partial_project.designer_accepted
    assert not partial_project.developer_accepted
    assert not partial_project.developer_rejected
    invitations = notifications_for(session, replacement.user)
    assert [n.type for n in invitations] == [NotificationType.INVITATION]

    result = service.respond_to_invitation(replacement.user, partial_project.id, "accept")

    assert result.status is Resolution.BOTH_ACCEPTED
    [room] = rooms(session)
    assert result.chat_room_id == room.id
    participants = {p.user_id for p in session.execute(select(ChatParticipant)).scalars()}
    assert participants == {owner.id, designer.user_id, replacement.user_id}
    assert len(list(session.execute(select(ChatMessage)).scalars())) == 1
    session.refresh(partial_project)
    assert partial_project.status is ProjectStatus.TEAM_ACCEPTED


def test_select_replacement_validation(session, service, owner, team, partial_project):
    designer, developer = team
    other_designer = make_freelancer(session, FreelancerRole.DESIGNER)
    busy = make_freelancer(session, FreelancerRole.DEVELOPER, is_available=False)

    with pytest.raises(InvalidStateError):
        service.select_replacement(owner, partial_project.id, "designer", other_designer.id)
    with pytest.raises(ValidationError):
        service.select_replacement(owner, partial_project.id, "developer", other_designer.id)
    with pytest.raises(ValidationError):
        service.select_replacement(owner, partial_project.id, "developer", busy.id)
    with pytest.raises(ValidationError):
        service.select_replacement(owner, partial_project.id, "developer", developer.id)
    with pytest.raises(NotFoundError):
        service.select_replacement(owner, partial_project.id, "developer", owner.id)

    session.refresh(partial_project)
    assert partial_project.team_developer_id == developer.id
    assert partial_project.status is ProjectStatus.TEAM_ACCEPTED


def test_select_replacement_without_team(session, service, owner, team):
    project = make_project(session, owner)
    with pytest.raises(InvalidStateError):
        service.select_replacement(owner, project.id, "developer", team[1].id)
