#!/usr/bin/env python3
"""
Invitation State Machine.

Pure transitions over a selected team. Nothing here touches the database;
``core.team_service`` loads the project, runs these functions and persists
the result in one transaction.

Status flow:

    chatting --intake complete--> team_presented
    team_presented --choose_team--> awaiting_acceptance
    awaiting_acceptance --both accept--> team_accepted
    awaiting_acceptance --both reject--> team_presented (selection cleared)
    awaiting_acceptance --one each--> team_accepted (rejector penalized)
    team_accepted --select_replacement--> awaiting_acceptance
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

from core.enums import FreelancerRole, InvitationDecision, ProjectStatus, Resolution, TeamTier
from core.errors import AlreadyRespondedError, InvalidStateError, ValidationError

SELECTABLE_STATUSES = frozenset({ProjectStatus.TEAM_PRESENTED})


@dataclass(frozen=True)
class TeamSelection:
    designer_id: Any
    developer_id: Any
    tier: TeamTier
    designer_accepted: bool = False
    designer_rejected: bool = False
    developer_accepted: bool = False
    developer_rejected: bool = False

    def member_id(self, role: FreelancerRole) -> Any:
        if role is FreelancerRole.DESIGNER:
            return self.designer_id
        return self.developer_id

    def role_of(self, freelancer_id: Any) -> Optional[FreelancerRole]:
        if freelancer_id == self.designer_id:
            return FreelancerRole.DESIGNER
        if freelancer_id == self.developer_id:
            return FreelancerRole.DEVELOPER
        return None

    def accepted(self, role: FreelancerRole) -> bool:
        return getattr(self, f"{role.value}_accepted")

    def rejected(self, role: FreelancerRole) -> bool:
        return getattr(self, f"{role.value}_rejected")

    def has_responded(self, role: FreelancerRole) -> bool:
        return self.accepted(role) or self.rejected(role)


def choose_team(
    status: ProjectStatus,
    current: Optional[TeamSelection],
    designer_id: Any,
    developer_id: Any,
    tier: TeamTier
) -> TeamSelection:
    if status not in SELECTABLE_STATUSES:
        raise InvalidStateError(f"Cannot select a team while project is {status.value}")
    if current is not None:
        raise InvalidStateError("A team has already been selected for this project")
    if designer_id is None or developer_id is None:
        raise ValidationError("Both a designer and a developer are required")
    return TeamSelection(designer_id=designer_id, developer_id=developer_id, tier=tier)


def record_response(
    status: ProjectStatus,
    selection: Optional[TeamSelection],
    role: FreelancerRole,
    decision: InvitationDecision
) -> TeamSelection:
    if status is not ProjectStatus.AWAITING_ACCEPTANCE or selection is None:
        raise InvalidStateError("Invitations already processed")
    if selection.has_responded(role):
        raise AlreadyRespondedError("You have already responded to this invitation")

    suffix = "accepted" if decision is InvitationDecision.ACCEPT else "rejected"
    return replace(selection, **{f"{role.value}_{suffix}": True})


def resolve(selection: TeamSelection) -> Resolution:
    designer, developer = FreelancerRole.DESIGNER, FreelancerRole.DEVELOPER
    if not (selection.has_responded(designer) and selection.has_responded(developer)):
        return Resolution.WAITING
    if selection.accepted(designer) and selection.accepted(developer):
        return Resolution.BOTH_ACCEPTED
    if selection.rejected(designer) and selection.rejected(developer):
        return Resolution.BOTH_REJECTED
    return Resolution.PARTIAL_ACCEPTANCE


def swap_member(selection: TeamSelection, role: FreelancerRole, candidate_id: Any) -> TeamSelection:
    """Put ``candidate_id`` in the rejected seat with fresh flags; the other seat is kept."""
    if not selection.rejected(role):
        raise InvalidStateError(f"The {role.value} has not declined this project")
    return replace(selection, **{
        f"{role.value}_id": candidate_id,
        f"{role.value}_accepted": False,
        f"{role.value}_rejected": False,
    })
