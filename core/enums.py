#!/usr/bin/env python3
"""
Closed value sets shared by the matching, invitation and persistence layers.

All enums subclass ``str`` so they serialize to their plain values in JSON
responses and are stored as their values in the database.
"""

from enum import Enum


class UserRole(str, Enum):
    BUSINESS = "business"
    FREELANCER = "freelancer"


class FreelancerRole(str, Enum):
    DESIGNER = "designer"
    DEVELOPER = "developer"

    @property
    def other(self) -> "FreelancerRole":
        """The teammate's role."""
        if self is FreelancerRole.DESIGNER:
            return FreelancerRole.DEVELOPER
        return FreelancerRole.DESIGNER


class ExperienceLevel(str, Enum):
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"


class DesignComplexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    ADVANCED = "advanced"


class FeatureCategory(str, Enum):
    """Feature signals the developer bonus looks for."""
    INTERACTIVE = "interactive"
    PAYMENTS = "payments"
    AUTHENTICATION = "authentication"


class TeamTier(str, Enum):
    PREMIUM = "premium"
    PRO = "pro"
    FREEMIUM = "freemium"

    @property
    def is_paid(self) -> bool:
        return self is not TeamTier.FREEMIUM


# Rank 1 -> premium, rank 2 -> pro, rank 3 -> freemium
TIERS_BY_RANK = (TeamTier.PREMIUM, TeamTier.PRO, TeamTier.FREEMIUM)


class ProjectStatus(str, Enum):
    CHATTING = "chatting"
    TEAM_PRESENTED = "team_presented"
    AWAITING_ACCEPTANCE = "awaiting_acceptance"
    TEAM_ACCEPTED = "team_accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class InvitationDecision(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class Resolution(str, Enum):
    """Outcome of evaluating a selected team after a response."""
    WAITING = "waiting"
    BOTH_ACCEPTED = "both_accepted"
    BOTH_REJECTED = "both_rejected"
    PARTIAL_ACCEPTANCE = "partial_acceptance"


class NotificationType(str, Enum):
    INVITATION = "invitation"
    TEAM_SELECTION = "team_selection"
    MESSAGE = "message"
    PAYMENT = "payment"
    PROJECT_UPDATE = "project_update"


class ChatRole(str, Enum):
    BUSINESS = "business"
    DESIGNER = "designer"
    DEVELOPER = "developer"
