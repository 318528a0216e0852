from typing import Optional

from pydantic import BaseModel

from core.enums import NotificationType


class NotificationContent(BaseModel):
    type: NotificationType
    title: str
    message: str


class NotificationMessageBuilder:
    """Titles and bodies for every marketplace event."""

    @staticmethod
    def team_selected(website_type: str, role: str, response_window_hours: int) -> NotificationContent:
        return NotificationContent(
            type=NotificationType.TEAM_SELECTION,
            title="New Project!",
            message=(
                f"🎉 You've been selected as the {role} for a new {website_type} project! "
                f"Please accept or decline within {response_window_hours} hours."
            ),
        )

    @staticmethod
    def replacement_invitation(website_type: str, role: str, response_window_hours: int) -> NotificationContent:
        return NotificationContent(
            type=NotificationType.INVITATION,
            title="New Project Invitation!",
            message=(
                f"🎉 You've been invited to join a {website_type} project as the {role}. "
                f"Accept within {response_window_hours} hours!"
            ),
        )

    @staticmethod
    def team_accepted(website_type: str) -> NotificationContent:
        return NotificationContent(
            type=NotificationType.PROJECT_UPDATE,
            title="Team Accepted!",
            message=f"🎉 Both freelancers accepted your {website_type} project. Chat room is ready!",
        )

    @staticmethod
    def team_unavailable(website_type: str) -> NotificationContent:
        return NotificationContent(
            type=NotificationType.PROJECT_UPDATE,
            title="Team Unavailable",
            message=(
                f"Both freelancers declined your {website_type} project. "
                "Generate a new team to continue."
            ),
        )

    @staticmethod
    def partial_acceptance(website_type: str, accepted_role: str, rejected_role: str) -> NotificationContent:
        return NotificationContent(
            type=NotificationType.PROJECT_UPDATE,
            title="Partial Team Acceptance",
            message=(
                f"The {accepted_role} accepted your {website_type} project. "
                f"The {rejected_role} declined. You can proceed or find a replacement."
            ),
        )

    @staticmethod
    def payment_received(website_type: str, tier: str, order_id: Optional[str]) -> NotificationContent:
        reference = f" (order {order_id})" if order_id else ""
        return NotificationContent(
            type=NotificationType.PAYMENT,
            title="Payment Received",
            message=f"Your {tier} team for the {website_type} project is unlocked{reference}.",
        )

    @staticmethod
    def project_link(base_url: str, project_id: Optional[str]) -> Optional[str]:
        if not project_id:
            return None
        return f"{base_url.rstrip('/')}/projects/{project_id}"
