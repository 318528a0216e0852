#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class UserView(BaseModel):
    id: str
    external_id: str
    email: str
    name: str
    role: str


class UserResponse(BaseModel):
    success: bool
    user: UserView
    redirect_to: Optional[str] = None


class FreelancerView(BaseModel):
    """Public view of a freelancer profile."""
    id: str
    user_id: str
    name: str
    role: str
    experience_level: str
    skills: List[str] = []
    tools_used: List[str] = []
    hourly_rate: Optional[float] = None
    bio: Optional[str] = None
    portfolio_url: Optional[str] = None
    rating: float
    completed_projects: int
    is_available: bool


class FreelancerProfileResponse(BaseModel):
    success: bool
    profile: Optional[FreelancerView] = None


class OfferView(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tier": "premium",
                "score": 231.0,
                "platform_fee": 250,
                "estimated_hours": 104,
                "estimated_project_cost": 50000
            }
        }
    )

    tier: str
    score: float
    designer: FreelancerView
    developer: FreelancerView
    platform_fee: int
    estimated_hours: int
    estimated_project_cost: int


class GenerateTeamsResponse(BaseModel):
    success: bool
    project_id: str
    teams: List[OfferView]


class TeamView(BaseModel):
    designer_id: str
    developer_id: str
    tier: str
    designer_accepted: bool
    designer_rejected: bool
    developer_accepted: bool
    developer_rejected: bool
    invitation_sent_at: Optional[str] = None
    invitation_expires_at: Optional[str] = Field(
        None, description="Advisory response deadline; not enforced"
    )


class ProjectView(BaseModel):
    id: str
    status: str
    website_type: str
    design_complexity: str
    features: List[str] = []
    page_count: int
    timeline: str
    budget_range: str
    tech_preference: Optional[str] = None
    intake_step: int
    team: Optional[TeamView] = None
    payment_status: Optional[str] = None
    chat_room_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProjectResponse(BaseModel):
    success: bool
    project: ProjectView


class ProjectsResponse(BaseModel):
    success: bool
    count: int
    projects: List[ProjectView]


class AssignedProjectView(ProjectView):
    my_role: str
    my_acceptance: bool
    my_rejection: bool


class AssignedProjectsResponse(BaseModel):
    success: bool
    pending: List[AssignedProjectView]
    ongoing: List[AssignedProjectView]
    completed: List[AssignedProjectView]


class IntakeResponse(BaseModel):
    success: bool
    project_id: str
    step: int
    complete: bool
    next_question: Optional[str] = None
    show_create_team: bool = False


class InvitationResponse(BaseModel):
    success: bool
    status: str
    message: str
    chat_room_id: Optional[str] = None
    accepted_role: Optional[str] = None
    rejected_role: Optional[str] = None


class ReplacementCandidateView(FreelancerView):
    match_score: float


class ReplacementsResponse(BaseModel):
    success: bool
    role: str
    existing_member_id: Optional[str] = None
    replacements: List[ReplacementCandidateView]


class ParticipantView(BaseModel):
    user_id: str
    role: str
    name: str


class ChatRoomView(BaseModel):
    id: str
    project_id: str
    participants: List[ParticipantView]


class ChatRoomResponse(BaseModel):
    success: bool
    chat_room: ChatRoomView


class ChatMessageView(BaseModel):
    id: str
    sender_id: str
    sender_name: str
    message: str
    created_at: Optional[str] = None


class MessagesResponse(BaseModel):
    success: bool
    messages: List[ChatMessageView]
    participants: List[ParticipantView]


class MessageResponse(BaseModel):
    success: bool
    message: ChatMessageView


class NotificationView(BaseModel):
    id: str
    type: str
    title: str
    message: str
    project_id: Optional[str] = None
    is_read: bool
    created_at: Optional[str] = None


class NotificationsResponse(BaseModel):
    success: bool
    count: int
    unread_count: int
    notifications: List[NotificationView]


class NotificationReadResponse(BaseModel):
    success: bool
    notification: NotificationView
