#!/usr/bin/env python3
"""
Request models for API endpoints.

Enum-valued fields arrive as plain strings and are checked by the services,
so an unknown tier or role is a 400 like every other domain validation error.
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class OnboardingRequest(BaseModel):
    """Register the caller with a marketplace role."""
    role: str = Field(..., description="business or freelancer")
    email: Optional[str] = Field(None, description="Contact email from the identity provider")
    name: Optional[str] = Field(None, description="Display name")


class FreelancerProfileCreate(BaseModel):
    role: str = Field(..., description="designer or developer")
    experience_level: str = Field(..., description="junior, mid or senior")
    skills: List[str] = Field(default_factory=list, description="At least 3 skills")
    tools_used: List[str] = Field(default_factory=list)
    hourly_rate: Optional[float] = Field(None, ge=0)
    bio: Optional[str] = Field(None, max_length=500)
    portfolio_url: Optional[str] = None


class FreelancerProfileUpdate(BaseModel):
    """Editable profile fields. Rating and completed projects are not among them."""
    model_config = ConfigDict(extra='forbid')

    experience_level: Optional[str] = None
    skills: Optional[List[str]] = None
    tools_used: Optional[List[str]] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    bio: Optional[str] = Field(None, max_length=500)
    portfolio_url: Optional[str] = None
    is_available: Optional[bool] = None


class IntakeRequest(BaseModel):
    """Answer to the next intake question. Omit ``project_id`` to start a new project."""
    project_id: Optional[UUID] = None
    answer: str


class GenerateTeamsRequest(BaseModel):
    project_id: UUID


class PaymentDetails(BaseModel):
    order_id: str
    payment_id: str
    signature: str
    tier: Optional[str] = Field(None, description="Tier the order was created for")


class SelectTeamRequest(BaseModel):
    project_id: UUID
    designer_id: UUID
    developer_id: UUID
    tier: str = Field(..., description="premium, pro or freemium")
    payment: Optional[PaymentDetails] = Field(None, description="Required for premium and pro")


class ReplacementSearchRequest(BaseModel):
    project_id: UUID
    role: str = Field(..., description="Role to replace: designer or developer")


class ReplacementSelectRequest(BaseModel):
    project_id: UUID
    role: str
    replacement_id: UUID


class InvitationRespondRequest(BaseModel):
    project_id: UUID
    response: str = Field(..., description="accept or reject")


class ChatMessageRequest(BaseModel):
    message: str
