import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, JSON, Uuid, Index, func
from sqlalchemy.orm import relationship

from core.enums import ProjectStatus, TeamTier, PaymentStatus
from .base import Base, enum_column_type


class Project(Base):
    """
    A business's web project.

    Requirement fields are filled by the intake script. The selected team is
    stored inline: the team columns are either all set or all null, and the
    four response flags track each freelancer's answer to the invitation.

    ``version_id`` makes every UPDATE conditional on the version that was read,
    so two concurrent invitation responses cannot both win.
    """
    __tablename__ = 'projects'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    # Intake
    website_type = Column(Text, nullable=False, default='')
    design_complexity = Column(Text, nullable=False, default='')
    features = Column(JSON, nullable=False, default=list)
    page_count = Column(Integer, nullable=False, default=0)
    timeline = Column(Text, nullable=False, default='')
    budget_range = Column(Text, nullable=False, default='')
    tech_preference = Column(Text)
    intake_step = Column(Integer, nullable=False, default=0)

    status = Column(enum_column_type(ProjectStatus), nullable=False, default=ProjectStatus.CHATTING)

    # Selected team
    team_designer_id = Column(Uuid, ForeignKey('freelancers.id'), nullable=True)
    team_developer_id = Column(Uuid, ForeignKey('freelancers.id'), nullable=True)
    team_tier = Column(enum_column_type(TeamTier), nullable=True)
    designer_accepted = Column(Boolean, nullable=False, default=False)
    designer_rejected = Column(Boolean, nullable=False, default=False)
    developer_accepted = Column(Boolean, nullable=False, default=False)
    developer_rejected = Column(Boolean, nullable=False, default=False)
    invitation_sent_at = Column(TIMESTAMP(timezone=True))

    # Payment
    payment_status = Column(enum_column_type(PaymentStatus), nullable=True)
    payment_order_id = Column(Text, unique=True)

    version_id = Column(Integer, nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="projects")
    designer = relationship("Freelancer", foreign_keys=[team_designer_id])
    developer = relationship("Freelancer", foreign_keys=[team_developer_id])
    chat_room = relationship("ChatRoom", back_populates="project", uselist=False)

    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        Index('idx_projects_owner_created', 'owner_id', 'created_at'),
        Index('idx_projects_team_designer', 'team_designer_id'),
        Index('idx_projects_team_developer', 'team_developer_id'),
        Index('idx_projects_status', 'status'),
    )

    @property
    def has_selected_team(self) -> bool:
        return self.team_designer_id is not None and self.team_developer_id is not None
