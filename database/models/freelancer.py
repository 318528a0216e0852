import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, Integer, Float, JSON, Uuid, Index, func
from sqlalchemy.orm import relationship

from core.enums import FreelancerRole, ExperienceLevel
from .base import Base, enum_column_type


class Freelancer(Base):
    """
    Vetted designer or developer in the directory.

    ``rating`` is only ever lowered by the rejection penalty; profile edits
    cannot touch it.
    """
    __tablename__ = 'freelancers'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)

    role = Column(enum_column_type(FreelancerRole), nullable=False)
    experience_level = Column(enum_column_type(ExperienceLevel), nullable=False)
    skills = Column(JSON, nullable=False, default=list)
    tools_used = Column(JSON, nullable=False, default=list)
    hourly_rate = Column(Float, nullable=True)
    bio = Column(Text)
    portfolio_url = Column(Text)

    rating = Column(Float, nullable=False, default=4.5)
    completed_projects = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="freelancer_profile")

    __table_args__ = (
        Index('idx_freelancers_role_available', 'role', 'is_available'),
    )

    @property
    def name(self) -> str:
        return self.user.name if self.user else 'Freelancer'

    def __repr__(self) -> str:
        return f"<Freelancer {self.id} {self.role.value if self.role else None}>"
