import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Uuid, Index, func
from sqlalchemy.orm import relationship

from core.enums import UserRole
from .base import Base, enum_column_type


class User(Base):
    """
    Account known to the marketplace.

    Authentication happens at the identity provider; ``external_id`` is the
    provider's subject id and is what callers present in ``X-User-Id``.
    """
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    external_id = Column(Text, nullable=False, unique=True)
    email = Column(Text, nullable=False, default='')
    name = Column(Text, nullable=False, default='User')
    role = Column(enum_column_type(UserRole), nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    freelancer_profile = relationship("Freelancer", back_populates="user", uselist=False)
    projects = relationship("Project", back_populates="owner")

    __table_args__ = (
        Index('idx_users_external_id', 'external_id'),
    )
