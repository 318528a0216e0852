import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship

from core.enums import TeamTier
from .base import Base, enum_column_type


class Payment(Base):
    """
    A verified checkout confirmation and the selection it paid for.

    ``order_id`` is unique, so one order pays for exactly one team selection
    on exactly one project. Rows are never deleted.
    """
    __tablename__ = 'payments'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Text, nullable=False, unique=True)
    payment_id = Column(Text, nullable=False)
    project_id = Column(Uuid, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False)
    tier = Column(enum_column_type(TeamTier), nullable=False)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now()
    )

    project = relationship("Project")
