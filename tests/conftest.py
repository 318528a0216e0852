"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database. The factory helpers below
commit what they create so services under test start from committed rows.
"""

from typing import Any, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config_loader import AppConfig, NotificationsConfig
from core.enums import (
    ExperienceLevel,
    FreelancerRole,
    ProjectStatus,
    TeamTier,
    UserRole,
)
from database.models import Base, Freelancer, Project, User
from database.uow import UnitOfWork


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = factory()
    yield session
    session.close()


@pytest.fixture
def uow(session) -> UnitOfWork:
    return UnitOfWork.for_session(session)


@pytest.fixture
def app_config() -> AppConfig:
    """Defaults with no external notification channels."""
    return AppConfig(notifications=NotificationsConfig(channels={}, use_async_queue=False))


_counter = {"n": 0}


def _next_id(prefix: str) -> str:
    _counter["n"] += 1
    return f"{prefix}_{_counter['n']}"


def make_user(
    session: Session,
    role: UserRole = UserRole.BUSINESS,
    name: str = "Asha Business",
    email: Optional[str] = None,
    external_id: Optional[str] = None
) -> User:
    external_id = external_id or _next_id("user")
    user = User(
        external_id=external_id,
        role=role,
        name=name,
        email=email if email is not None else f"{external_id}@example.com",
    )
    session.add(user)
    session.commit()
    return user


def make_freelancer(
    session: Session,
    role: FreelancerRole,
    experience_level: ExperienceLevel = ExperienceLevel.MID,
    skills: Optional[list] = None,
    rating: float = 4.5,
    completed_projects: int = 0,
    hourly_rate: Optional[float] = None,
    is_available: bool = True,
    name: Optional[str] = None
) -> Freelancer:
    user = make_user(session, role=UserRole.FREELANCER, name=name or _next_id(role.value))
    freelancer = Freelancer(
        user_id=user.id,
        role=role,
        experience_level=experience_level,
        skills=skills if skills is not None else ["Figma", "Photoshop", "Branding"],
        tools_used=[],
        hourly_rate=hourly_rate,
        rating=rating,
        completed_projects=completed_projects,
        is_available=is_available,
    )
    session.add(freelancer)
    session.commit()
    return freelancer


def make_project(session: Session, owner: User, status: ProjectStatus = ProjectStatus.TEAM_PRESENTED, **fields: Any) -> Project:
    values = {
        'website_type': 'portfolio',
        'design_complexity': 'moderate',
        'features': ['login', 'payments'],
        'page_count': 5,
        'timeline': '1 month',
        'budget_range': '25k-50k',
        'intake_step': 6,
    }
    values.update(fields)
    project = Project(owner_id=owner.id, status=status, **values)
    session.add(project)
    session.commit()
    return project


def make_selected_project(
    session: Session,
    owner: User,
    designer: Freelancer,
    developer: Freelancer,
    tier: TeamTier = TeamTier.FREEMIUM,
    **fields: Any
) -> Project:
    """A project with a team invited and nobody responded yet."""
    return make_project(
        session,
        owner,
        status=ProjectStatus.AWAITING_ACCEPTANCE,
        team_designer_id=designer.id,
        team_developer_id=developer.id,
        team_tier=tier,
        **fields
    )
