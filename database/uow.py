import contextlib
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from database.database import SessionLocal
from database.repositories import (
    UserRepository,
    FreelancerRepository,
    ProjectRepository,
    ChatRepository,
    NotificationRepository,
    PaymentRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class UnitOfWork:
    """Repositories sharing one Session, and therefore one transaction."""
    session: Session
    users: UserRepository
    freelancers: FreelancerRepository
    projects: ProjectRepository
    chats: ChatRepository
    notifications: NotificationRepository
    payments: PaymentRepository

    @classmethod
    def for_session(cls, session: Session) -> "UnitOfWork":
        return cls(
            session=session,
            users=UserRepository(session),
            freelancers=FreelancerRepository(session),
            projects=ProjectRepository(session),
            chats=ChatRepository(session),
            notifications=NotificationRepository(session),
            payments=PaymentRepository(session),
        )

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


@contextlib.contextmanager
def marketplace_uow():
    """Per-unit-of-work transaction scope.

    Yields a UnitOfWork bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with marketplace_uow() as uow:
            project = uow.projects.get_by_id(project_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = SessionLocal()
    try:
        uow = UnitOfWork.for_session(session)
        yield uow
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
