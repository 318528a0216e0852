#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from typing import Generator, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session, sessionmaker

from core.config_loader import get_config
from core.errors import NotAuthenticatedError, NotFoundError
from database.database import build_engine
from database.models import User
from database.uow import UnitOfWork


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self):
        db_config = get_config().database
        self.engine = build_engine(db_config.url, db_config.pool_size, db_config.max_overflow)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

    def get_session(self) -> Generator[Session, None, None]:
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()


_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Create the engine on first request so importing the app never connects."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...
    """
    yield from get_db_manager().get_session()


def get_uow(db: Session = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork.for_session(db)


def get_identity(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Subject id of the caller, as verified by the identity provider in front of us."""
    if not x_user_id or not x_user_id.strip():
        raise NotAuthenticatedError("Unauthorized")
    return x_user_id.strip()


def get_current_user(
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_uow)
) -> User:
    user = uow.users.get_by_external_id(identity)
    if user is None:
        raise NotFoundError("User not found; complete onboarding first")
    return user
