import logging
from typing import Any, Optional

from sqlalchemy import select

from core.enums import UserRole
from database.models import User
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository):
    def get_by_id(self, user_id: Any) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_external_id(self, external_id: str) -> Optional[User]:
        stmt = select(User).where(User.external_id == external_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def upsert(self, external_id: str, role: UserRole, email: str = '', name: str = '') -> User:
        """Create the user on first onboarding, otherwise update role and contact details."""
        user = self.get_by_external_id(external_id)
        if user is None:
            user = User(
                external_id=external_id,
                role=role,
                email=email or '',
                name=name or 'User'
            )
            self.db.add(user)
            logger.info(f"Onboarded new {role.value} user {external_id}")
        else:
            user.role = role
            if email:
                user.email = email
            if name:
                user.name = name
        self.db.flush()
        return user
