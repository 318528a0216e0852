import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import Float, Numeric, case, cast, func, literal, select, update

from core.enums import FreelancerRole
from database.models import Freelancer
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class FreelancerRepository(BaseRepository):
    def get_by_id(self, freelancer_id: Any) -> Optional[Freelancer]:
        return self.db.get(Freelancer, freelancer_id)

    def get_by_user_id(self, user_id: Any) -> Optional[Freelancer]:
        stmt = select(Freelancer).where(Freelancer.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_available(self, role: FreelancerRole) -> List[Freelancer]:
        """Available freelancers of ``role``, ordered by id so callers see a stable pool."""
        stmt = select(Freelancer).where(
            Freelancer.role == role,
            Freelancer.is_available.is_(True)
        ).order_by(Freelancer.id)
        return list(self.db.execute(stmt).scalars().all())

    def create(self, user_id: Any, fields: Dict[str, Any]) -> Freelancer:
        freelancer = Freelancer(
            user_id=user_id,
            rating=4.5,
            completed_projects=0,
            is_available=True,
            **fields
        )
        self.db.add(freelancer)
        self.db.flush()
        return freelancer

    def apply_rating_penalty(self, freelancer: Freelancer, penalty: float, floor: float) -> float:
        """
        Lower the rating in one UPDATE evaluated against the committed row.

        Mirrors ``core.invitations.apply_penalty``: two penalties landing on the
        same freelancer from concurrent transactions both take effect.
        """
        minimum = literal(floor, Float())
        lowered = func.round(cast(Freelancer.rating - penalty, Numeric(10, 2)), 2)
        stmt = (
            update(Freelancer)
            .where(Freelancer.id == freelancer.id)
            .values(rating=case((lowered < minimum, minimum), else_=lowered))
            .execution_options(synchronize_session=False)
        )
        self.db.execute(stmt)
        self.db.refresh(freelancer, attribute_names=["rating"])
        return freelancer.rating

    def update_profile(self, freelancer: Freelancer, fields: Dict[str, Any]) -> Freelancer:
        for key, value in fields.items():
            setattr(freelancer, key, value)
        self.db.flush()
        return freelancer
