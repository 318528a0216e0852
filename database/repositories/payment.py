import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from core.enums import TeamTier
from core.errors import PaymentFailedError
from database.models import Payment
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class PaymentRepository(BaseRepository):
    def get_by_order_id(self, order_id: str) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.order_id == order_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def record(self, order_id: str, payment_id: str, project_id: Any, tier: TeamTier) -> Payment:
        """
        Store a verified payment. A concurrent request that recorded the same
        order first makes the unique constraint fail; that is a reused order.
        """
        payment = Payment(order_id=order_id, payment_id=payment_id, project_id=project_id, tier=tier)
        self.db.add(payment)
        try:
            self.db.flush()
        except IntegrityError as e:
            logger.warning(f"Order {order_id} was recorded concurrently: {e}")
            raise PaymentFailedError("This payment has already been used") from e
        return payment
