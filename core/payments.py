#!/usr/bin/env python3
"""
Payment confirmation verification.

Only the confirmation sent back by the checkout is checked here. Creating
orders and capturing payments happen at the gateway.
"""

import hashlib
import hmac
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from core.enums import TeamTier
from core.errors import PaymentFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentConfirmation:
    """What the checkout returns. ``tier`` is the team the order was created for, when known."""
    order_id: str
    payment_id: str
    signature: str
    tier: Optional[TeamTier] = None


class PaymentVerifier(ABC):
    @abstractmethod
    def verify(self, confirmation: PaymentConfirmation) -> bool:
        raise NotImplementedError

    def require_valid(self, confirmation: PaymentConfirmation) -> None:
        if not self.verify(confirmation):
            logger.warning(f"Payment confirmation for order {confirmation.order_id} failed verification")
            raise PaymentFailedError("Payment confirmation could not be verified")


class RazorpaySignatureVerifier(PaymentVerifier):
    """Checks HMAC_SHA256(order_id + "|" + payment_id, key_secret) against the signature."""

    def __init__(self, key_secret: Optional[str]):
        self.key_secret = key_secret

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        payload = f"{order_id}|{payment_id}".encode("utf-8")
        return hmac.new(self.key_secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()

    def verify(self, confirmation: PaymentConfirmation) -> bool:
        if not self.key_secret:
            logger.error("Payment key secret is not configured; rejecting confirmation")
            return False
        if not (confirmation.order_id and confirmation.payment_id and confirmation.signature):
            return False
        expected = self.expected_signature(confirmation.order_id, confirmation.payment_id)
        return hmac.compare_digest(expected, confirmation.signature)
