#!/usr/bin/env python3
"""
Unit tests for payment confirmation verification.
"""

import hashlib
import hmac
import unittest

from core.errors import PaymentFailedError
from core.payments import PaymentConfirmation, RazorpaySignatureVerifier

SECRET = "test_key_secret"


def signed(order_id="order_1", payment_id="pay_1", secret=SECRET) -> PaymentConfirmation:
    signature = hmac.new(
        secret.encode("utf-8"),
        f"{order_id}|{payment_id}".encode("utf-8"),
        hashlib.sha256
    ).hexdigest()
    return PaymentConfirmation(order_id=order_id, payment_id=payment_id, signature=signature)


class TestRazorpaySignatureVerifier(unittest.TestCase):

    def test_valid_signature(self):
        verifier = RazorpaySignatureVerifier(SECRET)
        self.assertTrue(verifier.verify(signed()))
        verifier.require_valid(signed())

    def test_wrong_secret(self):
        verifier = RazorpaySignatureVerifier(SECRET)
        self.assertFalse(verifier.verify(signed(secret="other")))
        with self.assertRaises(PaymentFailedError):
            verifier.require_valid(signed(secret="other"))

    def test_tampered_payment_id(self):
        confirmation = signed()
        tampered = PaymentConfirmation(order_id=confirmation.order_id, payment_id="pay_2", signature=confirmation.signature)
        self.assertFalse(RazorpaySignatureVerifier(SECRET).verify(tampered))

    def test_missing_secret_rejects_everything(self):
        self.assertFalse(RazorpaySignatureVerifier(None).verify(signed()))
        self.assertFalse(RazorpaySignatureVerifier("").verify(signed()))

    def test_missing_fields(self):
        verifier = RazorpaySignatureVerifier(SECRET)
        self.assertFalse(verifier.verify(PaymentConfirmation(order_id="", payment_id="pay_1", signature="x")))
        self.assertFalse(verifier.verify(PaymentConfirmation(order_id="order_1", payment_id="pay_1", signature="")))


if __name__ == '__main__':
    unittest.main()
