"""Payriff gateway: JSON over HTTPS with an HMAC-SHA256 request signature.

Every request body is ``{"payment": <descriptor>, "signature": <sig>}`` where
``sig = base64(HMAC-SHA256(secret, json(descriptor)))``. The descriptor bytes
that are signed are the exact bytes placed in the body.
"""

import base64
import hashlib
import hmac
import json
import time
import uuid
from decimal import Decimal
from typing import Any

import httpx

from testhub.core.app_exceptions import GatewayError
from testhub.core.config import PayriffSettings
from testhub.core.logging import get_logger
from testhub.services.payments.base import (
    GatewayPaymentStatus,
    PaymentGateway,
    format_amount,
)

logger = get_logger(__name__)


def serialize_payload(payload: dict[str, Any]) -> str:
    """Canonical JSON form used both for signing and for the request body."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def compute_signature(serialized: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), serialized.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_payload(payload: dict[str, Any], secret: str) -> tuple[str, str]:
    """Return ``(serialized_payload, signature)``."""
    serialized = serialize_payload(payload)
    return serialized, compute_signature(serialized, secret)


def verify_signature(payload: dict[str, Any], signature: str, secret: str) -> bool:
    """Check a signature against a payload using the same serialization."""
    expected = compute_signature(serialize_payload(payload), secret)
    return hmac.compare_digest(expected, signature)


def build_signed_body(payload: dict[str, Any], secret: str) -> bytes:
    """Request body embedding the signed payload bytes verbatim."""
    serialized, signature = sign_payload(payload, secret)
    return f'{{"payment":{serialized},"signature":{json.dumps(signature)}}}'.encode("utf-8")


def map_payment_status(raw_status: str | None) -> GatewayPaymentStatus:
    """Map a Payriff status string onto the closed status set (case-insensitive)."""
    try:
        return GatewayPaymentStatus((raw_status or "").upper())
    except ValueError:
        return GatewayPaymentStatus.UNKNOWN


def _timestamp_ms() -> str:
    return str(int(time.time() * 1000))


class PayriffGateway(PaymentGateway):
    """JSON + HMAC protocol gateway."""

    name = "payriff"

    def __init__(self, config: PayriffSettings, transport: httpx.BaseTransport | None = None):
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.config.api_url.rstrip("/"),
            timeout=self.config.timeout_seconds,
            transport=self._transport,
            headers={"Merchant-Id": self.config.merchant_id},
        )

    def _call(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        body = build_signed_body(payload, self.config.secret_key)
        with self._client() as client:
            response = self._post(
                client,
                path,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        try:
            data = response.json()
        except ValueError as e:
            raise GatewayError(f"{self.name} returned malformed JSON", {"path": path}) from e
        if not isinstance(data, dict):
            raise GatewayError(f"{self.name} returned an unexpected body", {"path": path})
        return data

    def create_payment(self, amount: Decimal, description: str) -> tuple[str, str]:
        payment_id = str(uuid.uuid4())
        payload = {
            "amount": format_amount(amount),
            "currency": self.config.currency,
            "description": description,
            "paymentId": payment_id,
            "successUrl": self.config.success_url,
            "cancelUrl": self.config.cancel_url,
            "callbackUrl": self.config.callback_url,
            "timestamp": _timestamp_ms(),
        }

        try:
            data = self._call("/create-payment", payload)
            payment_url = data.get("paymentUrl")
            if not payment_url:
                raise GatewayError("Failed to get payment URL from Payriff", {"gateway": self.name})
        except GatewayError:
            logger.error(
                "Error creating payment",
                extra={"gateway": self.name, "payment_id": payment_id},
                exc_info=True,
            )
            raise

        return payment_url, payment_id

    def verify_payment(self, payment_id: str) -> bool:
        payload = {"paymentId": payment_id, "timestamp": _timestamp_ms()}
        try:
            data = self._call("/verify-payment", payload)
        except GatewayError:
            logger.error(
                "Error verifying payment",
                extra={"gateway": self.name, "payment_id": payment_id},
                exc_info=True,
            )
            raise
        return map_payment_status(data.get("status")) is GatewayPaymentStatus.SUCCESS

    def get_payment_status(self, payment_id: str) -> GatewayPaymentStatus:
        """Current status of a payment as Payriff reports it."""
        payload = {"paymentId": payment_id, "timestamp": _timestamp_ms()}
        try:
            data = self._call("/payment-status", payload)
        except GatewayError:
            logger.error(
                "Error getting payment status",
                extra={"gateway": self.name, "payment_id": payment_id},
                exc_info=True,
            )
            raise
        return map_payment_status(data.get("status"))
